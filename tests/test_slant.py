"""Unit tests for shear-based slant estimation."""

import pytest

from clip_reader                         import Region
from clip_reader.core.preprocessor.slant import correct_slant, estimate_slant_angle

def test_horizontal_stroke_is_not_sheared():
    """All pixels already share a row, so the angle stays 0."""
    assert estimate_slant_angle(Region((0, col) for col in range(10))) == 0


def test_vertical_stroke_keeps_smallest_angle():
    """When no angle improves the peak, ties keep angle 0 and the region is returned as is."""
    region = Region((row, 0) for row in range(10))

    corrected, angle = correct_slant(region)

    assert angle == 0
    assert corrected is region


def test_diagonal_stroke_is_straightened():
    """A diagonal line gets a shear that piles its pixels onto few rows."""
    region           = Region((index, index) for index in range(20))
    corrected, angle = correct_slant(region)

    assert angle > 0
    assert corrected.size == region.size
    assert len({row for row, _ in corrected}) < 10
    assert [col for _, col in corrected] == [col for _, col in region]


def test_empty_region_cannot_be_estimated():
    """Estimating needs at least one pixel."""
    with pytest.raises(ValueError):
        estimate_slant_angle(Region())
