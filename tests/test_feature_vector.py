"""Unit tests for FeatureVector arithmetic."""

import pytest

from clip_reader import FeatureLengthError, FeatureVector

def test_zero_vector_of_given_length():
    """An integer builds an all-zero vector."""
    vector = FeatureVector(4)

    assert vector.size() == len(vector) == 4
    assert list(vector) == [0.0, 0.0, 0.0, 0.0]


def test_arithmetic_and_distance():
    """Sum, difference, dot product and distance work component-wise."""
    first  = FeatureVector([1.0, 2.0])
    second = FeatureVector([4.0, 6.0])

    assert first + second == FeatureVector([5.0, 8.0])
    assert second - first == FeatureVector([3.0, 4.0])
    assert first.dot(second) == 16.0
    assert first.euclidean_distance(second) == 5.0


@pytest.mark.parametrize("operation", [
    lambda a, b: a + b,
    lambda a, b: a - b,
    lambda a, b: a.dot(b),
    lambda a, b: a.euclidean_distance(b)
])
def test_length_mismatch_raises(operation):
    """Vectors of different lengths cannot be combined."""
    with pytest.raises(FeatureLengthError):
        operation(FeatureVector([1.0]), FeatureVector([1.0, 2.0]))


def test_component_access_is_bounds_checked():
    """Components are read by index within the vector only."""
    vector = FeatureVector([0.5, 1.5])

    assert vector[1] == 1.5
    with pytest.raises(IndexError):
        vector[2]


def test_components_are_read_only():
    """The underlying array cannot be modified."""
    with pytest.raises(ValueError):
        FeatureVector([1.0]).values[0] = 2.0
