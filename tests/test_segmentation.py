"""Unit tests for region isolation, accent merging and word-break detection."""

import pytest

from clip_reader                                import Clip, Region
from clip_reader.core.preprocessor.segmentation import (
    LineBand,
    find_line_bands,
    find_spaces_between_words,
    grow_regions,
    merge_line_bands,
    segment_clip
)

def test_two_separate_blocks_form_two_words(binary_clip):
    """Two distant blocks are two regions with a break between them."""
    result = segment_clip(binary_clip(15, 40, [(5, 5, 5, 5), (5, 30, 5, 5)]))

    assert len(result.regions) == 2
    assert result.regions[0].left_col == 5
    assert result.regions[1].left_col == 30
    assert result.space_locations == [1]
    assert result.mean_gap == 22


def test_diagonal_pixels_are_connected(binary_clip):
    """Regions grow through the eight neighbours."""
    result = segment_clip(binary_clip(6, 6, [(0, 0, 1, 1), (1, 1, 1, 1), (2, 2, 1, 1)]))

    assert len(result.regions) == 1
    assert result.regions[0].size == 3


def test_regions_partition_the_ink(binary_clip):
    """Every ink pixel lands in exactly one region."""
    clip   = binary_clip(20, 30, [(2, 2, 4, 4), (2, 10, 6, 2), (12, 3, 3, 9)])
    result = segment_clip(clip)
    pixels = [pixel for region in result.regions for pixel in region]

    assert len(pixels) == len(set(pixels)) == clip.ink_count()


def test_evenly_spaced_blocks_have_no_breaks(binary_clip):
    """Gaps no wider than the characters are not word breaks."""
    result = segment_clip(binary_clip(10, 25, [(2, 0, 5, 5), (2, 7, 5, 5), (2, 14, 5, 5)]))

    assert len(result.regions) == 3
    assert result.space_locations == []


def test_wide_gap_is_a_break(binary_clip):
    """Only the gap above the mean is reported."""
    result = segment_clip(binary_clip(10, 30, [(2, 0, 5, 5), (2, 7, 5, 5), (2, 20, 5, 5)]))

    assert result.space_locations == [2]
    assert result.mean_gap == pytest.approx(7.0)


def test_accent_joins_its_base_glyph(binary_clip):
    """A thin accent band joins the line below it and the accent merges with its glyph."""
    glyphs = [(10, 5, 12, 5), (10, 15, 12, 5), (10, 25, 12, 5)]
    result = segment_clip(binary_clip(25, 35, glyphs + [(6, 6, 1, 3)]))

    assert result.regions_before_merging == 4
    assert len(result.regions) == 3
    assert result.regions[0].size == 63
    assert result.line_bands == [LineBand(top = 6, bottom = 21)]


def test_short_line_above_tall_line_stays_apart(binary_clip):
    """A line of short glyphs is not mistaken for accents of the taller line below."""
    short  = [(2, left, 4, 5) for left in (2, 10, 18)]
    tall   = [(10, left, 10, 5) for left in (2, 10, 18)]
    result = segment_clip(binary_clip(22, 25, short + tall))

    assert result.line_bands == [LineBand(top = 2, bottom = 5), LineBand(top = 10, bottom = 19)]
    assert len(result.regions) == 6
    assert [region.top_row for region in result.regions] == [2, 2, 2, 10, 10, 10]
    assert all(region.size in (20, 50) for region in result.regions)


def test_lines_are_read_in_order(binary_clip):
    """Regions of the first line precede those of the second, and the wrap is a break."""
    result = segment_clip(binary_clip(20, 20, [(12, 2, 5, 5), (2, 12, 5, 5), (2, 2, 5, 5)]))

    assert [(region.top_row, region.left_col) for region in result.regions] == [(2, 2), (2, 12), (12, 2)]
    assert len(result.line_bands) == 2
    assert 2 in result.space_locations


def test_clip_without_ink_yields_nothing(binary_clip):
    """A blank clip has no regions and no breaks."""
    result = segment_clip(binary_clip(5, 5, []))

    assert result.regions == []
    assert result.space_locations == []


def test_segmentation_requires_thresholded_clip(gray_clip):
    """Gray-level clips must be thresholded first."""
    with pytest.raises(ValueError):
        segment_clip(gray_clip(5, 5, []))


def test_find_line_bands_closes_band_at_bottom_edge():
    """A band touching the last row is still reported."""
    visited = Clip([[0], [1], [0], [1], [1]], binary = True).pixels.astype(bool)

    assert find_line_bands(visited) == [LineBand(1, 1), LineBand(3, 4)]


def test_only_accent_bands_are_merged():
    """Bands below the accent height join the next line; text lines of any size stay apart."""
    bands = [LineBand(0, 4), LineBand(8, 12), LineBand(15, 15), LineBand(17, 21)]

    assert merge_line_bands(bands, mean_height = 8.0, ratio = 0.25) == [
        LineBand(0, 4), LineBand(8, 12), LineBand(15, 21)
    ]
    assert merge_line_bands([LineBand(0, 4), LineBand(8, 17)], mean_height = 7.5) == [
        LineBand(0, 4), LineBand(8, 17)
    ]


def test_accent_bands_are_judged_on_their_own_height():
    """Stacked accent bands all join the line below; a trailing thin band stays its own line."""
    assert merge_line_bands([LineBand(0, 0), LineBand(2, 2), LineBand(4, 9)], mean_height = 8.0) == [LineBand(0, 9)]
    assert merge_line_bands([LineBand(0, 9), LineBand(11, 11)], mean_height = 8.0) == [
        LineBand(0, 9), LineBand(11, 11)
    ]


def test_single_region_has_no_breaks():
    """Breaks need at least two regions."""
    assert find_spaces_between_words([Region([(0, 0)])]) == ([], None)


def test_grow_regions_collects_a_whole_block(binary_clip):
    """A solid 3x3 block grows into one region of nine pixels."""
    regions, visited = grow_regions(binary_clip(7, 7, [(2, 2, 3, 3)]).pixels)

    assert len(regions) == 1
    assert len(regions[0].coordinates) == 9
    assert regions[0].height == regions[0].width == 3
    assert visited.sum() == 9
