import numpy as np

from clip_reader.core.preprocessor.clip   import Clip
from clip_reader.core.preprocessor.region import Region
from collections                          import deque
from dataclasses                          import dataclass, field

# Defaults for the empirical segmentation heuristics; overridable from preprocessor.yml
ACCENT_BAND_RATIO    = 0.25 # Bands shorter than this fraction of the mean region height hold accents
ACCENT_OVERLAP_RATIO = 0.5  # Regions merge when shared columns exceed this fraction of the narrower width
SPACE_WIDTH_RATIO    = 1.0  # Gaps wider than this fraction of the mean character width are word breaks

NEIGHBOURS = (
    (-1, -1), (-1, 0), (-1, 1),
    ( 0, -1),          ( 0, 1),
    ( 1, -1), ( 1, 0), ( 1, 1)
)

# -------------------- Data Classes --------------------

@dataclass
class LineBand:
    """
    Maximal run of rows containing ink, inclusive on both ends.
    """
    top    : int
    bottom : int

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1

    def contains(self, region: Region) -> bool:
        return self.top <= region.top_row <= self.bottom

@dataclass
class SegmentationResult:
    """
    Regions in reading order plus the word-break positions found between them.
    """
    regions                : list[Region]   = field(default_factory = list)
    space_locations        : list[int]      = field(default_factory = list)  # Number of regions preceding each break
    line_bands             : list[LineBand] = field(default_factory = list)
    regions_before_merging : int            = 0
    mean_gap               : float | None   = None

# -------------------- Region Growing --------------------

def grow_regions(pixels: np.ndarray) -> tuple[list[Region], np.ndarray]:
    """
    Groups 8-connected ink pixels into regions with a breadth-first worklist.

    Args:
        pixels : Binary grid, 1 for ink

    Returns:
        tuple: (regions in seed order, boolean map of visited pixels)
    """
    height, width = pixels.shape
    visited       = np.zeros((height, width), dtype = bool)
    regions       = []

    for seed_row, seed_col in zip(*np.nonzero(pixels)):
        if visited[seed_row, seed_col]:
            continue

        region = Region()
        queue  = deque([(int(seed_row), int(seed_col))])
        visited[seed_row, seed_col] = True

        while queue:
            row, col = queue.popleft()
            region.add(row, col)

            for d_row, d_col in NEIGHBOURS:
                next_row, next_col = row + d_row, col + d_col
                if (
                    0 <= next_row < height and 0 <= next_col < width
                    and pixels[next_row, next_col] and not visited[next_row, next_col]
                ):
                    visited[next_row, next_col] = True
                    queue.append((next_row, next_col))

        regions.append(region)

    return regions, visited

# -------------------- Line Bands --------------------

def find_line_bands(visited: np.ndarray) -> list[LineBand]:
    """
    Finds maximal runs of rows holding at least one visited pixel.
    """
    bands = []
    start = None

    for row, inked in enumerate(visited.any(axis = 1)):
        if inked and start is None:
            start = row
        elif not inked and start is not None:
            bands.append(LineBand(top = start, bottom = row - 1))
            start = None

    if start is not None:
        bands.append(LineBand(top = start, bottom = visited.shape[0] - 1))
    return bands

def merge_line_bands(
    bands       : list[LineBand],
    mean_height : float,
    ratio       : float = ACCENT_BAND_RATIO
) -> list[LineBand]:
    """
    Joins accent bands with the line below them.

    A band is an accent band when its own height is below `ratio` times the mean region
    height, rounded to the nearest pixel. Each band is judged on its own rows, never on a
    band already grown by merging, so two text lines of different sizes stay apart.

    Args:
        bands       : Line bands from top to bottom
        mean_height : Mean height of the regions found in the clip
        ratio       : Fraction of the mean height below which a band holds accents

    Returns:
        list: Bands after merging, top to bottom
    """
    limit   = int(mean_height * ratio + 0.5)
    merged  = []
    pending = None  # Top row of the accent bands waiting for their line

    for band in bands:
        top = band.top if pending is None else pending
        if band.height < limit:
            pending = top
            continue
        merged.append(LineBand(top = top, bottom = band.bottom))
        pending = None

    if pending is not None:
        merged.append(LineBand(top = pending, bottom = bands[-1].bottom))
    return merged

# -------------------- Accent Merging and Ordering --------------------

def merge_band_regions(regions: list[Region], ratio: float = ACCENT_OVERLAP_RATIO) -> list[Region]:
    """
    Repeatedly merges regions of one band whose column ranges overlap by more than
    `ratio` times the narrower width, so accents rejoin their base glyph.
    """
    regions = list(regions)
    merged  = True

    while merged:
        merged = False
        for i in range(len(regions)):
            for j in range(i + 1, len(regions)):
                first, second = regions[i], regions[j]
                if first.column_overlap(second) > ratio * min(first.width, second.width):
                    regions[i] = first + second
                    del regions[j]
                    merged = True
                    break
            if merged:
                break

    return regions

def organize_regions(
    regions : list[Region],
    bands   : list[LineBand],
    ratio   : float = ACCENT_OVERLAP_RATIO
) -> list[Region]:
    """
    Merges accents band by band, then returns every region in reading order.
    """
    ordered = []
    for band in bands:
        band_regions = [region for region in regions if band.contains(region)]
        ordered.extend(sorted(merge_band_regions(band_regions, ratio)))
    return ordered

# -------------------- Space Detection --------------------

def find_spaces_between_words(
    regions : list[Region],
    ratio   : float = SPACE_WIDTH_RATIO
) -> tuple[list[int], float | None]:
    """
    Locates word breaks between consecutive regions in reading order.

    A break is reported when the gap (next.left_col - previous.right_col + 1) exceeds the mean
    gap, exceeds `ratio` times the mean character width, or when the two regions share columns,
    which also covers the wrap onto a new line.

    Args:
        regions : Regions in reading order
        ratio   : Fraction of the mean character width that always counts as a break

    Returns:
        tuple: (number of regions preceding each break, mean gap or None when there is no gap)
    """
    if len(regions) < 2:
        return [], None

    pairs      = list(zip(regions, regions[1:]))
    overlapped = [following.left_col <= previous.right_col for previous, following in pairs]
    gaps       = [following.left_col - previous.right_col + 1 for previous, following in pairs]
    separated  = [gap for gap, overlap in zip(gaps, overlapped) if not overlap]
    mean_gap   = sum(separated) / len(separated) if separated else None
    mean_width = sum(region.width for region in regions) / len(regions)

    spaces = []
    for position, (gap, overlap) in enumerate(zip(gaps, overlapped), start = 1):
        if overlap or gap > mean_gap or gap > ratio * mean_width:
            spaces.append(position)
    return spaces, mean_gap

# -------------------- Segmentation --------------------

def segment_clip(
    clip                 : Clip,
    accent_band_ratio    : float = ACCENT_BAND_RATIO,
    accent_overlap_ratio : float = ACCENT_OVERLAP_RATIO,
    space_width_ratio    : float = SPACE_WIDTH_RATIO
) -> SegmentationResult:
    """
    Extracts the character regions of a binary clip and the word breaks between them.
    A clip without ink yields an empty result.

    Raises:
        ValueError: If the clip has not been thresholded
    """
    if not clip.binary:
        raise ValueError("Regions can only be isolated on a thresholded clip")

    regions, visited = grow_regions(clip.pixels)
    if not regions:
        return SegmentationResult()

    mean_height  = sum(region.height for region in regions) / len(regions)
    bands        = merge_line_bands(find_line_bands(visited), mean_height, accent_band_ratio)
    ordered      = organize_regions(regions, bands, accent_overlap_ratio)
    spaces, mean = find_spaces_between_words(ordered, space_width_ratio)

    return SegmentationResult(
        regions                = ordered,
        space_locations        = spaces,
        line_bands             = bands,
        regions_before_merging = len(regions),
        mean_gap               = mean
    )
