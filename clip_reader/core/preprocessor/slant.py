import numpy as np

from clip_reader.core.preprocessor.region import Region

MAX_SHEAR_ANGLE = 45

def shear_rows(region: Region, angle: int) -> np.ndarray:
    """
    Row coordinates sheared by row - col * tan(angle), rounded to the nearest integer.
    The angle index is handed to tan() as is, so it acts as radians.
    """
    rows, cols = np.array(region.coordinates).T
    return np.rint(rows - cols * np.tan(angle)).astype(np.int64)

def estimate_slant_angle(region: Region, max_angle: int = MAX_SHEAR_ANGLE) -> int:
    """
    Picks the shear angle index whose sheared rows pile the most pixels onto a single line.
    Ties keep the smallest angle, so an unslanted region stays at 0.

    Raises:
        ValueError: If the region is empty
    """
    if region.is_empty():
        raise ValueError("Cannot estimate the slant of an empty region")

    best_angle, best_peak = 0, -1
    for angle in range(max_angle + 1):
        _, counts = np.unique(shear_rows(region, angle), return_counts = True)
        peak      = int(counts.max())
        if peak > best_peak:
            best_angle, best_peak = angle, peak
    return best_angle

def correct_slant(region: Region, max_angle: int = MAX_SHEAR_ANGLE) -> tuple[Region, int]:
    """
    Rewrites the region's rows with its estimated shear.

    Returns:
        tuple: (corrected region, or the same region when the angle is 0; chosen angle index)
    """
    angle = estimate_slant_angle(region, max_angle)
    if angle == 0:
        return region, angle

    rows = shear_rows(region, angle)
    return Region(zip(rows.tolist(), (col for _, col in region.coordinates))), angle
