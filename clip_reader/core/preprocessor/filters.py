import cv2
import numpy as np

from clip_reader.core.preprocessor.clip import Clip

GRAY_LEVELS      = 256
AVERAGING_KERNEL = np.array([
    [1, 2, 1],
    [2, 4, 2],
    [1, 2, 1]
], dtype = np.float64)

# Neighbours checked by each directional template, as (row, col) offsets from the target
TEMPLATE_SIDES = {
    'above' : ((-1, -1), (-1, 0), (-1, 1)),
    'below' : (( 1, -1), ( 1, 0), ( 1, 1)),
    'left'  : ((-1, -1), ( 0, -1), ( 1, -1)),
    'right' : ((-1,  1), ( 0,  1), ( 1,  1))
}

# -------------------- Global Thresholding --------------------

def compute_otsu_threshold(gray_levels: np.ndarray) -> int:
    """
    Selects the gray level maximizing the between-class variance of the histogram.
    When a run of consecutive levels shares the maximum, the middle of that run is taken.

    Args:
        gray_levels : Array of 8-bit gray levels

    Returns:
        int: Optimal threshold; levels at or below it are ink
    """
    histogram     = np.bincount(gray_levels.ravel(), minlength = GRAY_LEVELS).astype(np.float64)
    probabilities = histogram / histogram.sum()
    omega         = np.cumsum(probabilities)
    mu_t          = np.cumsum(probabilities * np.arange(GRAY_LEVELS))
    mu            = mu_t[-1]

    with np.errstate(divide = 'ignore', invalid = 'ignore'):
        variance = (mu * omega - mu_t) ** 2 / (omega * (1.0 - omega))

    variance = np.nan_to_num(variance, nan = 0.0, posinf = 0.0, neginf = 0.0)
    variance[(omega <= 1e-12) | (omega >= 1.0 - 1e-12)] = 0.0

    first = int(np.argmax(variance))
    last  = first
    while last + 1 < GRAY_LEVELS and np.isclose(variance[last + 1], variance[first], rtol = 1e-12, atol = 0.0):
        last += 1

    return (first + last) // 2

def apply_global_thresholding(clip: Clip) -> tuple[Clip, int | None]:
    """
    Binarizes a grayscale clip with Otsu's threshold. An already binary clip is returned unchanged.

    Returns:
        tuple: (binary clip, threshold used or None when nothing was done)
    """
    if clip.binary:
        return clip.copy(), None

    threshold = compute_otsu_threshold(clip.pixels)
    return Clip((clip.pixels <= threshold).astype(np.uint8), binary = True), threshold

# -------------------- Noise Removal --------------------

def apply_averaging_filter(clip: Clip) -> Clip:
    """
    Smooths a grayscale clip with the 1-2-1 weighted 3x3 mean.
    Near the borders only the kernel weights falling inside the clip are used for normalization.

    Raises:
        ValueError: If the clip has already been thresholded
    """
    if clip.binary:
        raise ValueError("The averaging filter only applies to grayscale clips")

    pixels   = clip.pixels.astype(np.float64)
    weighted = cv2.filter2D(pixels, -1, AVERAGING_KERNEL, borderType = cv2.BORDER_CONSTANT)
    weights  = cv2.filter2D(np.ones_like(pixels), -1, AVERAGING_KERNEL, borderType = cv2.BORDER_CONSTANT)
    averaged = np.clip(np.rint(weighted / weights), 0, 255).astype(np.uint8)
    return Clip(averaged)

def template_sweep(pixels: np.ndarray, side: str) -> np.ndarray:
    """
    One template pass: an interior pixel takes the value shared by its three neighbours on the given side.
    """
    height, width = pixels.shape
    neighbours    = [
        pixels[1 + d_row:height - 1 + d_row, 1 + d_col:width - 1 + d_col]
        for d_row, d_col in TEMPLATE_SIDES[side]
    ]
    all_ink        = np.logical_and.reduce(neighbours)
    all_background = ~np.logical_or.reduce(neighbours)

    result   = pixels.copy()
    interior = result[1:-1, 1:-1]
    interior[all_ink]        = 1
    interior[all_background] = 0
    return result

def apply_template_filter(clip: Clip) -> Clip:
    """
    Removes isolated specks and fills pinholes on a binary clip with four directional sweeps.

    Raises:
        ValueError: If the clip has not been thresholded
    """
    if not clip.binary:
        raise ValueError("The template filter only applies to binary clips")

    pixels = clip.pixels.copy()
    if clip.height < 3 or clip.width < 3:
        return Clip(pixels, binary = True)

    for side in TEMPLATE_SIDES:
        pixels = template_sweep(pixels, side)
    return Clip(pixels, binary = True)
