import numpy as np

PADDING = 2  # Room for the neighbour rings of pixels next to the plane border

def neighbour_ring(pixels: np.ndarray, row: int, col: int) -> list[int]:
    """
    The eight neighbours p2..p9, clockwise from north.
    """
    return [
        int(pixels[row - 1, col    ]), int(pixels[row - 1, col + 1]),
        int(pixels[row,     col + 1]), int(pixels[row + 1, col + 1]),
        int(pixels[row + 1, col    ]), int(pixels[row + 1, col - 1]),
        int(pixels[row,     col - 1]), int(pixels[row - 1, col - 1])
    ]

def transitions(ring: list[int]) -> int:
    """
    Number of 0 -> 1 transitions walking once around the ring.
    """
    return sum(1 for current, following in zip(ring, ring[1:] + ring[:1]) if current == 0 and following == 1)

def is_erasable(pixels: np.ndarray, row: int, col: int) -> bool:
    """
    Hilditch's four conditions for removing an ink pixel.
    """
    ring = neighbour_ring(pixels, row, col)
    p2, _, p4, _, p6, _, p8, _ = ring

    if not 2 <= sum(ring) <= 6:
        return False
    if transitions(ring) != 1:
        return False
    if p2 * p4 * p8 != 0 and transitions(neighbour_ring(pixels, row - 1, col)) == 1:
        return False
    if p2 * p4 * p6 != 0 and transitions(neighbour_ring(pixels, row, col + 1)) == 1:
        return False
    return True

def skeletonize(bitmap: np.ndarray) -> tuple[np.ndarray, int]:
    """
    Thins the ink strokes of a binary bitmap with Hilditch's algorithm.

    Sweeps visit the ink pixels in row-major order and erase them in place; sweeping stops
    after the first pass that erases nothing. Every other pass lowers the ink count, so the
    loop always ends.

    Args:
        bitmap : 0/1 array

    Returns:
        tuple: (thinned bitmap, number of sweeps performed)
    """
    pixels = np.pad(np.asarray(bitmap, dtype = np.uint8), PADDING)
    sweeps = 0

    while True:
        sweeps += 1
        erased  = 0
        for row, col in zip(*np.nonzero(pixels)):
            if is_erasable(pixels, row, col):
                pixels[row, col] = 0
                erased += 1
        if erased == 0:
            break

    return pixels[PADDING:-PADDING, PADDING:-PADDING].copy(), sweeps
