import cv2
import numpy as np

from clip_reader.core.preprocessor.region import Region
from pathlib                              import Path
from PIL                                  import Image

PLANE_SIZE = 35

class Pattern:
    """
    Fixed 35x35 binary plane holding one rasterized character.
    The plane is read-only once built; clean() is the only way to reset it.
    """

    def __init__(self, pixels: np.ndarray | None = None):
        """
        Args:
            pixels : 35x35 array of 0/1 values (an empty plane when omitted)

        Raises:
            ValueError: If the array has the wrong shape or holds other values than 0 and 1
        """
        if pixels is None:
            pixels = np.zeros((PLANE_SIZE, PLANE_SIZE), dtype = np.uint8)

        pixels = np.array(pixels, dtype = np.uint8)
        if pixels.shape != (PLANE_SIZE, PLANE_SIZE):
            raise ValueError(f"A pattern plane is {PLANE_SIZE}x{PLANE_SIZE}, got {pixels.shape}")
        if not np.isin(pixels, (0, 1)).all():
            raise ValueError("A pattern may only hold 0 and 1")

        self._pixels = pixels
        self._pixels.setflags(write = False)

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def height(self) -> int:
        return PLANE_SIZE

    @property
    def width(self) -> int:
        return PLANE_SIZE

    def __getitem__(self, position: tuple[int, int]) -> int:
        row, col = position
        if not (0 <= row < PLANE_SIZE and 0 <= col < PLANE_SIZE):
            raise IndexError(f"Pixel ({row}, {col}) is outside the pattern plane")
        return int(self._pixels[row, col])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    __hash__ = None

    def clean(self):
        """
        Resets every pixel to background.
        """
        self._pixels = np.zeros((PLANE_SIZE, PLANE_SIZE), dtype = np.uint8)
        self._pixels.setflags(write = False)

    def area(self) -> int:
        return int(self._pixels.sum())

    def centroid(self) -> tuple[int, int]:
        """
        Integer centroid (row, col); an empty plane counts as area 1.
        """
        return centroid_of(self._pixels)

    # -------------------- Construction --------------------

    @classmethod
    def from_region(cls, region: Region) -> 'Pattern':
        """
        Rasterizes a region at its own size, scales it so its longer side spans the plane,
        then centers it along the shorter side using its centroid.

        Args:
            region : Region to freeze; it is normalized first and left untouched

        Returns:
            Pattern: The character plane

        Raises:
            ValueError: If the region is empty
        """
        bitmap         = region.normalized().to_bitmap()
        height, width  = bitmap.shape
        scale          = PLANE_SIZE / max(height, width)
        scaled_height  = min(PLANE_SIZE, max(1, round(height * scale)))
        scaled_width   = min(PLANE_SIZE, max(1, round(width * scale)))
        scaled         = cv2.resize(bitmap, (scaled_width, scaled_height), interpolation = cv2.INTER_NEAREST)

        centroid_row, centroid_col = centroid_of(scaled)
        row_offset, col_offset     = 0, 0
        if scaled_height >= scaled_width:
            col_offset = min(max(PLANE_SIZE // 2 - centroid_col, 0), PLANE_SIZE - scaled_width)
        else:
            row_offset = min(max(PLANE_SIZE // 2 - centroid_row, 0), PLANE_SIZE - scaled_height)

        plane = np.zeros((PLANE_SIZE, PLANE_SIZE), dtype = np.uint8)
        plane[row_offset:row_offset + scaled_height, col_offset:col_offset + scaled_width] = scaled
        return cls(plane)

    @classmethod
    def from_bitmap(cls, image: np.ndarray) -> 'Pattern':
        """
        Builds a synthetic pattern from a black-on-white character image, used for
        single-character training. Pixels of shade 0 become ink.

        Raises:
            ValueError: If the image is larger than the pattern plane
        """
        image = np.asarray(image)
        if image.ndim == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

        height, width = image.shape
        if height > PLANE_SIZE or width > PLANE_SIZE:
            raise ValueError(
                f"A pattern image must not exceed {PLANE_SIZE}x{PLANE_SIZE}, got {height}x{width}"
            )

        plane = np.zeros((PLANE_SIZE, PLANE_SIZE), dtype = np.uint8)
        plane[:height, :width] = (image == 0)
        return cls(plane)

    # -------------------- Export --------------------

    def write_image(self, output_path: Path | str, invert: bool = True):
        """
        Writes the plane as a 1-bit monochrome image.

        Args:
            output_path : Destination file; the extension selects the format
            invert      : Draw ink black on white instead of white on black
        """
        plane = (1 - self._pixels) if invert else self._pixels
        Image.fromarray((plane * 255).astype(np.uint8)).convert('1').save(output_path)

def centroid_of(bitmap: np.ndarray) -> tuple[int, int]:
    """
    Integer (row, col) centroid of a 0/1 array, with the area floored to 1.
    """
    rows, cols = np.nonzero(bitmap)
    area       = max(len(rows), 1)
    return int(rows.sum()) // area, int(cols.sum()) // area
