import cv2
import numpy as np

from pathlib import Path

class ClipBoundsError(IndexError):
    """
    Raised when a pixel access or a clip request falls outside the available grid.
    """

class Clip:
    """
    Rectangular grid of gray levels (0-255) cut from a scanned page.
    After global thresholding the grid holds ink flags instead: 1 for ink, 0 for background.
    """

    def __init__(self, pixels: np.ndarray, binary: bool = False):
        """
        Args:
            pixels : 2D array of gray levels, or of 0/1 ink flags when binary is set
            binary : Whether the grid has already been thresholded

        Raises:
            ValueError: If the buffer is not a non-empty 2D grid, or a binary grid holds other values than 0 and 1
        """
        pixels = np.asarray(pixels)
        if pixels.ndim != 2 or pixels.size == 0:
            raise ValueError(f"A clip needs a non-empty 2D pixel buffer, got shape {pixels.shape}")
        if binary and not np.isin(pixels, (0, 1)).all():
            raise ValueError("A binary clip may only hold 0 and 1")

        self.pixels = np.clip(pixels, 0, 255).astype(np.uint8)
        self.binary = binary

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def size(self) -> int:
        return self.pixels.size

    def check_bounds(self, row: int, col: int):
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise ClipBoundsError(f"Pixel ({row}, {col}) is outside the {self.height}x{self.width} clip")

    def __getitem__(self, position: tuple[int, int]) -> int:
        row, col = position
        self.check_bounds(row, col)
        return int(self.pixels[row, col])

    def __setitem__(self, position: tuple[int, int], value: int):
        row, col = position
        self.check_bounds(row, col)
        self.pixels[row, col] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Clip):
            return NotImplemented
        return self.binary == other.binary and np.array_equal(self.pixels, other.pixels)

    __hash__ = None

    def __repr__(self) -> str:
        mode = 'binary' if self.binary else 'grayscale'
        return f"Clip({self.height}x{self.width}, {mode})"

    def copy(self) -> 'Clip':
        return Clip(self.pixels.copy(), binary = self.binary)

    def ink_count(self) -> int:
        """
        Number of ink pixels in a thresholded clip.
        """
        if not self.binary:
            raise ValueError("Ink can only be counted on a thresholded clip")
        return int(self.pixels.sum())

    # -------------------- Image Source --------------------

    @classmethod
    def from_image_file(
        cls,
        image_path : Path | str,
        top        : int | None = None,
        left       : int | None = None,
        height     : int | None = None,
        width      : int | None = None
    ) -> 'Clip':
        """
        Loads a page image in grayscale and cuts the requested rectangle from it.

        Args:
            image_path : Path to the page image
            top        : Row of the rectangle's top-left corner (whole page when omitted)
            left       : Column of the rectangle's top-left corner
            height     : Rectangle height in pixels
            width      : Rectangle width in pixels

        Returns:
            Clip: Gray-level clip of the rectangle

        Raises:
            FileNotFoundError : If the image cannot be read
            ClipBoundsError   : If the rectangle does not lie fully inside the page
        """
        page = cv2.imread(str(image_path), cv2.IMREAD_GRAYSCALE)
        if page is None:
            raise FileNotFoundError(f"Image not found: {image_path}")
        return cls.from_page(page, top = top, left = left, height = height, width = width)

    @classmethod
    def from_page(
        cls,
        page   : np.ndarray,
        top    : int | None = None,
        left   : int | None = None,
        height : int | None = None,
        width  : int | None = None
    ) -> 'Clip':
        """
        Cuts a rectangle from an already loaded grayscale page.
        """
        page_height, page_width = page.shape[:2]

        top    = 0 if top is None else top
        left   = 0 if left is None else left
        height = page_height - top if height is None else height
        width  = page_width - left if width is None else width

        if (
            top < 0 or left < 0 or height <= 0 or width <= 0
            or top + height > page_height or left + width > page_width
        ):
            raise ClipBoundsError(
                f"Rectangle at ({top}, {left}) of {height}x{width} "
                f"does not fit in the {page_height}x{page_width} page"
            )
        return cls(page[top:top + height, left:left + width].copy())

    def write_image(self, output_path: Path | str, scaling_factor: float = 1.0):
        """
        Writes the clip to disk for inspection. Thresholded clips are drawn as black ink on white.

        Args:
            output_path    : Destination file; the extension selects the format
            scaling_factor : Zoom applied before writing
        """
        image = (1 - self.pixels) * 255 if self.binary else self.pixels
        image = image.astype(np.uint8)

        if scaling_factor != 1.0:
            image = cv2.resize(
                image,
                (max(1, round(self.width * scaling_factor)), max(1, round(self.height * scaling_factor))),
                interpolation = cv2.INTER_NEAREST
            )

        if not cv2.imwrite(str(output_path), image):
            raise OSError(f"Could not write clip image: {output_path}")
