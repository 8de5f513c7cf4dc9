import numpy as np

from typing import Iterable, Iterator

class Region:
    """
    Connected set of ink pixels with absolute (row, col) coordinates.
    The bounding box is kept up to date on every insertion.
    """

    def __init__(self, coordinates: Iterable[tuple[int, int]] = ()):
        self.coordinates  : list[tuple[int, int]] = []
        self.top_row      : int | None = None
        self.bottom_row   : int | None = None
        self.left_col     : int | None = None
        self.right_col    : int | None = None
        self.top_leftmost : tuple[int, int] | None = None

        for row, col in coordinates:
            self.add(row, col)

    def add(self, row: int, col: int):
        """
        Appends one pixel and widens the bounding box if needed.
        """
        if not self.coordinates:
            self.top_row, self.bottom_row = row, row
            self.left_col, self.right_col = col, col
            self.top_leftmost             = (row, col)
        else:
            if row < self.top_row or (row == self.top_row and col < self.top_leftmost[1]):
                self.top_leftmost = (row, col)
            self.top_row    = min(self.top_row, row)
            self.bottom_row = max(self.bottom_row, row)
            self.left_col   = min(self.left_col, col)
            self.right_col  = max(self.right_col, col)

        self.coordinates.append((row, col))

    @property
    def height(self) -> int:
        return 0 if self.is_empty() else self.bottom_row - self.top_row + 1

    @property
    def width(self) -> int:
        return 0 if self.is_empty() else self.right_col - self.left_col + 1

    @property
    def size(self) -> int:
        return len(self.coordinates)

    def is_empty(self) -> bool:
        return not self.coordinates

    def __len__(self) -> int:
        return len(self.coordinates)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self.coordinates)

    def __repr__(self) -> str:
        if self.is_empty():
            return "Region(empty)"
        return (
            f"Region(rows {self.top_row}-{self.bottom_row}, "
            f"cols {self.left_col}-{self.right_col}, {self.size} px)"
        )

    def __lt__(self, other: 'Region') -> bool:
        """
        Reading order: a region above another comes first; regions sharing rows go left to right.
        """
        if self.is_empty() or other.is_empty():
            raise ValueError("Empty regions have no reading order")
        if self.bottom_row < other.top_row:
            return True
        if other.bottom_row < self.top_row:
            return False
        return self.left_col < other.left_col

    def __add__(self, other: 'Region') -> 'Region':
        return Region(self.coordinates + other.coordinates)

    def column_overlap(self, other: 'Region') -> int:
        """
        Number of columns shared by both bounding boxes (0 when disjoint).
        """
        return max(0, min(self.right_col, other.right_col) - max(self.left_col, other.left_col) + 1)

    def normalized(self) -> 'Region':
        """
        Copy translated so the bounding box starts at the origin.
        """
        return Region((row - self.top_row, col - self.left_col) for row, col in self.coordinates)

    def to_bitmap(self) -> np.ndarray:
        """
        Rasterizes the region into a 0/1 array the size of its bounding box.

        Raises:
            ValueError: If the region holds no pixels
        """
        if self.is_empty():
            raise ValueError("An empty region cannot be rasterized")

        bitmap = np.zeros((self.height, self.width), dtype = np.uint8)
        rows, cols = zip(*self.coordinates)
        bitmap[np.array(rows) - self.top_row, np.array(cols) - self.left_col] = 1
        return bitmap
