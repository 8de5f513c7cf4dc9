import numpy as np

from typing import Iterable, Iterator

class FeatureLengthError(ValueError):
    """
    Raised when two feature vectors, or a vector and a dataset, disagree on length.
    """

class FeatureVector:
    """
    Fixed-length, read-only vector of shape descriptors.
    """

    def __init__(self, values: Iterable[float] | int):
        """
        Args:
            values : Components of the vector, or a length for an all-zero vector

        Raises:
            ValueError: If the components do not form a flat sequence
        """
        if isinstance(values, int):
            array = np.zeros(values, dtype = np.float64)
        else:
            array = np.array(list(values), dtype = np.float64)
        if array.ndim != 1:
            raise ValueError(f"A feature vector must be one-dimensional, got shape {array.shape}")

        self._values = array
        self._values.setflags(write = False)

    @property
    def values(self) -> np.ndarray:
        return self._values

    def size(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values.tolist())

    def __getitem__(self, index: int) -> float:
        if not 0 <= index < len(self._values):
            raise IndexError(f"Component {index} is outside a vector of {len(self._values)} features")
        return float(self._values[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeatureVector):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    __hash__ = None

    def __repr__(self) -> str:
        return f"FeatureVector({self._values.tolist()})"

    def check_length(self, other: 'FeatureVector'):
        if len(self) != len(other):
            raise FeatureLengthError(f"Feature vectors differ in length: {len(self)} != {len(other)}")

    def __add__(self, other: 'FeatureVector') -> 'FeatureVector':
        self.check_length(other)
        return FeatureVector(self._values + other._values)

    def __sub__(self, other: 'FeatureVector') -> 'FeatureVector':
        self.check_length(other)
        return FeatureVector(self._values - other._values)

    def dot(self, other: 'FeatureVector') -> float:
        self.check_length(other)
        return float(np.dot(self._values, other._values))

    def euclidean_distance(self, other: 'FeatureVector') -> float:
        self.check_length(other)
        return float(np.linalg.norm(self._values - other._values))
