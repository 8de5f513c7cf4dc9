import numpy as np

from clip_reader                                       import ModuleLogger
from clip_reader.core.feature_extractor.feature_vector import FeatureVector
from clip_reader.core.preprocessor                     import Pattern
from clip_reader.core.statistics                       import Statistics, stat
from dataclasses                                       import dataclass

logger = ModuleLogger('feature_extractor')()

# Central moment orders (p for rows, q for columns), in vector order after the centroid
MOMENT_ORDERS = (
    (1, 1), (2, 0), (0, 2), (2, 1), (1, 2), (2, 2),
    (3, 0), (0, 3), (3, 1), (1, 3), (3, 2), (2, 3)
)
FEATURES = 2 + len(MOMENT_ORDERS)

@dataclass
class FeatureExtractorStatistics(Statistics):
    moments_computing_time : float | None = stat('Moments computing time', timing = True)

def compute_moments(pattern: Pattern) -> FeatureVector:
    """
    Describes a pattern by its centroid and its scale-normalized central moments.

    The centroid is the integer (floor) mean of the ink coordinates. Each moment mu_pq is
    divided by area ** ((p + q) // 2 + 1); an empty pattern counts as area 1.

    Args:
        pattern : Character plane

    Returns:
        FeatureVector: [centroid_row, centroid_col, mu_11, mu_20, ..., mu_23]
    """
    rows, cols = np.nonzero(pattern.pixels)
    area       = max(len(rows), 1)
    centroid   = [int(rows.sum()) // area, int(cols.sum()) // area]
    row_offset = (rows - centroid[0]).astype(np.float64)
    col_offset = (cols - centroid[1]).astype(np.float64)

    moments = [
        float((row_offset ** p * col_offset ** q).sum()) / area ** ((p + q) // 2 + 1)
        for p, q in MOMENT_ORDERS
    ]
    return FeatureVector(centroid + moments)

class FeatureExtractor:
    """
    Computes one feature vector per pattern.
    """

    def __init__(self):
        self.feature_vectors = []
        self.statistics      = FeatureExtractorStatistics()

    def compute_moments(self, patterns: list[Pattern]) -> list[FeatureVector]:
        """
        Args:
            patterns : Patterns in reading order

        Returns:
            list: Feature vectors, in the same order
        """
        self.statistics.clear()
        with self.statistics.timed('moments_computing_time'):
            self.feature_vectors = [compute_moments(pattern) for pattern in patterns]

        logger.info(f"Computed {len(self.feature_vectors)} feature vectors")
        return self.feature_vectors
