from .feature_vector import FeatureVector, FeatureLengthError
from .extractor      import FeatureExtractor, FeatureExtractorStatistics, FEATURES, compute_moments

__all__ = [
    'FEATURES',
    'FeatureExtractor',
    'FeatureExtractorStatistics',
    'FeatureLengthError',
    'FeatureVector',
    'compute_moments'
]
