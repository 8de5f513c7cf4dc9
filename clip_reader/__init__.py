"""
Clip Reader
Character recognition for scanned press clips.
"""

__version__ = '0.1.0'

from clip_reader.core.utils             import Utils, ConfigState
from clip_reader.core.module_logger     import ModuleLogger
from clip_reader.core.preprocessor      import Clip, ClipBoundsError, Pattern, Preprocessor, Region
from clip_reader.core.feature_extractor import FeatureExtractor, FeatureLengthError, FeatureVector
from clip_reader.core.dataset           import Dataset, DuckDbDataset, PlainTextDataset, Sample, open_dataset
from clip_reader.core.classifier        import BLANK_CLASS, ClassificationParadigm, Classifier
from clip_reader.core.recognizer        import ClipReader, Text

__all__ = [
    'Utils',
    'ConfigState',
    'ModuleLogger',
    'Clip',
    'ClipBoundsError',
    'Pattern',
    'Preprocessor',
    'Region',
    'FeatureExtractor',
    'FeatureLengthError',
    'FeatureVector',
    'Dataset',
    'DuckDbDataset',
    'PlainTextDataset',
    'Sample',
    'open_dataset',
    'BLANK_CLASS',
    'ClassificationParadigm',
    'Classifier',
    'ClipReader',
    'Text'
]
