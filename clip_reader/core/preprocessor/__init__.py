from .clip         import Clip, ClipBoundsError
from .pattern      import Pattern, PLANE_SIZE
from .preprocessor import Preprocessor
from .region       import Region
from .statistics   import PreprocessorStatistics

__all__ = [
    'Clip',
    'ClipBoundsError',
    'Pattern',
    'PLANE_SIZE',
    'Preprocessor',
    'PreprocessorStatistics',
    'Region'
]
