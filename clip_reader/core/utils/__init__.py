from .utils  import Utils
from .config import ConfigState

__all__ = ['Utils', 'ConfigState']
