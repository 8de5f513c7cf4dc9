from .recognizer import ClipReader
from .text       import Text, postprocess

__all__ = ['ClipReader', 'Text', 'postprocess']
