from .logger import ModuleLogger

__all__ = ['ModuleLogger']
