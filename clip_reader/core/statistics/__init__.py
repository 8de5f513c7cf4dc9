from .statistics import Statistics, stat

__all__ = ['Statistics', 'stat']
