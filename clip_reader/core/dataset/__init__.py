from .dataset        import Dataset, Sample, default_class_table
from .duckdb_dataset import DuckDbDataset
from .plain_text     import PlainTextDataset
from .loader         import open_dataset

__all__ = [
    'Dataset',
    'DuckDbDataset',
    'PlainTextDataset',
    'Sample',
    'default_class_table',
    'open_dataset'
]
