from clip_reader.core.dataset.dataset        import Dataset
from clip_reader.core.dataset.duckdb_dataset import DuckDbDataset
from clip_reader.core.dataset.plain_text     import PlainTextDataset
from pathlib                                 import Path

DATASET_ENGINES = {
    'plain_text' : PlainTextDataset,
    'duckdb'     : DuckDbDataset
}

def open_dataset(engine: str, path: Path | str, features: int | None = None) -> Dataset:
    """
    Opens a stored dataset, creating it first when it does not exist and a feature count is given.

    Args:
        engine   : 'plain_text' or 'duckdb'
        path     : Dataset file
        features : Feature count used to create a missing dataset

    Returns:
        Dataset: The opened dataset

    Raises:
        ValueError        : If the engine is unknown
        FileNotFoundError : If the dataset is missing and no feature count is given
    """
    dataset_class = DATASET_ENGINES.get(engine)
    if dataset_class is None:
        raise ValueError(f"Unknown dataset engine '{engine}', expected one of {sorted(DATASET_ENGINES)}")

    if not Path(path).exists() and features is not None:
        return dataset_class.create(path, features)
    return dataset_class(path)
