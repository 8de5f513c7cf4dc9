import duckdb

from clip_reader                        import ModuleLogger
from clip_reader.core.dataset.dataset   import Dataset, Sample, default_class_table
from clip_reader.core.feature_extractor import FeatureVector
from pathlib                            import Path

logger = ModuleLogger('dataset')()

class DuckDbDataset(Dataset):
    """
    Dataset stored in a DuckDB database with two tables:

        classes (id_class, label, ascii_code)
        samples (id_sample, m00, m01, ..., id_class)

    Feature columns are the samples columns named 'm' plus two characters. A connection is
    opened for each operation; insertions and removals run inside a transaction.
    """
    FEATURE_COLUMN_PATTERN = 'm__'
    BUILD_ERROR            = "The dataset could not be built from the database."

    def __init__(self, database_path: Path | str):
        """
        Args:
            database_path : DuckDB database file

        Raises:
            FileNotFoundError : If the database file does not exist
            RuntimeError      : If the tables cannot be read
        """
        self.database_path = Path(database_path)
        if not self.database_path.is_file():
            raise FileNotFoundError(f"Dataset database not found: {self.database_path}")

        try:
            conn = duckdb.connect(str(self.database_path))
            try:
                columns = [
                    name for (name,) in conn.execute(
                        "SELECT column_name FROM information_schema.columns "
                        "WHERE table_name = 'samples' AND column_name LIKE ? "
                        "ORDER BY ordinal_position",
                        [self.FEATURE_COLUMN_PATTERN]
                    ).fetchall()
                ]
                classes = conn.execute("SELECT id_class, label, ascii_code FROM classes ORDER BY id_class").fetchall()
                rows    = conn.execute(
                    f"SELECT s.id_sample, {', '.join(f's.{column}' for column in columns)}, c.ascii_code "
                    "FROM samples s JOIN classes c ON s.id_class = c.id_class "
                    "ORDER BY s.id_sample"
                ).fetchall() if columns else []
            finally:
                conn.close()
        except duckdb.Error as e:
            raise RuntimeError(self.BUILD_ERROR) from e

        if not columns:
            raise RuntimeError(self.BUILD_ERROR)

        super().__init__(len(columns), class_table = {label: code for _, label, code in classes})
        self.feature_columns = columns
        self.class_ids       = {code: id_class for id_class, _, code in classes}
        self.sample_ids      = []

        for id_sample, *values, code in rows:
            self.samples.append(Sample(features = FeatureVector(values), code = code))
            self.sample_ids.append(id_sample)

        logger.info(f"Loaded {self.size()} samples of {len(columns)} features from {self.database_path}")

    @classmethod
    def create(
        cls,
        database_path : Path | str,
        features      : int,
        class_table   : dict[str, int] | None = None
    ) -> 'DuckDbDataset':
        """
        Creates the schema (if missing), seeds the classes table and opens the dataset.

        Args:
            database_path : DuckDB database file, created when absent
            features      : Number of feature columns (1 to 100)
            class_table   : Label to code mapping seeded into an empty classes table

        Returns:
            DuckDbDataset: The opened dataset
        """
        if not 0 < features <= 100:
            raise ValueError(f"Feature columns are numbered m00 to m99, cannot create {features}")

        columns = [f'm{index:02d}' for index in range(features)]
        table   = class_table if class_table is not None else default_class_table()

        conn = duckdb.connect(str(database_path))
        try:
            conn.execute("CREATE SEQUENCE IF NOT EXISTS samples_id_seq START 1")
            conn.execute(
                "CREATE TABLE IF NOT EXISTS classes ("
                "id_class INTEGER PRIMARY KEY, label VARCHAR NOT NULL, ascii_code INTEGER NOT NULL UNIQUE)"
            )
            conn.execute(
                "CREATE TABLE IF NOT EXISTS samples ("
                "id_sample INTEGER PRIMARY KEY DEFAULT nextval('samples_id_seq'), "
                f"{', '.join(f'{column} DOUBLE NOT NULL' for column in columns)}, "
                "id_class INTEGER NOT NULL)"
            )
            if conn.execute("SELECT count(*) FROM classes").fetchone()[0] == 0:
                conn.executemany(
                    "INSERT INTO classes VALUES (?, ?, ?)",
                    [
                        (id_class, label, code)
                        for id_class, (label, code) in enumerate(sorted(table.items(), key = lambda item: item[1]), start = 1)
                    ]
                )
        finally:
            conn.close()

        return cls(database_path)

    # -------------------- Persistence --------------------

    def store_sample(self, sample: Sample):
        """
        Inserts the sample, registering its class first when the code is unknown.
        """
        id_class = self.class_ids.get(sample.code)
        label    = self.character(sample.code) or chr(sample.code)
        conn     = duckdb.connect(str(self.database_path))
        try:
            conn.begin()
            if id_class is None:
                id_class = conn.execute("SELECT coalesce(max(id_class), 0) + 1 FROM classes").fetchone()[0]
                conn.execute("INSERT INTO classes VALUES (?, ?, ?)", [id_class, label, sample.code])

            id_sample = conn.execute(
                f"INSERT INTO samples ({', '.join(self.feature_columns)}, id_class) "
                f"VALUES ({', '.join('?' for _ in self.feature_columns)}, ?) RETURNING id_sample",
                [*(float(value) for value in sample.features), id_class]
            ).fetchone()[0]
            conn.commit()
        except duckdb.Error as e:
            conn.rollback()
            raise RuntimeError(f"Sample of class {sample.code} could not be stored in the database.") from e
        finally:
            conn.close()

        self.class_ids[sample.code] = id_class
        self.register_class(label, sample.code)
        self.sample_ids.append(id_sample)
        super().store_sample(sample)

    def delete_sample(self, index: int):
        conn = duckdb.connect(str(self.database_path))
        try:
            conn.begin()
            conn.execute("DELETE FROM samples WHERE id_sample = ?", [self.sample_ids[index]])
            conn.commit()
        except duckdb.Error as e:
            conn.rollback()
            raise RuntimeError(f"Sample {index} could not be removed from the database.") from e
        finally:
            conn.close()

        del self.sample_ids[index]
        super().delete_sample(index)
