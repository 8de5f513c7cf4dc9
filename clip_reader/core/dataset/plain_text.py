from clip_reader                         import ModuleLogger
from clip_reader.core.dataset.dataset    import Dataset, Sample
from clip_reader.core.feature_extractor  import FeatureVector
from pathlib                             import Path

logger = ModuleLogger('dataset')()

class PlainTextDataset(Dataset):
    """
    Dataset kept in a whitespace-separated text file.

    The first line holds the number of features; every following non-blank line holds
    one sample, its feature values followed by its integer class code. Changes are written
    back by save(), which also runs when the dataset is used as a context manager.
    """

    def __init__(self, file_path: Path | str, class_table: dict[str, int] | None = None):
        """
        Args:
            file_path   : Dataset file
            class_table : Optional label to code mapping

        Raises:
            FileNotFoundError : If the file does not exist
            ValueError        : If the file is malformed, naming the offending line
        """
        self.file_path = Path(file_path)
        if not self.file_path.is_file():
            raise FileNotFoundError(f"Dataset file not found: {self.file_path}")

        lines    = self.file_path.read_text(encoding = 'utf-8').splitlines()
        features = self.parse_feature_count(lines[0] if lines else '')

        super().__init__(features, class_table = class_table)
        for number, line in enumerate(lines[1:], start = 2):
            fields = line.split()
            if fields:
                self.samples.append(self.parse_sample(fields, number))

        self.modified = False
        logger.info(f"Loaded {self.size()} samples of {features} features from {self.file_path}")

    @classmethod
    def create(cls, file_path: Path | str, features: int, class_table: dict[str, int] | None = None) -> 'PlainTextDataset':
        """
        Writes an empty dataset file and opens it.
        """
        if features <= 0:
            raise ValueError(f"A dataset needs a positive number of features, got {features}")

        file_path = Path(file_path)
        file_path.parent.mkdir(parents = True, exist_ok = True)
        file_path.write_text(f"{features}\n", encoding = 'utf-8')
        return cls(file_path, class_table = class_table)

    # -------------------- Parsing --------------------

    @staticmethod
    def parse_feature_count(line: str) -> int:
        try:
            features = int(line.strip())
        except ValueError:
            raise ValueError("Line 1: the number of features is not a valid integer") from None
        if features <= 0:
            raise ValueError("Line 1: the number of features must be greater than zero")
        return features

    def parse_sample(self, fields: list[str], number: int) -> Sample:
        if len(fields) != self.feature_count + 1:
            raise ValueError(
                f"Line {number}: expected {self.feature_count} features and a class code, found {len(fields)} fields"
            )
        try:
            values = [float(value) for value in fields[:-1]]
        except ValueError:
            raise ValueError(f"Line {number}: invalid feature value") from None
        try:
            code = int(fields[-1])
        except ValueError:
            raise ValueError(f"Line {number}: invalid class code '{fields[-1]}'") from None

        return Sample(features = FeatureVector(values), code = code)

    # -------------------- Persistence --------------------

    def store_sample(self, sample: Sample):
        super().store_sample(sample)
        self.modified = True

    def delete_sample(self, index: int):
        super().delete_sample(index)
        self.modified = True

    def save(self):
        """
        Rewrites the file with the current samples.
        """
        lines = [str(self.feature_count)]
        lines.extend(
            ' '.join([*(repr(value) for value in sample.features), str(sample.code)])
            for sample in self.samples
        )
        self.file_path.write_text('\n'.join(lines) + '\n', encoding = 'utf-8')
        self.modified = False
        logger.info(f"Saved {self.size()} samples to {self.file_path}")

    def __enter__(self) -> 'PlainTextDataset':
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if self.modified:
            self.save()
