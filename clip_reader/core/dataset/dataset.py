import numpy as np
import threading

from clip_reader.core.feature_extractor import FeatureLengthError, FeatureVector
from typing                             import Iterable, Iterator, NamedTuple

ACCENTED_LABELS = 'áéíóúÁÉÍÓÚüÜñÑ¡¿'

def default_class_table() -> dict[str, int]:
    """
    Printable ASCII plus the accented Spanish letters and inverted marks, keyed by label.
    Codes are the characters' Latin-1 code points.
    """
    table = {chr(code): code for code in range(33, 127)}
    table.update({label: ord(label) for label in ACCENTED_LABELS})
    return table

class Sample(NamedTuple):
    """
    One training example: a feature vector and the code of its character class.
    """
    features : FeatureVector
    code     : int

class Dataset:
    """
    Ordered, in-memory collection of samples with a two-way label/code table.

    Storage backends subclass it and override store_sample() and delete_sample() to
    persist changes. Insertions and removals are serialized with a lock.
    """

    def __init__(
        self,
        features    : int,
        samples     : Iterable[Sample] = (),
        class_table : dict[str, int] | None = None
    ):
        """
        Args:
            features    : Length every sample's feature vector must have
            samples     : Initial samples
            class_table : Mapping of character labels to codes (defaults to default_class_table())

        Raises:
            ValueError: If the feature count is not positive
        """
        if features <= 0:
            raise ValueError(f"A dataset needs a positive number of features, got {features}")

        self.feature_count = features
        self.samples       = []
        self.labels        = dict(class_table if class_table is not None else default_class_table())
        self.codes         = {code: label for label, code in self.labels.items()}
        self.lock          = threading.Lock()

        for sample in samples:
            self.check_sample(sample)
            self.samples.append(sample)

    # -------------------- Queries --------------------

    def size(self) -> int:
        return len(self.samples)

    def features(self) -> int:
        return self.feature_count

    def at(self, index: int) -> Sample:
        if not 0 <= index < len(self.samples):
            raise IndexError(f"Sample {index} is outside a dataset of {len(self.samples)} samples")
        return self.samples[index]

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(list(self.samples))

    def code(self, character: str) -> int | None:
        """
        Code of a character label, or None when the label has no class.
        """
        return self.labels.get(character)

    def character(self, code: int) -> str | None:
        """
        Label of a class code, or None when the code has no class.
        """
        return self.codes.get(code)

    def register_class(self, label: str, code: int):
        self.labels[label] = code
        self.codes[code]   = label

    def feature_matrix(self) -> np.ndarray:
        """
        Features of every sample stacked into a (size, features) array.
        """
        if not self.samples:
            return np.empty((0, self.feature_count))
        return np.vstack([sample.features.values for sample in self.samples])

    # -------------------- Mutation --------------------

    def check_sample(self, sample: Sample):
        if len(sample.features) != self.feature_count:
            raise FeatureLengthError(
                f"Sample has {len(sample.features)} features, the dataset expects {self.feature_count}"
            )

    def add_sample(self, sample: Sample):
        """
        Appends a sample.

        Raises:
            FeatureLengthError: If the sample's vector length differs from features()
        """
        self.check_sample(sample)
        with self.lock:
            self.store_sample(sample)

    def remove_sample(self, index: int):
        """
        Removes the sample at the given position.

        Raises:
            IndexError: If the position is out of range
        """
        with self.lock:
            self.at(index)
            self.delete_sample(index)

    def store_sample(self, sample: Sample):
        self.samples.append(sample)

    def delete_sample(self, index: int):
        del self.samples[index]
