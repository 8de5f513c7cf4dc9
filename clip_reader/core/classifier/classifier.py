import math
import numpy as np

from clip_reader                        import ModuleLogger
from clip_reader.core.dataset           import Dataset, Sample
from clip_reader.core.feature_extractor import FeatureLengthError, FeatureVector
from clip_reader.core.statistics        import Statistics, stat
from dataclasses                        import dataclass
from enum                               import Enum
from typing                             import Callable, Sequence

logger = ModuleLogger('classifier')()

BLANK_CLASS = -1  # Returned when there is nothing to compare against

# -------------------- Data Classes --------------------

class ClassificationParadigm(Enum):
    KNN = 'knn'

@dataclass
class ClassifierStatistics(Statistics):
    characters_found    : int | None   = stat('Characters found')
    classification_time : float | None = stat('Classification time', timing = True)
    hit_rate            : float | None = stat('Hit rate (%)')
    miss_rate           : float | None = stat('Miss rate (%)')

# -------------------- K-Nearest Neighbours --------------------

def compute_k(dataset_size: int) -> int:
    """
    Number of neighbours consulted for a dataset of the given size.
    """
    return min(dataset_size, math.ceil(math.sqrt(dataset_size)))

def knn_classify(vector: FeatureVector, dataset: Dataset) -> int:
    """
    Majority vote among the k nearest samples, with k = min(n, ceil(sqrt(n))).

    Among classes sharing the highest vote count the one met first in distance order wins,
    so when no class gets two votes the nearest neighbour decides.

    Args:
        vector  : Feature vector to classify
        dataset : Samples to compare against

    Returns:
        int: Winning class code, or BLANK_CLASS when the dataset is empty

    Raises:
        FeatureLengthError: If a non-empty dataset holds vectors of another length
    """
    if dataset.size() == 0:
        return BLANK_CLASS
    if len(vector) != dataset.features():
        raise FeatureLengthError(
            f"Vector has {len(vector)} features, the dataset expects {dataset.features()}"
        )

    distances = np.linalg.norm(dataset.feature_matrix() - vector.values, axis = 1)
    nearest   = np.argsort(distances, kind = 'stable')[:compute_k(dataset.size())]

    votes = {}
    for index in nearest:
        code        = dataset.at(int(index)).code
        votes[code] = votes.get(code, 0) + 1

    # dicts keep insertion order, so max() returns the nearest of the tied classes
    return max(votes, key = votes.get)

def knn_train(
    vectors    : Sequence[FeatureVector],
    recognized : Sequence[str],
    reference  : Sequence[str],
    dataset    : Dataset
) -> float:
    """
    Adds one sample per position: the recognized class when it matches the reference
    (reinforcing it), otherwise the reference class (correcting it). Positions whose
    character has no class code are skipped.

    Args:
        vectors    : Feature vectors of the recognized characters
        recognized : Characters returned by classification
        reference  : Expected characters
        dataset    : Dataset receiving the new samples

    Returns:
        float: Percentage of positions that were already correct

    Raises:
        ValueError: If the three sequences differ in length
    """
    if not len(vectors) == len(recognized) == len(reference):
        raise ValueError(
            f"Training needs as many vectors ({len(vectors)}), recognized characters "
            f"({len(recognized)}) and reference characters ({len(reference)})"
        )
    if not vectors:
        return 0.0

    hits = 0
    for position, (vector, output, expected) in enumerate(zip(vectors, recognized, reference)):
        if output == expected:
            hits += 1
            code  = dataset.code(output)
        else:
            code  = dataset.code(expected)

        if code is None:
            logger.warning(f"Training sample {position} skipped: '{expected}' has no class code")
            continue
        dataset.add_sample(Sample(features = vector, code = code))

    return hits / len(vectors) * 100.0

CLASSIFICATION_ALGORITHMS: dict[ClassificationParadigm, tuple[Callable, Callable]] = {
    ClassificationParadigm.KNN : (knn_classify, knn_train)
}

# -------------------- Classifier Class --------------------

class Classifier:
    """
    Recognizes feature vectors against a dataset and learns from reference text.
    The dataset is owned by the caller and mutated by training.
    """

    def __init__(self, dataset: Dataset, paradigm: ClassificationParadigm = ClassificationParadigm.KNN):
        """
        Args:
            dataset  : Samples used for recognition and extended by training
            paradigm : Classification algorithm
        """
        self.dataset    = dataset
        self.paradigm   = ClassificationParadigm(paradigm)
        self.statistics = ClassifierStatistics()
        self.characters = []

        self.classify_vector, self.train_vectors = CLASSIFICATION_ALGORITHMS[self.paradigm]

    def classify(self, vector: FeatureVector) -> int:
        return self.classify_vector(vector, self.dataset)

    def character_of(self, code: int) -> str:
        """
        Label for a class code; blank and unknown codes give an empty string.
        """
        return '' if code == BLANK_CLASS else (self.dataset.character(code) or '')

    def classify_all(self, vectors: Sequence[FeatureVector]) -> list[str]:
        """
        Classifies every vector in order.

        Returns:
            list: One label per vector, '' where nothing was recognized
        """
        self.statistics.clear()
        with self.statistics.timed('classification_time'):
            self.characters = [self.character_of(self.classify(vector)) for vector in vectors]

        self.statistics.record('characters_found', sum(1 for character in self.characters if character))
        logger.info(f"Classified {len(self.characters)} vectors against {self.dataset.size()} samples")
        return self.characters

    def train(
        self,
        vectors    : Sequence[FeatureVector],
        recognized : Sequence[str],
        reference  : Sequence[str]
    ) -> float:
        """
        Trains the dataset with a batch of recognized characters and their expected values.

        Returns:
            float: Hit rate, in percent
        """
        hit_rate = self.train_vectors(vectors, recognized, reference, self.dataset)
        self.statistics.record('hit_rate', hit_rate)
        self.statistics.record('miss_rate', 100.0 - hit_rate)

        logger.info(f"Trained with {len(vectors)} characters, hit rate {hit_rate:.2f}%")
        return hit_rate

    def train_single(self, vector: FeatureVector, character: str, code: int) -> float:
        """
        Trains the dataset with one recognized character whose expected class code is known.

        Args:
            vector    : Feature vector of the character
            character : Character returned by classification
            code      : Expected class code

        Returns:
            float: 100.0 when the character already matched the code, 0.0 otherwise
        """
        expected = self.dataset.character(code)
        if expected is None:
            logger.warning(f"Training skipped: code {code} has no class")
            return 100.0 if self.dataset.code(character) == code else 0.0

        return self.train([vector], [character], [expected])
