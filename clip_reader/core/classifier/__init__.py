from .classifier import (
    BLANK_CLASS,
    ClassificationParadigm,
    Classifier,
    ClassifierStatistics,
    compute_k,
    knn_classify,
    knn_train
)

__all__ = [
    'BLANK_CLASS',
    'ClassificationParadigm',
    'Classifier',
    'ClassifierStatistics',
    'compute_k',
    'knn_classify',
    'knn_train'
]
