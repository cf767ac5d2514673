"""Dataset reading and text preprocessing for linear_sgd."""

from .examples import DenseExample, SparseExample
from .cleaning import normalize_sentences, normalize_text, strip_diacritics
from .loading import DatasetFormatError, read_dense_dataset, read_sparse_dataset

__all__ = [
    'DenseExample',
    'SparseExample',
    'normalize_sentences',
    'normalize_text',
    'strip_diacritics',
    'DatasetFormatError',
    'read_dense_dataset',
    'read_sparse_dataset',
]
