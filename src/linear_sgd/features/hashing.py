"""Hashing trick for sparse text features."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from sklearn.utils import murmurhash3_32

from ..models.linear import DEFAULT_TABLE_SIZE
from .ngrams import make_ngrams


def check_table_size(table_size: int) -> int:
    if table_size <= 0 or table_size & (table_size - 1):
        raise ValueError(f'table_size must be a positive power of two, got {table_size}')
    return table_size


def hash_token(token: str, table_size: int) -> int:
    """Return the table index of a single token."""
    return murmurhash3_32(token, seed=0, positive=True) % table_size


def hash_features(tokens: Iterable[str], table_size: int = DEFAULT_TABLE_SIZE) -> np.ndarray:
    """Map tokens to indices in ``[0, table_size)``.

    One index per token, in token order. Repeated tokens map to the same
    index and are kept, so they add up when the example is scored.
    """
    check_table_size(table_size)
    return np.fromiter(
        (hash_token(token, table_size) for token in tokens),
        dtype=np.int64,
    )


def tokenize(sentence: str) -> list[str]:
    """Split a sentence on single spaces, the way datasets are written."""
    return sentence.split(' ')


@dataclass(frozen=True)
class FeatureHasher:
    """Sentence-to-indices transform shared by training and inference."""

    table_size: int = DEFAULT_TABLE_SIZE
    ngrams: int = 0

    def __post_init__(self) -> None:
        check_table_size(self.table_size)
        if self.ngrams < 0:
            raise ValueError(f'ngrams must not be negative, got {self.ngrams}')

    def features(self, sentence: str) -> list[str]:
        words = tokenize(sentence)
        if self.ngrams > 0:
            words = make_ngrams(words, self.ngrams)
        return words

    def transform(self, sentence: str) -> np.ndarray:
        return hash_features(self.features(sentence), self.table_size)

    def transform_many(self, sentences: Iterable[str]) -> list[np.ndarray]:
        return [self.transform(sentence) for sentence in sentences]
