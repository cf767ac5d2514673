"""Feature extraction: hashing, n-grams and dense scaling."""

from .hashing import FeatureHasher, hash_features, hash_token, tokenize
from .ngrams import NGRAM_SEPARATOR, make_ngrams
from .normalizer import FeatureNormalizer, MinMaxBounds

__all__ = [
    'FeatureHasher',
    'hash_features',
    'hash_token',
    'tokenize',
    'NGRAM_SEPARATOR',
    'make_ngrams',
    'FeatureNormalizer',
    'MinMaxBounds',
]
