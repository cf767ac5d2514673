from __future__ import annotations

import numpy as np
import pytest

from linear_sgd.features import FeatureHasher, hash_features


def test_one_index_per_token_within_table():
    tokens = ['good', 'gym', 'bad', 'service', 'ação', '']
    indices = hash_features(tokens, 1024)

    assert indices.dtype == np.int64
    assert len(indices) == len(tokens)
    assert ((indices >= 0) & (indices < 1024)).all()


def test_repeated_tokens_keep_their_occurrences():
    indices = hash_features(['x', 'y', 'x', 'x'], 2**21)

    assert len(indices) == 4
    assert indices[0] == indices[2] == indices[3]


def test_hashing_is_deterministic():
    tokens = ['great', 'place', 'to', 'train']
    np.testing.assert_array_equal(hash_features(tokens, 4096), hash_features(tokens, 4096))


def test_no_tokens_gives_empty_indices():
    assert hash_features([], 64).size == 0


@pytest.mark.parametrize('table_size', [0, -8, 1000])
def test_table_size_must_be_power_of_two(table_size):
    with pytest.raises(ValueError):
        hash_features(['a'], table_size)


def test_hasher_expands_ngrams_before_hashing():
    hasher = FeatureHasher(table_size=64, ngrams=2)

    assert hasher.features('good gym') == ['good', 'good_gym', 'gym']
    assert len(hasher.transform('good gym')) == 3


def test_hasher_without_ngrams_uses_words():
    hasher = FeatureHasher(table_size=64)

    assert hasher.features('very very good') == ['very', 'very', 'good']
    indices = hasher.transform('very very good')
    assert indices[0] == indices[1]


def test_hasher_rejects_bad_table_size():
    with pytest.raises(ValueError):
        FeatureHasher(table_size=100)
