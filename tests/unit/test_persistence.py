from __future__ import annotations

import json
import math

import numpy as np
import pytest

from linear_sgd.data import SparseExample
from linear_sgd.features import FeatureHasher
from linear_sgd.models import LinearModel, ModelLoadError, load_model, save_model
from linear_sgd.training import SGDTrainer


@pytest.fixture
def dense_model() -> LinearModel:
    model = LinearModel.dense(
        3,
        feature_min=np.array([0.1 + 0.2, -1e-9, 4.6]),
        feature_max=np.array([1 / 3, 2.5e10, 15.0]),
        feature_names=['fixed acidity', 'sugar', 'alcohol'],
    )
    model.bias = math.pi
    model.coefficients[:] = [1 / 7, -2.0**-40, 123456.789]
    return model


@pytest.fixture
def sparse_model() -> LinearModel:
    model = LinearModel.sparse(table_size=64, ngrams=2)
    model.bias = -0.1
    model.coefficients[[3, 17, 63]] = [math.e, -1e-300, 0.3]
    return model


def test_dense_round_trip_is_exact(tmp_path, dense_model):
    path = save_model(dense_model, tmp_path / 'wine.json')
    loaded = load_model(path)

    assert loaded == dense_model
    assert loaded.bias == dense_model.bias
    np.testing.assert_array_equal(loaded.feature_min, dense_model.feature_min)
    np.testing.assert_array_equal(loaded.feature_max, dense_model.feature_max)
    assert loaded.feature_names == dense_model.feature_names


def test_sparse_round_trip_is_exact(tmp_path, sparse_model):
    loaded = load_model(save_model(sparse_model, tmp_path / 'sentiment.json'))

    assert loaded == sparse_model
    assert loaded.table_size == 64
    assert loaded.ngrams == 2


def test_sparse_file_lists_only_nonzero_coefficients(tmp_path, sparse_model):
    path = save_model(sparse_model, tmp_path / 'models' / 'sentiment.json')

    record = json.loads(path.read_text(encoding='utf-8'))
    assert record['mode'] == 'sparse'
    assert record['table_size'] == 64
    assert record['coefficients']['indices'] == [3, 17, 63]


def test_trained_model_round_trip(tmp_path):
    hasher = FeatureHasher(table_size=256, ngrams=2)
    dataset = [
        SparseExample(sentence=s, indices=hasher.transform(s), label=label)
        for s, label in [('love this gym', 1.0), ('hate the queue', 0.0)]
    ]
    model = LinearModel.sparse(table_size=256, ngrams=2)
    SGDTrainer(learning_rate=0.3, num_epochs=25).fit(model, dataset)
    model.training = {'learning_rate': 0.3, 'num_epochs': 25}

    loaded = load_model(save_model(model, tmp_path / 'model.json'))

    assert loaded == model
    assert loaded.training == model.training


def test_missing_model_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_model(tmp_path / 'absent.json')


def test_invalid_json_raises_load_error(tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text('{not json', encoding='utf-8')

    with pytest.raises(ModelLoadError):
        load_model(path)


def test_unknown_format_version_raises_load_error(tmp_path, dense_model):
    path = save_model(dense_model, tmp_path / 'model.json')
    record = json.loads(path.read_text(encoding='utf-8'))
    record['format_version'] = 99
    path.write_text(json.dumps(record), encoding='utf-8')

    with pytest.raises(ModelLoadError, match='version'):
        load_model(path)


def test_index_outside_table_raises_load_error(tmp_path, sparse_model):
    path = save_model(sparse_model, tmp_path / 'model.json')
    record = json.loads(path.read_text(encoding='utf-8'))
    record['coefficients']['indices'][-1] = 64
    path.write_text(json.dumps(record), encoding='utf-8')

    with pytest.raises(ModelLoadError):
        load_model(path)


def test_missing_bounds_raise_load_error(tmp_path, dense_model):
    path = save_model(dense_model, tmp_path / 'model.json')
    record = json.loads(path.read_text(encoding='utf-8'))
    del record['feature_max']
    path.write_text(json.dumps(record), encoding='utf-8')

    with pytest.raises(ModelLoadError):
        load_model(path)
