from __future__ import annotations

from pathlib import Path

import pytest

from linear_sgd.config import ConfigError, default_config, load_training_config
from linear_sgd.models import ModelMode


def _write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / 'training.yaml'
    path.write_text(content, encoding='utf-8')
    return path


def test_defaults_per_mode():
    sparse = default_config('sparse')
    dense = default_config(ModelMode.DENSE)

    assert sparse.mode is ModelMode.SPARSE
    assert sparse.optimizer.num_epochs == 1000
    assert sparse.optimizer.learning_rate == 0.001
    assert sparse.hashing.table_size == 2**21
    assert sparse.hashing.ngrams == 0
    assert dense.optimizer.num_epochs == 100
    assert dense.data.delimiter == ','


def test_load_full_config(tmp_path):
    path = _write_config(
        tmp_path,
        'mode: sparse\n'
        'optimizer:\n  learning_rate: 0.05\n  num_epochs: 30\n'
        'hashing:\n  table_size: 1024\n  ngrams: 2\n'
        "data:\n  delimiter: ';'\n",
    )

    config = load_training_config(path)

    assert config.mode is ModelMode.SPARSE
    assert config.optimizer.learning_rate == 0.05
    assert config.optimizer.num_epochs == 30
    assert config.hashing.table_size == 1024
    assert config.hashing.ngrams == 2
    assert config.data.delimiter == ';'


def test_missing_sections_use_mode_defaults(tmp_path):
    config = load_training_config(_write_config(tmp_path, 'mode: dense\n'))

    assert config == default_config('dense')


def test_mode_argument_overrides_file(tmp_path):
    config = load_training_config(_write_config(tmp_path, 'mode: dense\n'), mode='sparse')

    assert config.mode is ModelMode.SPARSE
    assert config.optimizer.num_epochs == 1000


def test_mode_is_required(tmp_path):
    with pytest.raises(ConfigError, match='mode'):
        load_training_config(_write_config(tmp_path, 'optimizer:\n  num_epochs: 3\n'))


def test_unknown_mode(tmp_path):
    with pytest.raises(ConfigError):
        load_training_config(_write_config(tmp_path, 'mode: multiclass\n'))


@pytest.mark.parametrize(
    'content',
    [
        'mode: sparse\nhashing:\n  table_size: 1000\n',
        'mode: sparse\nhashing:\n  ngrams: -1\n',
        'mode: dense\noptimizer:\n  learning_rate: 0\n',
        'mode: dense\noptimizer:\n  num_epochs: -5\n',
        'mode: dense\noptimizer:\n  learning_rate: fast\n',
        'mode: dense\noptimizer: 5\n',
        'mode: sparse\nhashing:\n  ngrams: [1, 2]\n',
    ],
)
def test_invalid_values(tmp_path, content):
    with pytest.raises(ConfigError):
        load_training_config(_write_config(tmp_path, content))


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_training_config(tmp_path / 'absent.yaml')
