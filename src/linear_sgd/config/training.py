"""Config models and loaders for training."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from ..models.linear import DEFAULT_TABLE_SIZE, ModelMode


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass(frozen=True)
class OptimizerConfig:
    learning_rate: float = 0.001
    num_epochs: int = 100


@dataclass(frozen=True)
class HashingConfig:
    table_size: int = DEFAULT_TABLE_SIZE
    ngrams: int = 0


@dataclass(frozen=True)
class DataConfig:
    delimiter: str = ','


@dataclass(frozen=True)
class TrainingConfig:
    mode: ModelMode
    optimizer: OptimizerConfig = field(default_factory=OptimizerConfig)
    hashing: HashingConfig = field(default_factory=HashingConfig)
    data: DataConfig = field(default_factory=DataConfig)


_DEFAULT_EPOCHS = {
    ModelMode.DENSE: 100,
    ModelMode.SPARSE: 1000,
}


def default_config(mode: ModelMode | str) -> TrainingConfig:
    """Return the default training configuration for a model mode."""
    resolved = _parse_mode(mode)
    return TrainingConfig(
        mode=resolved,
        optimizer=OptimizerConfig(num_epochs=_DEFAULT_EPOCHS[resolved]),
    )


def load_training_config(
    config_path: str | Path,
    mode: ModelMode | str | None = None,
) -> TrainingConfig:
    """Load a training config YAML file.

    ``mode`` takes precedence over the ``mode`` key of the file.
    """
    cfg_path = Path(config_path).expanduser().resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f'Config file not found: {cfg_path}')

    with cfg_path.open('r', encoding='utf-8') as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ConfigError(f'Config file must contain a mapping: {cfg_path}')

    raw_mode = mode if mode is not None else data.get('mode')
    if raw_mode is None:
        raise ConfigError('mode must be set in training config (dense or sparse)')
    defaults = default_config(raw_mode)

    optimizer_section = _section(data, 'optimizer')
    hashing_section = _section(data, 'hashing')
    data_section = _section(data, 'data')

    config = TrainingConfig(
        mode=defaults.mode,
        optimizer=OptimizerConfig(
            learning_rate=_coerce(
                float,
                'optimizer.learning_rate',
                optimizer_section.get('learning_rate', defaults.optimizer.learning_rate),
            ),
            num_epochs=_coerce(
                int,
                'optimizer.num_epochs',
                optimizer_section.get('num_epochs', defaults.optimizer.num_epochs),
            ),
        ),
        hashing=HashingConfig(
            table_size=_coerce(
                int,
                'hashing.table_size',
                hashing_section.get('table_size', defaults.hashing.table_size),
            ),
            ngrams=_coerce(int, 'hashing.ngrams', hashing_section.get('ngrams', defaults.hashing.ngrams)),
        ),
        data=DataConfig(
            delimiter=str(data_section.get('delimiter', defaults.data.delimiter)),
        ),
    )
    validate_config(config)
    return config


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f'{name} must be a mapping, got {type(section).__name__}')
    return section


def _coerce(kind: type, key: str, value: object):
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f'{key} must be {kind.__name__}, got {value!r}') from exc


def validate_config(config: TrainingConfig) -> TrainingConfig:
    """Check value ranges, returning the config unchanged when valid."""
    if config.optimizer.learning_rate <= 0:
        raise ConfigError('optimizer.learning_rate must be positive')
    if config.optimizer.num_epochs < 0:
        raise ConfigError('optimizer.num_epochs must not be negative')
    table_size = config.hashing.table_size
    if table_size <= 0 or table_size & (table_size - 1):
        raise ConfigError(f'hashing.table_size must be a power of two, got {table_size}')
    if config.hashing.ngrams < 0:
        raise ConfigError('hashing.ngrams must not be negative')
    if len(config.data.delimiter) != 1:
        raise ConfigError('data.delimiter must be a single character')
    return config


def _parse_mode(value: ModelMode | str) -> ModelMode:
    try:
        return ModelMode(value)
    except ValueError as exc:
        raise ConfigError(f"mode must be 'dense' or 'sparse', got {value!r}") from exc
