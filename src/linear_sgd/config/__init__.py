"""Configuration utilities for linear_sgd."""

from .training import (
    ConfigError,
    DataConfig,
    HashingConfig,
    OptimizerConfig,
    TrainingConfig,
    default_config,
    load_training_config,
    validate_config,
)

__all__ = [
    'ConfigError',
    'DataConfig',
    'HashingConfig',
    'OptimizerConfig',
    'TrainingConfig',
    'default_config',
    'load_training_config',
    'validate_config',
]
