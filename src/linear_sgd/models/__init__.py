"""Linear model and its persistence."""

from .linear import DEFAULT_TABLE_SIZE, LinearModel, ModelMode, sigmoid
from .persistence import (
    ModelLoadError,
    load_model,
    model_from_dict,
    model_to_dict,
    save_model,
)

__all__ = [
    'DEFAULT_TABLE_SIZE',
    'LinearModel',
    'ModelMode',
    'sigmoid',
    'ModelLoadError',
    'load_model',
    'model_from_dict',
    'model_to_dict',
    'save_model',
]
