"""Model evaluation on held-out datasets."""

from .evaluator import (
    CLASSIFICATION_THRESHOLD,
    apply_model_bounds,
    classify,
    evaluate,
    metric_name,
    read_dataset_for,
)

__all__ = [
    'CLASSIFICATION_THRESHOLD',
    'apply_model_bounds',
    'classify',
    'evaluate',
    'metric_name',
    'read_dataset_for',
]
