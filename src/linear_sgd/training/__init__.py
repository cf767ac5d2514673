"""Model training: the SGD loop and the CSV-to-model pipeline."""

from .pipeline import TrainingRun, build_model, train_from_config
from .sgd import (
    EpochReport,
    LogisticStep,
    RegressionStep,
    SGDTrainer,
    TrainingResult,
    UpdateStep,
    step_for,
)

__all__ = [
    'TrainingRun',
    'build_model',
    'train_from_config',
    'EpochReport',
    'LogisticStep',
    'RegressionStep',
    'SGDTrainer',
    'TrainingResult',
    'UpdateStep',
    'step_for',
]
