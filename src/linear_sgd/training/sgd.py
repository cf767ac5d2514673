"""Stochastic gradient descent over linear models."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from ..data.examples import DenseExample, Example, SparseExample
from ..models.linear import LinearModel, ModelMode
from ..utils import get_logger, json_log

log = get_logger(__name__)


@dataclass(frozen=True)
class EpochReport:
    epoch: int
    loss: float


@dataclass
class TrainingResult:
    model: LinearModel
    history: list[EpochReport] = field(default_factory=list)

    @property
    def final_loss(self) -> float | None:
        return self.history[-1].loss if self.history else None


class UpdateStep(Protocol):
    """Per-mode prediction, parameter update and epoch loss."""

    def predict(self, model: LinearModel, example: Example) -> float: ...

    def update(
        self,
        model: LinearModel,
        example: Example,
        prediction: float,
        error: float,
        learning_rate: float,
    ) -> None: ...

    def epoch_loss(self, errors: np.ndarray) -> float: ...


class RegressionStep:
    """Identity output, squared-error gradient, RMSE loss."""

    def predict(self, model: LinearModel, example: DenseExample) -> float:
        return model.predict_dense(example.features)

    def update(
        self,
        model: LinearModel,
        example: DenseExample,
        prediction: float,
        error: float,
        learning_rate: float,
    ) -> None:
        step = learning_rate * error
        model.bias -= step
        model.coefficients -= step * example.features

    def epoch_loss(self, errors: np.ndarray) -> float:
        return math.sqrt(float(np.mean(errors**2)))


class LogisticStep:
    """Sigmoid output over hashed indices; the loss is the mean signed error."""

    def predict(self, model: LinearModel, example: SparseExample) -> float:
        return model.predict_sparse(example.indices)

    def update(
        self,
        model: LinearModel,
        example: SparseExample,
        prediction: float,
        error: float,
        learning_rate: float,
    ) -> None:
        gradient = learning_rate * error * prediction * (1.0 - prediction)
        model.bias -= gradient
        # add.at applies the step once per occurrence of a repeated index.
        np.add.at(model.coefficients, example.indices, -gradient)

    def epoch_loss(self, errors: np.ndarray) -> float:
        return float(np.mean(errors))


STEPS: dict[ModelMode, UpdateStep] = {
    ModelMode.DENSE: RegressionStep(),
    ModelMode.SPARSE: LogisticStep(),
}


def step_for(mode: ModelMode) -> UpdateStep:
    return STEPS[ModelMode(mode)]


class SGDTrainer:
    """
    Fixed-length SGD over a dataset, one example at a time.

    Examples are visited in dataset order every epoch and the model is
    updated after each one. There is no shuffling and no early stopping, so
    the same inputs always produce the same model.

    Args:
        learning_rate: Step size applied to every update.
        num_epochs: Number of full passes over the dataset.
        on_epoch: Optional observer called with each epoch's report.
    """

    def __init__(
        self,
        learning_rate: float,
        num_epochs: int,
        on_epoch: Callable[[EpochReport], None] | None = None,
    ) -> None:
        if learning_rate <= 0:
            raise ValueError(f'learning_rate must be positive, got {learning_rate}')
        if num_epochs < 0:
            raise ValueError(f'num_epochs must not be negative, got {num_epochs}')
        self.learning_rate = learning_rate
        self.num_epochs = num_epochs
        self.on_epoch = on_epoch

    def fit(self, model: LinearModel, dataset: Sequence[Example]) -> TrainingResult:
        """Train ``model`` in place and return it with the per-epoch losses."""
        if len(dataset) == 0:
            raise ValueError('Cannot train on an empty dataset')
        step = step_for(model.mode)

        log.info(
            json_log(
                'train.start',
                component='training.sgd',
                mode=model.mode.value,
                examples=len(dataset),
                learning_rate=self.learning_rate,
                num_epochs=self.num_epochs,
            ),
        )

        result = TrainingResult(model=model)
        errors = np.empty(len(dataset), dtype=np.float64)
        for epoch in range(self.num_epochs):
            for i, example in enumerate(dataset):
                prediction = step.predict(model, example)
                error = prediction - example.label
                step.update(model, example, prediction, error, self.learning_rate)
                errors[i] = error

            report = EpochReport(epoch=epoch, loss=step.epoch_loss(errors))
            result.history.append(report)
            log.debug(
                json_log(
                    'train.epoch',
                    component='training.sgd',
                    epoch=epoch,
                    loss=report.loss,
                ),
            )
            if self.on_epoch is not None:
                self.on_epoch(report)

        log.info(
            json_log(
                'train.completed',
                component='training.sgd',
                epochs=self.num_epochs,
                final_loss=result.final_loss,
            ),
        )
        return result
