"""Held-out evaluation of trained models."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from pathlib import Path

import numpy as np
from sklearn.metrics import accuracy_score, mean_squared_error

from ..data.examples import DenseExample, Example
from ..data.loading import read_dense_dataset, read_sparse_dataset
from ..features import FeatureHasher, FeatureNormalizer, MinMaxBounds
from ..models import LinearModel, ModelMode
from ..utils import get_logger, json_log

log = get_logger(__name__)

CLASSIFICATION_THRESHOLD = 0.5

Listener = Callable[[Example, float], None]


def apply_model_bounds(model: LinearModel, dataset: Sequence[DenseExample]) -> None:
    """Scale a dense dataset in place with the bounds captured at training."""
    bounds = MinMaxBounds(minimum=model.feature_min, maximum=model.feature_max)
    FeatureNormalizer().transform(dataset, bounds)


def classify(prediction: float, threshold: float = CLASSIFICATION_THRESHOLD) -> float:
    return 1.0 if prediction > threshold else 0.0


def evaluate(
    model: LinearModel,
    dataset: Sequence[Example],
    listener: Listener | None = None,
) -> float:
    """
    Score every example and return the metric for the model mode.

    Dense models are evaluated on the dataset after scaling it in place with
    the model's bounds and return RMSE. Sparse models return accuracy, with a
    prediction above 0.5 read as label 1.

    Args:
        model: A trained model.
        dataset: Unscaled examples matching the model mode.
        listener: Called with ``(example, prediction)`` for each example.
    """
    if len(dataset) == 0:
        raise ValueError('Cannot evaluate on an empty dataset')

    if model.mode is ModelMode.DENSE:
        apply_model_bounds(model, dataset)

    predictions = np.empty(len(dataset), dtype=np.float64)
    labels = np.empty(len(dataset), dtype=np.float64)
    for i, example in enumerate(dataset):
        prediction = model.predict(example)
        predictions[i] = prediction
        labels[i] = example.label
        if listener is not None:
            listener(example, prediction)

    if model.mode is ModelMode.DENSE:
        name = 'rmse'
        metric = math.sqrt(mean_squared_error(labels, predictions))
    else:
        name = 'accuracy'
        predicted = np.where(predictions > CLASSIFICATION_THRESHOLD, 1.0, 0.0)
        metric = float(accuracy_score(labels, predicted))

    log.info(
        json_log(
            'evaluate.completed',
            component='evaluation',
            mode=model.mode.value,
            examples=len(dataset),
            metric=name,
            value=metric,
        ),
    )
    return metric


def read_dataset_for(
    model: LinearModel,
    dataset_path: str | Path,
    delimiter: str = ',',
) -> list[Example]:
    """Read a dataset the way the model was trained to see it."""
    if model.mode is ModelMode.DENSE:
        dataset, _ = read_dense_dataset(dataset_path, delimiter=delimiter)
        return dataset
    hasher = FeatureHasher(table_size=model.n_coefficients, ngrams=model.ngrams)
    return read_sparse_dataset(dataset_path, hasher, delimiter=delimiter)


def metric_name(model: LinearModel) -> str:
    return 'RMSE' if model.mode is ModelMode.DENSE else 'Accuracy'
