"""Linear model with a bias, a coefficient vector and an output activation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import numpy as np

DEFAULT_TABLE_SIZE = 2**21


class ModelMode(StrEnum):
    DENSE = 'dense'
    SPARSE = 'sparse'


def sigmoid(x: float) -> float:
    """Logistic function, evaluated without overflow for large |x|."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


@dataclass(eq=False)
class LinearModel:
    """
    A linear model of the form ``y = bias + c0*x0 + c1*x1 + ... + cN*xN``.

    Dense models hold one coefficient per input column and the min/max bounds
    the training set was scaled with. Sparse models hold one coefficient per
    hash table slot and score ``sigmoid(bias + sum of the slots hit)``.
    """

    mode: ModelMode
    bias: float
    coefficients: np.ndarray
    feature_min: np.ndarray | None = None
    feature_max: np.ndarray | None = None
    feature_names: list[str] | None = None
    ngrams: int = 0
    training: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.mode = ModelMode(self.mode)
        self.bias = float(self.bias)
        self.coefficients = np.asarray(self.coefficients, dtype=np.float64)
        if self.coefficients.ndim != 1 or self.coefficients.size == 0:
            raise ValueError('coefficients must be a non-empty 1-D array')

        if self.mode is ModelMode.DENSE:
            if self.feature_min is None or self.feature_max is None:
                raise ValueError('dense models require feature_min and feature_max')
            self.feature_min = np.asarray(self.feature_min, dtype=np.float64)
            self.feature_max = np.asarray(self.feature_max, dtype=np.float64)
            n_features = self.coefficients.shape[0]
            if self.feature_min.shape != (n_features,) or self.feature_max.shape != (n_features,):
                raise ValueError('feature bounds must match the coefficient length')
            if np.any(self.feature_max < self.feature_min):
                raise ValueError('feature_max must be greater than or equal to feature_min')
            if self.feature_names is not None and len(self.feature_names) != n_features:
                raise ValueError('feature_names must match the coefficient length')
        else:
            table_size = self.coefficients.shape[0]
            if table_size & (table_size - 1):
                raise ValueError(f'sparse table size must be a power of two, got {table_size}')
            if self.ngrams < 0:
                raise ValueError('ngrams must not be negative')

    @classmethod
    def dense(
        cls,
        n_features: int,
        feature_min: np.ndarray | None = None,
        feature_max: np.ndarray | None = None,
        feature_names: list[str] | None = None,
    ) -> LinearModel:
        """Zero-initialised regression model over ``n_features`` columns."""
        if feature_min is None:
            feature_min = np.zeros(n_features)
        if feature_max is None:
            feature_max = np.ones(n_features)
        return cls(
            mode=ModelMode.DENSE,
            bias=0.0,
            coefficients=np.zeros(n_features),
            feature_min=feature_min,
            feature_max=feature_max,
            feature_names=feature_names,
        )

    @classmethod
    def sparse(cls, table_size: int = DEFAULT_TABLE_SIZE, ngrams: int = 0) -> LinearModel:
        """Zero-initialised logistic model over a hash table."""
        return cls(
            mode=ModelMode.SPARSE,
            bias=0.0,
            coefficients=np.zeros(table_size),
            ngrams=ngrams,
        )

    @property
    def n_coefficients(self) -> int:
        return int(self.coefficients.shape[0])

    @property
    def table_size(self) -> int | None:
        return self.n_coefficients if self.mode is ModelMode.SPARSE else None

    def sparse_score(self, indices: np.ndarray) -> float:
        """Logit of a sparse example: bias plus one coefficient per index occurrence."""
        return self.bias + float(self.coefficients[indices].sum())

    def predict_dense(self, features: np.ndarray) -> float:
        return self.bias + float(np.dot(self.coefficients, features))

    def predict_sparse(self, indices: np.ndarray) -> float:
        return sigmoid(self.sparse_score(indices))

    def predict(self, example: Any) -> float:
        """Predict one example using the activation of the model mode."""
        if self.mode is ModelMode.DENSE:
            return self.predict_dense(example.features)
        return self.predict_sparse(example.indices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinearModel):
            return NotImplemented
        return (
            self.mode is other.mode
            and self.bias == other.bias
            and self.ngrams == other.ngrams
            and self.feature_names == other.feature_names
            and np.array_equal(self.coefficients, other.coefficients)
            and _optional_equal(self.feature_min, other.feature_min)
            and _optional_equal(self.feature_max, other.feature_max)
        )


def _optional_equal(left: np.ndarray | None, right: np.ndarray | None) -> bool:
    if left is None or right is None:
        return left is right
    return np.array_equal(left, right)
