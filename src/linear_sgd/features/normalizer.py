"""Min-max scaling of dense feature vectors."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..data.examples import DenseDataset
from ..utils import get_logger, json_log

log = get_logger(__name__)


@dataclass(frozen=True)
class MinMaxBounds:
    """Per-feature minimum and maximum captured on the training set."""

    minimum: np.ndarray
    maximum: np.ndarray

    def __post_init__(self) -> None:
        if self.minimum.shape != self.maximum.shape or self.minimum.ndim != 1:
            raise ValueError('minimum and maximum must be 1-D arrays of the same length')
        if np.any(self.maximum < self.minimum):
            raise ValueError('maximum must be greater than or equal to minimum')

    @property
    def n_features(self) -> int:
        return int(self.minimum.shape[0])

    def constant_features(self) -> list[int]:
        return np.flatnonzero(self.maximum == self.minimum).tolist()


class FeatureNormalizer:
    """Rescales dense features to [0, 1].

    A feature that is constant on the training set has no range to scale
    by; it is mapped to 0.0.
    """

    def fit(self, dataset: DenseDataset) -> MinMaxBounds:
        if len(dataset) == 0:
            raise ValueError('Cannot fit normalizer on an empty dataset')

        n_features = len(dataset[0].features)
        minimum = np.array(dataset[0].features, dtype=np.float64)
        maximum = minimum.copy()
        for row, example in enumerate(dataset):
            if len(example.features) != n_features:
                raise ValueError(
                    f'Example {row} has {len(example.features)} features, expected {n_features}',
                )
            values = example.features
            np.minimum(minimum, values, out=minimum)
            np.maximum(maximum, values, out=maximum)

        bounds = MinMaxBounds(minimum=minimum, maximum=maximum)
        constant = bounds.constant_features()
        if constant:
            log.warning(
                json_log(
                    'normalizer.constant_features',
                    component='features.normalizer',
                    features=constant,
                ),
            )
        return bounds

    def transform(self, dataset: DenseDataset, bounds: MinMaxBounds) -> None:
        """Rescale every example in place."""
        span = bounds.maximum - bounds.minimum
        constant = span == 0
        safe_span = np.where(constant, 1.0, span)
        n_features = bounds.n_features
        for row, example in enumerate(dataset):
            if len(example.features) != n_features:
                raise ValueError(
                    f'Example {row} has {len(example.features)} features, expected {n_features}',
                )
            scaled = (example.features - bounds.minimum) / safe_span
            scaled[constant] = 0.0
            example.features = scaled

    def fit_transform(self, dataset: DenseDataset) -> MinMaxBounds:
        bounds = self.fit(dataset)
        self.transform(dataset, bounds)
        return bounds
