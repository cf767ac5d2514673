"""In-memory training and test examples."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np


@dataclass
class DenseExample:
    """A numeric feature vector with a scalar target."""

    features: np.ndarray
    label: float


@dataclass
class SparseExample:
    """A sentence, its hashed feature indices and a 0/1 label."""

    sentence: str
    indices: np.ndarray
    label: float


Example = DenseExample | SparseExample
DenseDataset = Sequence[DenseExample]
SparseDataset = Sequence[SparseExample]
