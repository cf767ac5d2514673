from __future__ import annotations

import platform
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..config import TrainingConfig, validate_config
from ..data.loading import read_dense_dataset, read_sparse_dataset
from ..features import FeatureHasher, FeatureNormalizer
from ..models import LinearModel, ModelMode, save_model
from ..utils.logging import get_logger, json_log
from .sgd import EpochReport, SGDTrainer

log = get_logger(__name__)


@dataclass(frozen=True)
class TrainingRun:
    model: LinearModel
    history: list[EpochReport]
    output_path: Path
    n_examples: int


def build_model(
    config: TrainingConfig,
    dataset_path: str | Path,
) -> tuple[LinearModel, list]:
    """Read the dataset and return an untrained model sized for it.

    Dense datasets come back already scaled with the bounds stored on the
    model.
    """
    if config.mode is ModelMode.DENSE:
        dataset, feature_names = read_dense_dataset(dataset_path, delimiter=config.data.delimiter)
        bounds = FeatureNormalizer().fit_transform(dataset)
        model = LinearModel.dense(
            bounds.n_features,
            feature_min=bounds.minimum,
            feature_max=bounds.maximum,
            feature_names=feature_names,
        )
        return model, dataset

    hasher = FeatureHasher(table_size=config.hashing.table_size, ngrams=config.hashing.ngrams)
    dataset = read_sparse_dataset(dataset_path, hasher, delimiter=config.data.delimiter)
    if not dataset:
        raise ValueError(f'No usable examples in {dataset_path}')
    model = LinearModel.sparse(table_size=hasher.table_size, ngrams=hasher.ngrams)
    return model, dataset


def train_from_config(
    config: TrainingConfig,
    dataset_path: str | Path,
    output_path: str | Path,
    on_epoch: Callable[[EpochReport], None] | None = None,
    on_loaded: Callable[[int], None] | None = None,
) -> TrainingRun:
    """Train a model on a CSV dataset and save it as JSON."""
    validate_config(config)
    log.info(
        json_log(
            'pipeline.start',
            component='training.pipeline',
            mode=config.mode.value,
            dataset=str(dataset_path),
            output=str(output_path),
        ),
    )

    model, dataset = build_model(config, dataset_path)
    if on_loaded is not None:
        on_loaded(len(dataset))

    trainer = SGDTrainer(
        learning_rate=config.optimizer.learning_rate,
        num_epochs=config.optimizer.num_epochs,
        on_epoch=on_epoch,
    )
    result = trainer.fit(model, dataset)

    model.training = {
        'learning_rate': config.optimizer.learning_rate,
        'num_epochs': config.optimizer.num_epochs,
        'examples': len(dataset),
        'final_loss': result.final_loss,
        'trained_at': datetime.now(UTC).isoformat(),
        'python_version': platform.python_version(),
    }
    saved = save_model(model, output_path)

    log.info(
        json_log(
            'pipeline.completed',
            component='training.pipeline',
            output=str(saved),
            final_loss=result.final_loss,
        ),
    )
    return TrainingRun(
        model=model,
        history=result.history,
        output_path=saved,
        n_examples=len(dataset),
    )
