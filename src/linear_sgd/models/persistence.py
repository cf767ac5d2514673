"""JSON persistence for trained linear models."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np

from ..utils import get_logger, json_log
from .linear import LinearModel, ModelMode

log = get_logger(__name__)

FORMAT_VERSION = 1


class ModelLoadError(RuntimeError):
    """Raised when a model file is missing, unreadable or inconsistent."""


def model_to_dict(model: LinearModel) -> dict[str, Any]:
    """Return the serializable record of a model.

    Sparse coefficients are stored as parallel ``indices``/``values`` lists of
    the non-zero slots; a hash table is mostly zeros.
    """
    record: dict[str, Any] = {
        'format_version': FORMAT_VERSION,
        'mode': model.mode.value,
        'bias': model.bias,
    }
    if model.mode is ModelMode.DENSE:
        record['feature_names'] = model.feature_names
        record['coefficients'] = model.coefficients.tolist()
        record['feature_min'] = model.feature_min.tolist()
        record['feature_max'] = model.feature_max.tolist()
    else:
        nonzero = np.flatnonzero(model.coefficients)
        record['table_size'] = model.n_coefficients
        record['ngrams'] = model.ngrams
        record['coefficients'] = {
            'indices': nonzero.tolist(),
            'values': model.coefficients[nonzero].tolist(),
        }
    if model.training:
        record['training'] = model.training
    return record


def model_from_dict(record: dict[str, Any]) -> LinearModel:
    """Rebuild a model from :func:`model_to_dict` output."""
    version = record.get('format_version')
    if version != FORMAT_VERSION:
        raise ModelLoadError(f'Unsupported model format version: {version!r}')

    try:
        mode = ModelMode(record['mode'])
        bias = float(record['bias'])
        if mode is ModelMode.DENSE:
            return LinearModel(
                mode=mode,
                bias=bias,
                coefficients=np.array(record['coefficients'], dtype=np.float64),
                feature_min=np.array(record['feature_min'], dtype=np.float64),
                feature_max=np.array(record['feature_max'], dtype=np.float64),
                feature_names=record.get('feature_names'),
                training=record.get('training') or {},
            )

        table_size = int(record['table_size'])
        sparse = record['coefficients']
        indices = np.array(sparse['indices'], dtype=np.int64)
        values = np.array(sparse['values'], dtype=np.float64)
        if indices.shape != values.shape:
            raise ModelLoadError('Sparse coefficient indices and values differ in length')
        if indices.size and (indices.min() < 0 or indices.max() >= table_size):
            raise ModelLoadError('Sparse coefficient index outside the hash table')
        coefficients = np.zeros(table_size, dtype=np.float64)
        coefficients[indices] = values
        return LinearModel(
            mode=mode,
            bias=bias,
            coefficients=coefficients,
            ngrams=int(record.get('ngrams', 0)),
            training=record.get('training') or {},
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ModelLoadError(f'Invalid model record: {exc}') from exc


def save_model(model: LinearModel, path: str | Path) -> Path:
    """Write a model as indented JSON, creating parent directories."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(model_to_dict(model), indent=1)
    output_path.write_text(content, encoding='utf-8')

    log.info(
        json_log(
            'model.saved',
            component='models.persistence',
            path=str(output_path),
            mode=model.mode.value,
            coefficients=model.n_coefficients,
        ),
    )
    return output_path


def load_model(path: str | Path) -> LinearModel:
    """
    Load a model written by :func:`save_model`.

    Raises:
        FileNotFoundError: If the file does not exist.
        ModelLoadError: If the file is not a valid model record.
    """
    model_path = Path(path)
    if not model_path.exists():
        raise FileNotFoundError(f'Model file not found: {model_path}')

    try:
        record = json.loads(model_path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as exc:
        raise ModelLoadError(f'Failed to parse model file {model_path}: {exc}') from exc
    if not isinstance(record, dict):
        raise ModelLoadError(f'Model file must contain a JSON object: {model_path}')

    model = model_from_dict(record)
    log.info(
        json_log(
            'model.loaded',
            component='models.persistence',
            path=str(model_path),
            mode=model.mode.value,
            coefficients=model.n_coefficients,
        ),
    )
    return model
