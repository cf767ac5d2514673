"""Structured logging helpers."""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any

import numpy as np

ROOT_LOGGER = 'linear_sgd'
DEBUG_ENV_VAR = 'LINEAR_SGD_DEBUG'


def _to_jsonable(value: Any) -> Any:
    # Epoch losses and bounds are numpy scalars/arrays.
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    return str(value)


def json_log(message: str, **extra: Any) -> str:
    """Return a JSON-formatted log string."""
    payload = {'ts': time.time(), 'msg': message, **extra}
    return json.dumps(payload, ensure_ascii=False, default=_to_jsonable)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package root, configuring the root once."""
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(message)s'))
        root.addHandler(handler)
        root.setLevel(logging.DEBUG if os.getenv(DEBUG_ENV_VAR) else logging.INFO)

    if name == ROOT_LOGGER or name.startswith(f'{ROOT_LOGGER}.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')


def set_log_level(verbose: bool = False, quiet: bool = False) -> None:
    """Adjust the package log level from CLI flags."""
    root = logging.getLogger(ROOT_LOGGER)
    if verbose:
        root.setLevel(logging.DEBUG)
    elif quiet:
        root.setLevel(logging.WARNING)
