"""Utility helpers for linear_sgd."""

from .logging import get_logger, json_log, set_log_level

__all__ = ['get_logger', 'json_log', 'set_log_level']
