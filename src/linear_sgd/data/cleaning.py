"""Text normalization applied to sentence datasets before hashing."""

from __future__ import annotations

import unicodedata
from pathlib import Path

import pandas as pd

from ..utils import get_logger, json_log

log = get_logger(__name__)


def strip_diacritics(text: str) -> str:
    """Remove combining marks, e.g. ``'ação'`` becomes ``'acao'``."""
    decomposed = unicodedata.normalize('NFD', text)
    stripped = ''.join(ch for ch in decomposed if unicodedata.category(ch) != 'Mn')
    return unicodedata.normalize('NFC', stripped)


def normalize_text(text: str) -> str:
    """Lowercase, strip diacritics and collapse whitespace to single spaces."""
    return ' '.join(strip_diacritics(text).lower().split())


def normalize_sentences(
    input_csv: str | Path,
    output_path: str | Path,
    text_column: str | None = None,
    delimiter: str = ',',
) -> Path:
    """Normalize a text column of a CSV. Defaults to the first column."""
    input_path = Path(input_csv)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.read_csv(input_path, sep=delimiter, dtype=str, keep_default_na=False)
    column = text_column if text_column is not None else df.columns[0]
    if column not in df.columns:
        raise ValueError(f"Column '{column}' not found for normalization")

    df[column] = df[column].fillna('').astype(str).map(normalize_text)
    df.to_csv(output_path, sep=delimiter, index=False)

    log.info(
        json_log(
            'normalize.completed',
            component='data.cleaning',
            input=str(input_path),
            output=str(output_path),
            rows=len(df),
            text_column=column,
        ),
    )
    return output_path
