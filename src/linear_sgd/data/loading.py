"""CSV dataset readers for dense and sparse examples."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from ..features.hashing import FeatureHasher
from ..utils import get_logger, json_log
from .examples import DenseExample, SparseExample

log = get_logger(__name__)


class DatasetFormatError(ValueError):
    """Raised when a dataset file cannot be turned into examples."""


def _read_frame(path: Path, delimiter: str, **kwargs) -> pd.DataFrame:
    """Read a headed CSV, failing on records whose width differs from the header."""
    if not path.exists():
        raise FileNotFoundError(f'Dataset file not found: {path}')
    try:
        columns = pd.read_csv(path, sep=delimiter, nrows=0).columns
    except pd.errors.EmptyDataError as exc:
        raise DatasetFormatError(f'Dataset file is empty: {path}') from exc

    # With header=0 pandas turns a first record one field wider than the
    # header into an index column, so the header is read on its own.
    try:
        df = pd.read_csv(path, sep=delimiter, header=None, skiprows=1, **kwargs)
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=columns)
    except pd.errors.ParserError as exc:
        raise DatasetFormatError(f'Malformed record in {path}: {exc}') from exc

    if df.shape[1] != len(columns):
        raise DatasetFormatError(
            f'Malformed records in {path}: expected {len(columns)} fields, found {df.shape[1]}',
        )
    df.columns = columns
    return df


def read_dense_dataset(
    path: str | Path,
    delimiter: str = ',',
) -> tuple[list[DenseExample], list[str]]:
    """
    Read numeric feature columns followed by a numeric label column.

    Any malformed row aborts the whole read: too many fields, a missing or
    empty value, or a value that is not a number.

    Returns:
        The examples and the feature column names from the header.
    """
    input_path = Path(path)
    df = _read_frame(input_path, delimiter)
    if df.shape[1] < 2:
        raise DatasetFormatError(
            f'Dense dataset needs at least one feature and a label column: {input_path}',
        )

    missing = df.isna()
    if missing.any().any():
        rows, cols = np.nonzero(missing.to_numpy())
        row, column = rows[0], cols[0]
        raise DatasetFormatError(
            f'Missing value in {input_path} at record {int(row) + 1}, column {df.columns[column]!r}',
        )
    try:
        values = df.to_numpy(dtype=np.float64)
    except ValueError as exc:
        raise DatasetFormatError(f'Non-numeric value in {input_path}: {exc}') from exc

    feature_names = [str(name) for name in df.columns[:-1]]
    examples = [
        DenseExample(features=row[:-1].copy(), label=float(row[-1]))
        for row in values
    ]

    log.info(
        json_log(
            'dataset.dense.loaded',
            component='data.loading',
            input=str(input_path),
            rows=len(examples),
            features=len(feature_names),
        ),
    )
    return examples, feature_names


def read_sparse_dataset(
    path: str | Path,
    hasher: FeatureHasher,
    delimiter: str = ',',
) -> list[SparseExample]:
    """
    Read ``sentence,label`` records and hash each sentence.

    The label is the last column. Records whose label is not a number are
    skipped with a warning; a record with too many fields aborts the read.
    """
    input_path = Path(path)
    df = _read_frame(input_path, delimiter, dtype=str, keep_default_na=False)
    if df.shape[1] < 2:
        raise DatasetFormatError(
            f'Sparse dataset needs a sentence and a label column: {input_path}',
        )

    sentences = df.iloc[:, 0].fillna('').astype(str)
    raw_labels = df.iloc[:, -1]
    labels = pd.to_numeric(raw_labels, errors='coerce')

    examples: list[SparseExample] = []
    skipped = 0
    for position, (sentence, raw_label, label) in enumerate(
        zip(sentences, raw_labels, labels, strict=True),
    ):
        if pd.isna(label):
            skipped += 1
            log.warning(
                json_log(
                    'dataset.sparse.label_skipped',
                    component='data.loading',
                    input=str(input_path),
                    record=position + 1,
                    label=raw_label if isinstance(raw_label, str) else None,
                ),
            )
            continue
        examples.append(
            SparseExample(
                sentence=sentence,
                indices=hasher.transform(sentence),
                label=float(label),
            ),
        )

    log.info(
        json_log(
            'dataset.sparse.loaded',
            component='data.loading',
            input=str(input_path),
            rows=len(examples),
            skipped=skipped,
            table_size=hasher.table_size,
            ngrams=hasher.ngrams,
        ),
    )
    return examples
