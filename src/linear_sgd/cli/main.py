"""Command-line interface for linear_sgd."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from ..config import (
    ConfigError,
    TrainingConfig,
    default_config,
    load_training_config,
    validate_config,
)
from ..data import DatasetFormatError, normalize_sentences, normalize_text
from ..data.examples import Example, SparseExample
from ..evaluation import classify, evaluate, metric_name, read_dataset_for
from ..features import FeatureHasher
from ..models import ModelLoadError, ModelMode, load_model
from ..training import EpochReport, train_from_config
from ..utils import get_logger, json_log, set_log_level

app = typer.Typer(help='Linear models trained with SGD', no_args_is_help=True)

log = get_logger(__name__)

USER_ERRORS = (ConfigError, DatasetFormatError, ModelLoadError, ValueError, OSError)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option('--verbose', '-v', help='Enable debug logging.'),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option('--quiet', '-q', help='Only log warnings and errors.'),
    ] = False,
) -> None:
    set_log_level(verbose=verbose, quiet=quiet)


def _fail(action: str, exc: Exception) -> typer.Exit:
    log.error(json_log(f'cli.{action}.failed', component='cli', error=str(exc)))
    typer.echo(f'Error {action}: {exc}', err=True)
    return typer.Exit(code=1)


def _apply_overrides(
    config: TrainingConfig,
    learning_rate: float | None = None,
    epochs: int | None = None,
    ngrams: int | None = None,
    table_size: int | None = None,
    delimiter: str | None = None,
) -> TrainingConfig:
    optimizer_overrides: dict[str, float | int] = {}
    if learning_rate is not None:
        optimizer_overrides['learning_rate'] = learning_rate
    if epochs is not None:
        optimizer_overrides['num_epochs'] = epochs
    hashing_overrides: dict[str, int] = {}
    if ngrams is not None:
        hashing_overrides['ngrams'] = ngrams
    if table_size is not None:
        hashing_overrides['table_size'] = table_size

    config = replace(
        config,
        optimizer=replace(config.optimizer, **optimizer_overrides),
        hashing=replace(config.hashing, **hashing_overrides),
    )
    if delimiter is not None:
        config = replace(config, data=replace(config.data, delimiter=delimiter))
    return validate_config(config)


@app.command('train')
def train(
    input_csv: Annotated[
        Path,
        typer.Option(
            '--input',
            '-i',
            exists=True,
            readable=True,
            help='Path to the training CSV.',
        ),
    ],
    output: Annotated[
        Path,
        typer.Option('--output', '-o', help='Where to write the model JSON.'),
    ],
    mode: Annotated[
        ModelMode | None,
        typer.Option('--mode', '-m', help='dense (regression) or sparse (text classification).'),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            '--config',
            '-c',
            exists=True,
            readable=True,
            help='Optional training configuration YAML.',
        ),
    ] = None,
    learning_rate: Annotated[
        float | None,
        typer.Option('--learning-rate', '--lr', help='SGD step size.'),
    ] = None,
    epochs: Annotated[
        int | None,
        typer.Option('--epochs', '-e', help='Number of passes over the dataset.'),
    ] = None,
    ngrams: Annotated[
        int | None,
        typer.Option('--ngrams', '-n', help='N-gram order for sparse text features (0 disables).'),
    ] = None,
    table_size: Annotated[
        int | None,
        typer.Option('--table-size', help='Hash table size, a power of two.'),
    ] = None,
    delimiter: Annotated[
        str | None,
        typer.Option('--delimiter', help='CSV field delimiter (default: ,).'),
    ] = None,
) -> None:
    """Train a model on a CSV dataset and save it as JSON."""
    if config is None and mode is None:
        raise typer.BadParameter('--mode is required when no --config is given', param_hint='--mode')

    try:
        cfg = load_training_config(config, mode=mode) if config else default_config(mode)
        cfg = _apply_overrides(
            cfg,
            learning_rate=learning_rate,
            epochs=epochs,
            ngrams=ngrams,
            table_size=table_size,
            delimiter=delimiter,
        )
    except (ConfigError, OSError) as exc:
        raise _fail('loading config', exc) from exc

    log.info(
        json_log(
            'cli.train.start',
            component='cli',
            input=str(input_csv),
            output=str(output),
            mode=cfg.mode.value,
            config=str(config) if config else None,
        ),
    )

    def report_loaded(count: int) -> None:
        typer.echo(f'Read {count} training examples')

    def report_epoch(report: EpochReport) -> None:
        typer.echo(f'Epoch {report.epoch} loss {report.loss:.3f}')

    try:
        run = train_from_config(
            cfg,
            input_csv,
            output,
            on_epoch=report_epoch,
            on_loaded=report_loaded,
        )
    except USER_ERRORS as exc:
        raise _fail('training', exc) from exc

    typer.echo(f'Model written to: {run.output_path}')


def _format_example(example: Example, prediction: float) -> str:
    if isinstance(example, SparseExample):
        return f'{example.label:.3f}\t{prediction:.3f}\t{example.sentence}'
    return f'{example.label:.3f},{prediction:.3f}'


@app.command('evaluate')
def evaluate_model(
    model_path: Annotated[
        Path,
        typer.Option('--model', '-m', exists=True, readable=True, help='Model JSON to evaluate.'),
    ],
    input_csv: Annotated[
        Path,
        typer.Option('--input', '-i', exists=True, readable=True, help='Held-out CSV dataset.'),
    ],
    delimiter: Annotated[
        str,
        typer.Option('--delimiter', help='CSV field delimiter.'),
    ] = ',',
    show_examples: Annotated[
        bool,
        typer.Option('--show-examples/--no-show-examples', help='Print one line per example.'),
    ] = True,
) -> None:
    """Print per-example predictions and the accuracy (sparse) or RMSE (dense)."""
    try:
        model = load_model(model_path)
        dataset = read_dataset_for(model, input_csv, delimiter=delimiter)

        def listener(example: Example, prediction: float) -> None:
            if show_examples:
                typer.echo(_format_example(example, prediction))

        value = evaluate(model, dataset, listener=listener)
    except USER_ERRORS as exc:
        raise _fail('evaluating', exc) from exc

    typer.echo(f'\n{metric_name(model)}: {value:.3f}')


@app.command('predict')
def predict(
    model_path: Annotated[
        Path,
        typer.Option('--model', '-m', exists=True, readable=True, help='Sparse model JSON.'),
    ],
    text: Annotated[
        str,
        typer.Option('--text', '-t', help='Sentence to score.'),
    ],
    normalize: Annotated[
        bool,
        typer.Option('--normalize/--no-normalize', help='Lowercase and strip diacritics first.'),
    ] = False,
) -> None:
    """Score a single sentence with a text model."""
    try:
        model = load_model(model_path)
    except USER_ERRORS as exc:
        raise _fail('loading model', exc) from exc
    if model.mode is not ModelMode.SPARSE:
        raise _fail('predicting', ValueError('predict only supports sparse text models'))

    sentence = normalize_text(text) if normalize else text
    hasher = FeatureHasher(table_size=model.n_coefficients, ngrams=model.ngrams)
    probability = model.predict_sparse(hasher.transform(sentence))
    typer.echo(f'Probability: {probability:.3f}')
    typer.echo(f'Label: {int(classify(probability))}')


@app.command('normalize-dataset')
def normalize_dataset(
    input_csv: Annotated[
        Path,
        typer.Option(
            '--input',
            '-i',
            exists=True,
            readable=True,
            help='CSV file to normalize.',
        ),
    ],
    output_csv: Annotated[
        Path | None,
        typer.Option(
            '--output',
            '-o',
            help='Output path (default: <input>.normalized.csv).',
        ),
    ] = None,
    column: Annotated[
        str | None,
        typer.Option('--column', help='Text column to normalize (default: first column).'),
    ] = None,
    delimiter: Annotated[
        str,
        typer.Option('--delimiter', help='CSV field delimiter.'),
    ] = ',',
) -> None:
    """Strip diacritics, lowercase and collapse whitespace in a text column."""
    target_output = (
        output_csv.expanduser().resolve()
        if output_csv is not None
        else input_csv.with_suffix('.normalized.csv')
    )
    try:
        normalize_sentences(
            input_csv=input_csv,
            output_path=target_output,
            text_column=column,
            delimiter=delimiter,
        )
    except USER_ERRORS as exc:
        raise _fail('normalizing', exc) from exc
    typer.echo(f'Normalized dataset written to: {target_output}')


if __name__ == '__main__':
    app()
