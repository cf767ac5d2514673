"""End-to-end training and evaluation through CSV files and model JSON."""

from __future__ import annotations

from dataclasses import replace

import pandas as pd
import pytest

from linear_sgd.config import default_config
from linear_sgd.evaluation import evaluate, read_dataset_for
from linear_sgd.models import load_model
from linear_sgd.training import train_from_config


def test_dense_regression_round_trip(tmp_path):
    train_csv = tmp_path / 'wine.csv'
    alcohol = list(range(20))
    pd.DataFrame(
        {
            'alcohol': alcohol,
            'ph': [3.2] * 20,
            'quality': [value / 19 for value in alcohol],
        },
    ).to_csv(train_csv, index=False)
    config = default_config('dense')
    config = replace(config, optimizer=replace(config.optimizer, learning_rate=0.1, num_epochs=500))

    run = train_from_config(config, train_csv, tmp_path / 'models' / 'wine.json')

    assert run.n_examples == 20
    assert len(run.history) == 500
    assert run.history[-1].loss < 1e-3
    assert run.model.coefficients[1] == 0.0

    model = load_model(run.output_path)
    assert model == run.model
    assert model.feature_names == ['alcohol', 'ph']
    assert model.training['examples'] == 20

    rmse = evaluate(model, read_dataset_for(model, train_csv))
    assert rmse == pytest.approx(0.0, abs=1e-3)


def test_sparse_classification_round_trip(tmp_path):
    train_csv = tmp_path / 'reviews.csv'
    pd.DataFrame(
        {
            'sentence': [
                'great gym friendly staff',
                'love the new machines',
                'bad service and dirty showers',
                'terrible crowded place',
                'great classes',
                'dirty and crowded',
            ],
            'label': ['1', '1', '0', '0', '1', 'n/a'],
        },
    ).to_csv(train_csv, index=False)
    config = default_config('sparse')
    config = replace(
        config,
        optimizer=replace(config.optimizer, learning_rate=0.5, num_epochs=200),
        hashing=replace(config.hashing, ngrams=2),
    )

    run = train_from_config(config, train_csv, tmp_path / 'sentiment.json')

    assert run.n_examples == 5
    model = load_model(run.output_path)
    assert model == run.model
    assert model.ngrams == 2
    assert model.table_size == 2**21

    predictions = []
    accuracy = evaluate(
        model,
        read_dataset_for(model, train_csv),
        listener=lambda example, prediction: predictions.append((example.label, prediction)),
    )
    assert accuracy == 1.0
    assert [label for label, _ in predictions] == [1.0, 1.0, 0.0, 0.0, 1.0]


def test_sparse_dataset_without_usable_rows(tmp_path):
    train_csv = tmp_path / 'reviews.csv'
    train_csv.write_text('sentence,label\ngreat,yes\n', encoding='utf-8')

    with pytest.raises(ValueError, match='No usable examples'):
        train_from_config(default_config('sparse'), train_csv, tmp_path / 'model.json')
