"""Unit tests for the command-line dataset selection."""

import argparse

from clip_reader                        import DuckDbDataset, PlainTextDataset
from clip_reader.__main__               import load_dataset
from clip_reader.core.feature_extractor import FEATURES
from omegaconf                          import OmegaConf

SETTINGS = OmegaConf.create({'dataset': {'engine': 'plain_text', 'features': FEATURES}})


def test_file_option_creates_plain_text_dataset(tmp_path):
    """-f opens (and creates) a plain-text dataset of the extractor's size."""
    args    = argparse.Namespace(database = None, file = str(tmp_path / 'samples.txt'))
    dataset = load_dataset(args, SETTINGS)

    assert isinstance(dataset, PlainTextDataset)
    assert dataset.features() == FEATURES


def test_database_option_takes_precedence(tmp_path):
    """-d selects the DuckDB engine."""
    args    = argparse.Namespace(database = str(tmp_path / 'samples.duckdb'), file = str(tmp_path / 'samples.txt'))
    dataset = load_dataset(args, SETTINGS)

    assert isinstance(dataset, DuckDbDataset)
    assert dataset.features() == FEATURES
