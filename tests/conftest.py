"""Shared fixtures: CSV files written to tmp_path."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from benchdata.utils.logger import setup_logging
from benchdata.workload import set_global_config


@pytest.fixture
def rng():
    return np.random.default_rng(7)


@pytest.fixture
def write_csv(tmp_path):
    """Write a 2D array to ``tmp_path/<name>`` as headerless CSV and return the path."""

    def _write(name: str, data: np.ndarray) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        np.savetxt(path, data, delimiter=",")
        return path

    return _write


@pytest.fixture
def unlabeled_csv(write_csv, rng):
    """100 rows x 5 features."""
    data = rng.normal(size=(100, 5))
    return write_csv("unlabeled.csv", data), data


@pytest.fixture
def labeled_csv(write_csv, rng):
    """97 rows x (4 features + 1 response)."""
    data = rng.normal(size=(97, 5))
    return write_csv("labeled.csv", data), data


@pytest.fixture(autouse=True)
def reset_global_config():
    set_global_config(None)
    yield
    set_global_config(None)


@pytest.fixture(autouse=True)
def fresh_log_sink():
    """Point loguru at the stderr of the running test."""
    setup_logging("DEBUG")
    yield
