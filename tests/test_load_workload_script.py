"""Tests for scripts/load_workload.py."""

import importlib.util
import json
from pathlib import Path

import pytest

from benchdata.config import GlobalConfig
from benchdata.workload import global_config

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "load_workload.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("load_workload", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_adhoc_load_prints_summary(script, unlabeled_csv, capsys):
    path, _ = unlabeled_csv
    assert script.main(["--full", str(path), "--num-blocks", "2", "--log-level", "WARNING"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["slices"]["full"]["x_blocks"] == [[50, 5], [50, 5]]


def test_missing_file_returns_error(script, tmp_path):
    argv = ["--train", str(tmp_path / "missing.csv"), "--log-level", "CRITICAL"]
    assert script.main(argv) == 1


def test_unknown_workload(script):
    with pytest.raises(SystemExit):
        script.main(["no_such_workload", "--log-level", "CRITICAL"])


def test_defaults_come_from_global_config(script, unlabeled_csv, monkeypatch, tmp_path):
    levels = []
    monkeypatch.setattr(script, "setup_logging", levels.append)
    monkeypatch.setenv("BENCHDATA_ROOT", str(tmp_path))
    path, _ = unlabeled_csv
    assert script.main(["--full", str(path)]) == 0
    assert levels == [GlobalConfig.from_yaml().log_level]
    assert global_config().root_path == str(tmp_path)
