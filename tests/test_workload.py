"""Tests for config loading and workload path resolution."""

from pathlib import Path

import numpy as np
import pytest
from pydantic import ValidationError

from benchdata.config import CONFIGS_DIR, DatasetConfig, GlobalConfig, WorkloadConfig, load_workloads
from benchdata.workload import Workload, global_config, root_path, set_global_config, set_root_path


class TestConfig:

    def test_dataset_defaults(self):
        cfg = DatasetConfig()
        assert cfg.num_blocks == 1
        assert cfg.labeled
        assert cfg.path_to_full is None

    def test_block_count_validated(self):
        with pytest.raises(ValidationError):
            DatasetConfig(num_blocks=0)

    def test_buffer_type_validated(self):
        with pytest.raises(ValidationError):
            WorkloadConfig(name="w", buffer_type="half")

    def test_workloads_file_shipped(self):
        workloads = load_workloads()
        assert "higgs_2M" in workloads
        assert workloads["higgs_2M"].name == "higgs_2M"
        assert workloads["epsilon_80k"].buffer_type == "float"

    def test_workloads_from_yaml(self, tmp_path):
        path = tmp_path / "workloads.yaml"
        path.write_text(
            "toy:\n"
            "  dataset:\n"
            "    path_to_full: toy.csv\n"
            "    num_features: 3\n"
        )
        workloads = load_workloads(path)
        assert workloads["toy"].dataset.num_features == 3
        assert workloads["toy"].buffer_type == "double"

    def test_global_config_from_yaml(self):
        cfg = GlobalConfig.from_yaml(CONFIGS_DIR / "global.yaml")
        assert cfg.log_level == "INFO"

    def test_root_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BENCHDATA_ROOT", str(tmp_path))
        assert GlobalConfig().root_path == str(tmp_path)

    def test_root_from_environment_survives_yaml(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BENCHDATA_ROOT", str(tmp_path))
        assert GlobalConfig.from_yaml().root_path == str(tmp_path)

    def test_empty_root_in_yaml_falls_back(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BENCHDATA_ROOT", str(tmp_path))
        path = tmp_path / "global.yaml"
        path.write_text("root_path:\nlog_level: DEBUG\n")
        cfg = GlobalConfig.from_yaml(path)
        assert cfg.root_path == str(tmp_path)
        assert cfg.log_level == "DEBUG"


class TestWorkload:

    def test_paths(self, tmp_path):
        set_root_path(tmp_path)
        workload = Workload("higgs_2M")
        assert workload.path() == tmp_path / "workloads" / "higgs_2M"
        assert workload.path_to_dataset("a.csv") == tmp_path / "workloads" / "higgs_2M" / "dataset" / "a.csv"

    def test_reset_restores_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("BENCHDATA_ROOT", raising=False)
        set_root_path(tmp_path)
        set_global_config(None)
        assert root_path() == Path.cwd()
        assert global_config().log_level == "INFO"

    def test_load_workload(self, tmp_path, rng):
        set_root_path(tmp_path)
        data = rng.normal(size=(40, 4))
        dataset_dir = tmp_path / "workloads" / "toy" / "dataset"
        dataset_dir.mkdir(parents=True)
        np.savetxt(dataset_dir / "toy.csv", data, delimiter=",")

        cfg = WorkloadConfig(
            name="toy",
            buffer_type="float",
            dataset=DatasetConfig(path_to_full="toy.csv", num_features=3,
                                  num_responses=1, num_blocks=4, num_tries=2),
        )
        ds = Workload.load(cfg)
        full = ds.full()
        assert full.num_blocks == 4
        assert full.x_block(0).dtype == np.float32
        assert full.xy_blocks(3).shape == (10, 4)
        assert ds.num_tries == 2
