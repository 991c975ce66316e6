"""
Workload path resolution under a process-wide root directory.

Layout::

    <root>/workloads/<name>/
    <root>/workloads/<name>/dataset/<file>
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from benchdata.config import GlobalConfig, WorkloadConfig
from benchdata.data.csv_dataset import DatasetFromCsv
from benchdata.data.dataset import Dataset
from benchdata.data.factory import BufferType

_global_config: Optional[GlobalConfig] = None


def global_config() -> GlobalConfig:
    """The process-wide config, created from defaults on first use."""
    global _global_config
    if _global_config is None:
        _global_config = GlobalConfig()
    return _global_config


def set_global_config(cfg: Optional[GlobalConfig]) -> None:
    """Replace the process-wide config; None resets it to defaults."""
    global _global_config
    _global_config = cfg


def root_path() -> Path:
    return Path(global_config().root_path)


def set_root_path(path: Path | str) -> None:
    global_config().root_path = str(path)


class Workload:
    """A named benchmark workload living under the root directory."""

    def __init__(self, name: str):
        self.name = name

    def path(self) -> Path:
        return root_path() / "workloads" / self.name

    def path_to_dataset(self, file_name: str) -> Path:
        return self.path() / "dataset" / file_name

    def dataset(self, cfg: WorkloadConfig) -> DatasetFromCsv:
        """A loader recipe with ``cfg``'s file names resolved under this workload."""
        return DatasetFromCsv.from_config(cfg.dataset, base_dir=self.path() / "dataset")

    @classmethod
    def load(cls, cfg: WorkloadConfig) -> Dataset:
        """Resolve and load the dataset described by ``cfg``."""
        workload = cls(cfg.name)
        return workload.dataset(cfg).load(BufferType.from_name(cfg.buffer_type))

    def __repr__(self) -> str:
        return f"Workload({self.name!r})"
