"""
Configuration management using pydantic.

All config classes use pydantic for validation and YAML loading.
Config files are stored in configs/ directory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


# Base path for config files
CONFIGS_DIR = Path(__file__).parent.parent / "configs"


def load_yaml(path: Path | str) -> dict[str, Any]:
    """Load a YAML file and return as dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _default_root() -> str:
    return os.environ.get("BENCHDATA_ROOT", os.getcwd())


class DatasetConfig(BaseModel):
    """Recipe for loading a dataset from CSV files.

    Paths may be absolute, or relative to the workload dataset directory
    when used through a WorkloadConfig.
    """

    path_to_full: Optional[str] = None
    path_to_train: Optional[str] = None
    path_to_test: Optional[str] = None
    path_to_index: Optional[str] = None
    num_features: int = Field(default=0, ge=0)
    num_responses: int = Field(default=0, ge=0)
    num_blocks: int = Field(default=1, ge=1)
    num_tries: int = Field(default=0, ge=0)
    labeled: bool = True
    on_error: Optional[str] = None  # Appended to CannotOpenFile messages

    @classmethod
    def from_yaml(cls, path: Path | str) -> DatasetConfig:
        """Load config from YAML file."""
        return cls(**load_yaml(path))


class WorkloadConfig(BaseModel):
    """A named benchmark workload: where its files live and how to load them."""

    name: str
    buffer_type: Literal["float", "double"] = "double"
    dataset: DatasetConfig = Field(default_factory=DatasetConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> WorkloadConfig:
        """Load a single workload from YAML file."""
        return cls(**load_yaml(path))


class GlobalConfig(BaseModel):
    """Process-wide settings.

    root_path defaults to $BENCHDATA_ROOT, or the working directory, when
    it is missing or left empty.
    """

    root_path: str = Field(default_factory=_default_root)
    log_level: str = "INFO"

    @field_validator("root_path", mode="before")
    @classmethod
    def _root_fallback(cls, value: Optional[str]) -> str:
        return _default_root() if value in (None, "") else value

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> GlobalConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/global.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "global.yaml"
        return cls(**load_yaml(path))


def load_workloads(path: Path | str | None = None) -> Dict[str, WorkloadConfig]:
    """Load every workload defined in a YAML file, keyed by name.

    The file maps workload names to WorkloadConfig fields (``name`` is filled
    in from the key).

    Args:
        path: Path to YAML file. If None, uses configs/workloads.yaml.
    """
    if path is None:
        path = CONFIGS_DIR / "workloads.yaml"
    raw = load_yaml(path)
    return {
        name: WorkloadConfig(**{"name": name, **(fields or {})})
        for name, fields in raw.items()
    }
