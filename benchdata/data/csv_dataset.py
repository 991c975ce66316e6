"""
DatasetFromCsv: configure paths and shape, then load() a Dataset.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from loguru import logger

from benchdata.config import DatasetConfig
from benchdata.data.buffer import AllocationMode, MergedBuffer
from benchdata.data.csv_source import CsvDataSource, Status
from benchdata.data.dataset import Dataset
from benchdata.data.factory import BufferFactory, BufferType
from benchdata.data.slice import DataSlice
from benchdata.errors import CannotLoadDataset, CannotOpenFile, CannotReadCsv, join_sentences


def can_open_file(path: Path | str) -> bool:
    path = Path(path)
    return path.is_file() and os.access(path, os.R_OK)


def _count(name: str, value: int) -> int:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return int(value)


class DatasetFromCsv:
    """Builder for loading up to four CSV files into a Dataset.

    Every setter returns ``self`` so a recipe reads as one chain::

        dataset = (
            DatasetFromCsv()
            .path_to_train("train.csv")
            .path_to_test("test.csv")
            .num_features(28)
            .regression()
            .num_blocks(4)
            .load(BufferType.HOMOGEN_DOUBLE)
        )

    A missing path leaves its role empty. ``load()`` either returns a fully
    built Dataset or raises; the first slot that fails aborts the call.
    """

    def __init__(self):
        self._path_to_full: Optional[str] = None
        self._path_to_train: Optional[str] = None
        self._path_to_test: Optional[str] = None
        self._path_to_index: Optional[str] = None
        self._num_features = 0
        self._num_responses = 0
        self._num_blocks = 1
        self._num_tries = 0
        self._labeled = True
        self._on_error_message: Optional[str] = None
        self._show_progress = False

    @classmethod
    def from_config(cls, cfg: DatasetConfig, base_dir: Path | str | None = None) -> DatasetFromCsv:
        """Build a recipe from config.

        Args:
            cfg: Dataset config.
            base_dir: Directory that relative paths in ``cfg`` are resolved
                against. If None, paths are used as given.
        """

        def resolve(value: Optional[str]) -> Optional[str]:
            if not value or base_dir is None or Path(value).is_absolute():
                return value
            return str(Path(base_dir) / value)

        builder = (
            cls()
            .path_to_full(resolve(cfg.path_to_full))
            .path_to_train(resolve(cfg.path_to_train))
            .path_to_test(resolve(cfg.path_to_test))
            .path_to_index(resolve(cfg.path_to_index))
            .num_features(cfg.num_features)
            .num_responses(cfg.num_responses)
            .num_blocks(cfg.num_blocks)
            .num_tries(cfg.num_tries)
            .on_error(cfg.on_error)
        )
        if not cfg.labeled:
            builder.unlabeled()
        return builder

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------
    def path_to_full(self, value: Path | str | None) -> DatasetFromCsv:
        self._path_to_full = str(value) if value else None
        return self

    def path_to_train(self, value: Path | str | None) -> DatasetFromCsv:
        self._path_to_train = str(value) if value else None
        return self

    def path_to_test(self, value: Path | str | None) -> DatasetFromCsv:
        self._path_to_test = str(value) if value else None
        return self

    def path_to_index(self, value: Path | str | None) -> DatasetFromCsv:
        self._path_to_index = str(value) if value else None
        return self

    def num_features(self, value: int) -> DatasetFromCsv:
        self._num_features = _count("num_features", value)
        return self

    def num_responses(self, value: int) -> DatasetFromCsv:
        self._num_responses = _count("num_responses", value)
        return self

    def num_blocks(self, value: int) -> DatasetFromCsv:
        if value < 1:
            raise ValueError(f"num_blocks must be >= 1, got {value}")
        self._num_blocks = int(value)
        return self

    def num_tries(self, value: int) -> DatasetFromCsv:
        self._num_tries = _count("num_tries", value)
        return self

    def regression(self) -> DatasetFromCsv:
        """Single response column."""
        self._num_responses = 1
        return self

    def unlabeled(self) -> DatasetFromCsv:
        """Load every column as a feature, even if responses were configured."""
        self._labeled = False
        return self

    def on_error(self, message: Optional[str]) -> DatasetFromCsv:
        """Hint appended to the error raised when a file cannot be opened."""
        self._on_error_message = message
        return self

    def show_progress(self, enabled: bool = True) -> DatasetFromCsv:
        self._show_progress = enabled
        return self

    @property
    def labeled(self) -> bool:
        return self._labeled and self._num_responses > 0

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self, buffer_type: BufferType = BufferType.HOMOGEN_DOUBLE) -> Dataset:
        """Load train, test, full and index files (in that order) into a Dataset."""
        buffer_type = BufferType.from_name(buffer_type)
        train_slice = self.load_slice(self._path_to_train, buffer_type)
        test_slice = self.load_slice(self._path_to_test, buffer_type)
        full_slice = self.load_slice(self._path_to_full, buffer_type)
        index_slice = self.load_slice(self._path_to_index, buffer_type)

        return (
            Dataset(train_slice, test_slice, full_slice, index_slice)
            .set_num_responses(self._num_responses)
            .set_num_tries(self._num_tries)
            .set_num_features(self._num_features)
        )

    def load_slice(self, path: Optional[str], buffer_type: BufferType) -> DataSlice:
        """Load one file into a DataSlice; an unset path gives an empty slice."""
        if not path:
            return DataSlice.make_empty()

        if not can_open_file(path):
            message = join_sentences(
                [f"Cannot open dataset file '{path}'", self._on_error_message]
            )
            logger.error(message)
            raise CannotOpenFile(message)

        if self.labeled:
            return self._load_with_response_variable(path, buffer_type)
        return self._load_no_response_variable(path, buffer_type)

    def _load_no_response_variable(self, path: str, buffer_type: BufferType) -> DataSlice:
        x = BufferFactory.create(buffer_type, self._num_features, 0, AllocationMode.DEFER)

        source = CsvDataSource(path)
        self._check_status(path, source.load_block(x))

        logger.info(
            "Loaded {} ({} rows x {} features) into {} block(s)",
            path, x.n_rows, x.n_cols, self._num_blocks,
        )
        return DataSlice(x, num_blocks=self._num_blocks, buffer_type=buffer_type,
                         show_progress=self._show_progress)

    def _load_with_response_variable(self, path: str, buffer_type: BufferType) -> DataSlice:
        if self._num_features == 0:
            message = (
                f"Cannot load dataset '{path}' with responses. "
                "Number of features undefined. To load CSV dataset with "
                "responses num_features must be specified."
            )
            logger.error(message)
            raise CannotLoadDataset(message)

        x = BufferFactory.create(buffer_type, self._num_features, 0, AllocationMode.DEFER)
        y = BufferFactory.create(buffer_type, self._num_responses, 0, AllocationMode.DEFER)
        xy = MergedBuffer(x, y)

        source = CsvDataSource(path)
        self._check_status(path, source.load_block(xy))

        logger.info(
            "Loaded {} ({} rows x {} features + {} responses) into {} block(s)",
            path, x.n_rows, x.n_cols, y.n_cols, self._num_blocks,
        )
        return DataSlice(x, y, num_blocks=self._num_blocks, buffer_type=buffer_type,
                         show_progress=self._show_progress)

    @staticmethod
    def _check_status(path: str, status: Status) -> None:
        if not status:
            logger.error("Cannot read CSV file '{}': {}", path, status.message)
            raise CannotReadCsv(
                join_sentences([f"Cannot read CSV file '{path}'", status.message])
            )
