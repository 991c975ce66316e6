"""
Dataset: train/test/full/index slices plus benchmark metadata.
"""

from __future__ import annotations

from benchdata.data.slice import DataSlice
from benchdata.errors import EmptySlice


class Dataset:
    """Up to four DataSlice roles with feature/response/repetition counts.

    Positional slices map to roles by count:

    - ``Dataset(full)``
    - ``Dataset(train, test)``
    - ``Dataset(train, test, full)``
    - ``Dataset(train, test, full, index)``

    Roles not given are empty.
    """

    def __init__(self, *slices: DataSlice):
        if not 1 <= len(slices) <= 4:
            raise TypeError(f"Dataset takes 1 to 4 slices, got {len(slices)}")

        empty = DataSlice.make_empty
        if len(slices) == 1:
            self._train, self._test, self._full, self._index = empty(), empty(), slices[0], empty()
        else:
            padded = list(slices) + [empty() for _ in range(4 - len(slices))]
            self._train, self._test, self._full, self._index = padded

        self._num_features = 0
        self._num_responses = 0
        self._num_tries = 0

    # ------------------------------------------------------------------
    # Slices
    # ------------------------------------------------------------------
    def full(self) -> DataSlice:
        if self._full.empty():
            raise EmptySlice("Full slice of the dataset is empty")
        return self._full

    def train(self) -> DataSlice:
        if self._train.empty():
            raise EmptySlice("Train slice of the dataset is empty")
        return self._train

    def test(self) -> DataSlice:
        if self._test.empty():
            raise EmptySlice("Test slice of the dataset is empty")
        return self._test

    def index(self) -> DataSlice:
        if self._index.empty():
            raise EmptySlice("Index slice of the dataset is empty")
        return self._index

    def full_or_train(self) -> DataSlice:
        """Full slice if present, else train."""
        if self.has_full():
            return self._full
        if self.has_train():
            return self._train
        raise EmptySlice("Dataset has neither a full nor a train slice")

    def full_or_test(self) -> DataSlice:
        """Full slice if present, else test."""
        if self.has_full():
            return self._full
        if self.has_test():
            return self._test
        raise EmptySlice("Dataset has neither a full nor a test slice")

    def has_full(self) -> bool:
        return not self._full.empty()

    def has_train(self) -> bool:
        return not self._train.empty()

    def has_test(self) -> bool:
        return not self._test.empty()

    def has_index(self) -> bool:
        return not self._index.empty()

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    @property
    def num_features(self) -> int:
        return self._num_features

    @property
    def num_responses(self) -> int:
        return self._num_responses

    @property
    def num_tries(self) -> int:
        """Repetition count for algorithms measured several times per run."""
        return self._num_tries

    def set_num_features(self, value: int) -> Dataset:
        self._num_features = int(value)
        return self

    def set_num_responses(self, value: int) -> Dataset:
        self._num_responses = int(value)
        return self

    def set_num_tries(self, value: int) -> Dataset:
        self._num_tries = int(value)
        return self

    def clear(self) -> None:
        """Release every block of every slice."""
        for data_slice in (self._train, self._test, self._full, self._index):
            data_slice.clear()

    def summary(self) -> dict:
        """Per-role block shapes and metadata, for logs and reports."""
        roles = {}
        for role, data_slice in (
            ("train", self._train),
            ("test", self._test),
            ("full", self._full),
            ("index", self._index),
        ):
            if data_slice.empty():
                continue
            roles[role] = {
                "labeled": data_slice.labeled,
                "n_rows": data_slice.n_rows,
                "x_blocks": [block.shape for block in data_slice.x_blocks],
                "y_blocks": [block.shape for block in data_slice.y_blocks],
            }
        return {
            "num_features": self._num_features,
            "num_responses": self._num_responses,
            "num_tries": self._num_tries,
            "slices": roles,
        }

    def __repr__(self) -> str:
        present = [
            role for role, has in (
                ("train", self.has_train()),
                ("test", self.has_test()),
                ("full", self.has_full()),
                ("index", self.has_index()),
            ) if has
        ]
        return f"Dataset(slices={present}, num_features={self._num_features})"
