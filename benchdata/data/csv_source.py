"""
CSV reader that fills a Buffer (or a joined MergedBuffer) in one pass.

Parse problems are reported through a Status rather than raised, so the
caller decides which error to surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd
from loguru import logger


@dataclass(frozen=True)
class Status:
    """Outcome of a CSV read. Truthy iff the read succeeded."""

    ok: bool = True
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def failure(cls, message: str) -> Status:
        return cls(ok=False, message=message)


class CsvDataSource:
    """Headerless numeric CSV file.

    Args:
        path: File to read.
        delimiter: Field separator.
    """

    def __init__(self, path: Path | str, delimiter: str = ","):
        self.path = Path(path)
        self.delimiter = delimiter
        self.status = Status()

    def read(self) -> np.ndarray:
        """Parse the whole file into a float64 ``(rows, cols)`` array."""
        frame = pd.read_csv(
            self.path,
            sep=self.delimiter,
            header=None,
            skipinitialspace=True,
            float_precision="round_trip",
        )
        return frame.apply(pd.to_numeric, errors="raise").to_numpy(dtype=np.float64)

    def load_block(self, buffer) -> Status:
        """Read the file and bind its rows into ``buffer``.

        When the buffer has a fixed width (``n_cols > 0``) the file must have
        exactly that many columns; a width of 0 is taken from the file.

        Returns:
            The read status, also stored on ``self.status``.
        """
        try:
            data = self.read()
        except pd.errors.EmptyDataError:
            self.status = Status.failure(f"File '{self.path}' has no data")
            return self.status
        except (pd.errors.ParserError, ValueError, TypeError) as exc:
            self.status = Status.failure(f"Malformed CSV '{self.path}': {exc}")
            return self.status

        # short rows come back padded with NaN
        if np.isnan(data).any():
            row = int(np.argwhere(np.isnan(data))[0][0])
            self.status = Status.failure(
                f"File '{self.path}' has missing values in row {row}"
            )
            return self.status

        if buffer.n_cols and data.shape[1] != buffer.n_cols:
            self.status = Status.failure(
                f"File '{self.path}' has {data.shape[1]} columns, expected {buffer.n_cols}"
            )
            return self.status

        try:
            buffer.bind(data)
        except ValueError as exc:
            self.status = Status.failure(str(exc))
            return self.status

        logger.debug("Read {} rows x {} cols from {}", data.shape[0], data.shape[1], self.path)
        self.status = Status()
        return self.status
