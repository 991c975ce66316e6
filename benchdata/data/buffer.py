"""
Typed 2D numeric buffers with scoped row-range views.

A Buffer is a row-major numpy matrix of a single floating-point width.
Callers never touch the storage directly: they borrow a contiguous range of
rows through ``Buffer.rows()``, a context manager that hands out a flat view
and releases it on every exit path.

View rules (enforced at acquisition time):
- read views may overlap other read views;
- a write view may not overlap any other live view on the same buffer.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from enum import Enum
from typing import Iterator, List, Tuple

import numpy as np

from benchdata.errors import EmptyBuffer, ViewConflict, ViewReleased


class AllocationMode(Enum):
    """Whether storage is allocated at construction or bound later."""

    ALLOCATE = "allocate"
    DEFER = "defer"


class ReadWriteMode(Enum):
    """Access mode requested for a row view."""

    READ_ONLY = "read_only"
    WRITE_ONLY = "write_only"


class RowView:
    """A borrowed, flat view over rows ``[start, stop)`` of a buffer.

    The flat array holds ``(stop - start) * n_cols`` elements in row-major
    order. Accessing ``array`` after ``release()`` raises ViewReleased.
    """

    def __init__(self, owner, start: int, stop: int, mode: ReadWriteMode, array: np.ndarray):
        self._owner = owner
        self.start = start
        self.stop = stop
        self.mode = mode
        self._array = array
        self._released = False

    @property
    def array(self) -> np.ndarray:
        if self._released:
            raise ViewReleased(
                f"View over rows [{self.start}, {self.stop}) was already released"
            )
        return self._array

    @property
    def n_rows(self) -> int:
        return self.stop - self.start

    @property
    def released(self) -> bool:
        return self._released

    def overlaps(self, start: int, stop: int) -> bool:
        """Whether this view shares at least one row with ``[start, stop)``."""
        return self.start < stop and start < self.stop

    def release(self) -> None:
        """Return the rows to the owner. Releasing twice is a no-op."""
        if self._released:
            return
        self._released = True
        self._owner._release(self)
        self._array = None

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"RowView(rows=[{self.start}, {self.stop}), mode={self.mode.name}, {state})"


def _check_range(start: int, stop: int, n_rows: int) -> None:
    if start < 0 or stop > n_rows or start > stop:
        raise IndexError(f"Row range [{start}, {stop}) is outside [0, {n_rows})")


class Buffer:
    """Row-major 2D numeric matrix of fixed shape and element width.

    Args:
        n_cols: Number of columns. 0 means "infer when data is bound".
        n_rows: Number of rows.
        dtype: Element type, float32 or float64.
        allocation_mode: ALLOCATE zero-fills storage now; DEFER leaves the
            buffer unbound until ``bind()`` is called (usually by the CSV
            reader).
    """

    def __init__(
        self,
        n_cols: int,
        n_rows: int = 0,
        dtype=np.float64,
        allocation_mode: AllocationMode = AllocationMode.ALLOCATE,
    ):
        if n_cols < 0 or n_rows < 0:
            raise ValueError(f"Buffer shape must be non-negative, got ({n_cols}, {n_rows})")
        self._n_cols = int(n_cols)
        self._n_rows = int(n_rows)
        self.dtype = np.dtype(dtype)
        self.allocation_mode = allocation_mode
        self._data: np.ndarray | None = None
        self._views: List[RowView] = []

        if allocation_mode is AllocationMode.ALLOCATE:
            self._data = np.zeros((self._n_rows, self._n_cols), dtype=self.dtype)

    @classmethod
    def from_array(cls, array, dtype=None) -> Buffer:
        """Wrap a copy of a 2D array-like."""
        data = np.array(array, dtype=dtype, copy=True)
        if data.ndim != 2:
            raise ValueError(f"Expected a 2D array, got {data.ndim} dimension(s)")
        buffer = cls(data.shape[1], data.shape[0], dtype=data.dtype,
                     allocation_mode=AllocationMode.DEFER)
        buffer.bind(data)
        return buffer

    @property
    def n_rows(self) -> int:
        return self._n_rows

    @property
    def n_cols(self) -> int:
        return self._n_cols

    @property
    def shape(self) -> Tuple[int, int]:
        """(n_rows, n_cols), numpy order."""
        return self._n_rows, self._n_cols

    @property
    def is_bound(self) -> bool:
        return self._data is not None

    @property
    def live_views(self) -> int:
        return len(self._views)

    def bind(self, array: np.ndarray) -> None:
        """Attach storage, taking the row count (and column count if 0) from it.

        The array is converted to this buffer's dtype and made C-contiguous.
        """
        if self._views:
            raise ViewConflict("Cannot rebind a buffer while views are live")
        data = np.ascontiguousarray(array, dtype=self.dtype)
        if data.ndim != 2:
            raise ValueError(f"Expected a 2D array, got {data.ndim} dimension(s)")
        if self._n_cols and data.shape[1] != self._n_cols:
            raise ValueError(
                f"Buffer expects {self._n_cols} columns, got {data.shape[1]}"
            )
        self._data = data
        self._n_rows, self._n_cols = data.shape

    @contextmanager
    def rows(self, start: int, stop: int, mode: ReadWriteMode = ReadWriteMode.READ_ONLY) -> Iterator[RowView]:
        """Borrow rows ``[start, stop)`` as a flat view for the ``with`` block."""
        view = self.acquire(start, stop, mode)
        try:
            yield view
        finally:
            view.release()

    def acquire(self, start: int, stop: int, mode: ReadWriteMode = ReadWriteMode.READ_ONLY) -> RowView:
        """Acquire a view without a ``with`` block; pair with ``view.release()``."""
        if self._data is None:
            raise EmptyBuffer("Buffer has no storage bound")
        _check_range(start, stop, self._n_rows)

        for live in self._views:
            if not live.overlaps(start, stop):
                continue
            if mode is ReadWriteMode.WRITE_ONLY or live.mode is ReadWriteMode.WRITE_ONLY:
                raise ViewConflict(
                    f"{mode.name} view over rows [{start}, {stop}) overlaps live {live!r}"
                )

        flat = self._data[start:stop].reshape(-1)
        if mode is ReadWriteMode.READ_ONLY:
            flat.flags.writeable = False
        view = RowView(self, start, stop, mode, flat)
        self._views.append(view)
        return view

    def _release(self, view: RowView) -> None:
        self._views.remove(view)

    def to_numpy(self) -> np.ndarray:
        """Copy of the contents as an ``(n_rows, n_cols)`` array."""
        if self._data is None:
            raise EmptyBuffer("Buffer has no storage bound")
        return self._data.copy()

    def __repr__(self) -> str:
        bound = "" if self.is_bound else ", unbound"
        return f"Buffer(rows={self._n_rows}, cols={self._n_cols}, dtype={self.dtype.name}{bound})"


class MergedBuffer:
    """Column-wise join of a feature buffer and a response buffer.

    The join holds no storage of its own. Read views are assembled from
    views on both parts; write views are scattered back into both parts when
    the ``with`` block exits normally.
    """

    def __init__(self, x: Buffer, y: Buffer):
        if x.n_rows != y.n_rows:
            raise ValueError(
                f"Cannot join buffers with {x.n_rows} and {y.n_rows} rows"
            )
        self.x = x
        self.y = y
        self.dtype = np.result_type(x.dtype, y.dtype)

    @property
    def parts(self) -> Tuple[Buffer, Buffer]:
        return self.x, self.y

    @property
    def n_rows(self) -> int:
        return self.x.n_rows

    @property
    def n_cols(self) -> int:
        # an inferred-width response still counts as unknown width overall
        if self.y.n_cols == 0:
            return 0
        return self.x.n_cols + self.y.n_cols

    @property
    def shape(self) -> Tuple[int, int]:
        return self.n_rows, self.n_cols

    @property
    def is_bound(self) -> bool:
        return self.x.is_bound and self.y.is_bound

    def bind(self, array: np.ndarray) -> None:
        """Split ``array`` column-wise and bind each part.

        The feature part takes the first ``x.n_cols`` columns, the response
        part takes the rest.
        """
        data = np.asarray(array)
        if data.ndim != 2:
            raise ValueError(f"Expected a 2D array, got {data.ndim} dimension(s)")
        n_x = self.x.n_cols
        if n_x == 0:
            raise ValueError("Feature width must be known to split a joined buffer")
        if data.shape[1] <= n_x:
            raise ValueError(
                f"Expected more than {n_x} columns to fill features and responses, "
                f"got {data.shape[1]}"
            )
        self.x.bind(data[:, :n_x])
        self.y.bind(data[:, n_x:])

    @contextmanager
    def rows(self, start: int, stop: int, mode: ReadWriteMode = ReadWriteMode.READ_ONLY) -> Iterator[RowView]:
        """Borrow rows ``[start, stop)`` of the joined columns as a flat view."""
        n_rows = stop - start
        with ExitStack() as stack:
            part_views = [stack.enter_context(part.rows(start, stop, mode)) for part in self.parts]

            if mode is ReadWriteMode.READ_ONLY:
                blocks = [v.array.reshape(n_rows, p.n_cols) for v, p in zip(part_views, self.parts)]
                flat = np.hstack(blocks).astype(self.dtype, copy=False).reshape(-1)
                flat.flags.writeable = False
            else:
                flat = np.empty(n_rows * (self.x.n_cols + self.y.n_cols), dtype=self.dtype)

            view = RowView(self, start, stop, mode, flat)
            try:
                yield view
                if mode is ReadWriteMode.WRITE_ONLY:
                    self._scatter(view.array.reshape(n_rows, -1), part_views)
            finally:
                view.release()

    def _scatter(self, data: np.ndarray, part_views: List[RowView]) -> None:
        offset = 0
        for view, part in zip(part_views, self.parts):
            view.array[:] = data[:, offset:offset + part.n_cols].reshape(-1)
            offset += part.n_cols

    def _release(self, view: RowView) -> None:
        pass

    def to_numpy(self) -> np.ndarray:
        """Copy of the joined contents as an ``(n_rows, n_cols)`` array."""
        return np.hstack([self.x.to_numpy(), self.y.to_numpy()]).astype(self.dtype, copy=False)

    def __repr__(self) -> str:
        return f"MergedBuffer(x={self.x!r}, y={self.y!r})"
