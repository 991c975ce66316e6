"""
DataSlice: one partition of a dataset, split into independently-owned row blocks.

Blocks are deep copies of contiguous row ranges, never views, so an online
algorithm can be fed each block as if it had arrived separately.
"""

from __future__ import annotations

import math
from contextlib import ExitStack
from typing import Iterator, List, Optional, Tuple

from loguru import logger
from tqdm import tqdm

from benchdata.data.buffer import AllocationMode, Buffer, MergedBuffer, ReadWriteMode, RowView
from benchdata.data.factory import BufferFactory, BufferType
from benchdata.errors import EmptySlice


def block_bounds(n_rows: int, num_blocks: int) -> List[Tuple[int, int]]:
    """Row ranges for splitting ``n_rows`` rows into ``num_blocks`` blocks.

    Every block holds ``ceil(n_rows / num_blocks)`` rows except the last,
    which takes the remainder. When there are fewer rows than blocks the
    trailing ranges are empty.

    Args:
        n_rows: Total number of rows.
        num_blocks: Requested number of blocks (>= 1).

    Returns:
        List of ``(start, end)`` pairs, one per block.
    """
    if num_blocks < 1:
        raise ValueError(f"num_blocks must be >= 1, got {num_blocks}")
    block_size = math.ceil(n_rows / num_blocks)
    bounds = []
    for block_index in range(num_blocks):
        start = min(block_index * block_size, n_rows)
        end = min(start + block_size, n_rows)
        bounds.append((start, end))
    return bounds


def copy_block(
    source: Buffer,
    buffer_type: BufferType,
    start: int,
    end: int,
    source_view: Optional[RowView] = None,
) -> Buffer:
    """Copy rows ``[start, end)`` of ``source`` into a freshly allocated buffer.

    Args:
        source: Buffer to copy from.
        buffer_type: Storage tag for the new buffer.
        start: First row to copy.
        end: One past the last row to copy.
        source_view: Live read view over all rows of ``source``. When omitted
            one is acquired (and released) for this call.

    Returns:
        A new Buffer of shape ``(end - start, source.n_cols)``.
    """
    n_cols = source.n_cols
    n_rows = end - start
    block = BufferFactory.create(buffer_type, n_cols, n_rows, AllocationMode.ALLOCATE)

    with ExitStack() as stack:
        if source_view is None:
            source_view = stack.enter_context(source.rows(0, source.n_rows, ReadWriteMode.READ_ONLY))
        write_view = stack.enter_context(block.rows(0, n_rows, ReadWriteMode.WRITE_ONLY))

        offset = start * n_cols
        num_elems = n_cols * n_rows
        write_view.array[:] = source_view.array[offset:offset + num_elems]

    return block


def partition(
    source: Buffer,
    num_blocks: int,
    buffer_type: BufferType,
    show_progress: bool = False,
) -> List[Buffer]:
    """Split ``source`` into ``num_blocks`` row-contiguous deep copies."""
    bounds = block_bounds(source.n_rows, num_blocks)
    logger.debug(
        "Partitioning {} rows x {} cols into {} blocks",
        source.n_rows, source.n_cols, num_blocks,
    )
    with source.rows(0, source.n_rows, ReadWriteMode.READ_ONLY) as source_view:
        return [
            copy_block(source, buffer_type, start, end, source_view=source_view)
            for start, end in tqdm(bounds, desc="blocks", disable=not show_progress)
        ]


def _own(source: Buffer, buffer_type: BufferType) -> Buffer:
    """Take ``source`` as a single block, copying only to change its width."""
    if source.dtype == buffer_type.dtype:
        return source
    return copy_block(source, buffer_type, 0, source.n_rows)


def _block_at(blocks: List[Optional[Buffer]], block_index: int, role: str) -> Buffer:
    if not 0 <= block_index < len(blocks) or blocks[block_index] is None:
        raise EmptySlice(f"Dataset does not contain {role} block {block_index}")
    return blocks[block_index]


class DataSlice:
    """Feature blocks and, for labeled data, parallel response blocks.

    Args:
        x: Feature buffer. None builds an empty slice.
        y: Response buffer, makes the slice labeled.
        num_blocks: How many row blocks to split into. With 1 block the
            slice takes ``x`` and ``y`` as they are, unless their width
            differs from ``buffer_type``.
        buffer_type: Storage tag (element width) of every block.
        show_progress: Show a progress bar while copying blocks.
    """

    def __init__(
        self,
        x: Optional[Buffer] = None,
        y: Optional[Buffer] = None,
        num_blocks: int = 1,
        buffer_type: BufferType = BufferType.HOMOGEN_DOUBLE,
        show_progress: bool = False,
    ):
        self.labeled = y is not None
        self.x_blocks: List[Optional[Buffer]] = []
        self.y_blocks: List[Optional[Buffer]] = []

        if x is None:
            if y is not None:
                raise ValueError("A response buffer needs a feature buffer")
            return
        if y is not None and x.n_rows != y.n_rows:
            raise ValueError(
                f"Feature and response buffers differ in rows: {x.n_rows} vs {y.n_rows}"
            )
        if num_blocks < 1:
            raise ValueError(f"num_blocks must be >= 1, got {num_blocks}")

        if num_blocks == 1:
            self.x_blocks = [_own(x, buffer_type)]
            if y is not None:
                self.y_blocks = [_own(y, buffer_type)]
            return

        self.x_blocks = partition(x, num_blocks, buffer_type, show_progress)
        if y is not None:
            self.y_blocks = partition(y, num_blocks, buffer_type, show_progress)

    @classmethod
    def make_empty(cls) -> DataSlice:
        return cls()

    @property
    def num_blocks(self) -> int:
        return len(self.x_blocks)

    @property
    def n_rows(self) -> int:
        """Total rows across feature blocks."""
        return sum(block.n_rows for block in self.x_blocks if block is not None)

    def x(self) -> Buffer:
        """Last feature block (the only one for an unblocked slice)."""
        if not self.x_blocks or self.x_blocks[-1] is None:
            raise EmptySlice("Dataset does not contain X slice")
        return self.x_blocks[-1]

    def y(self) -> Buffer:
        """Last response block (the only one for an unblocked slice)."""
        if not self.y_blocks or self.y_blocks[-1] is None:
            raise EmptySlice("Dataset does not contain Y slice")
        return self.y_blocks[-1]

    def x_block(self, block_index: int) -> Buffer:
        return _block_at(self.x_blocks, block_index, "X")

    def y_block(self, block_index: int) -> Buffer:
        return _block_at(self.y_blocks, block_index, "Y")

    def xy(self) -> MergedBuffer:
        """Last feature block joined with the last response block."""
        if not self.x_blocks or not self.y_blocks:
            raise EmptySlice("Dataset does not contain either X or Y slices")
        return MergedBuffer(self.x(), self.y())

    def xy_blocks(self, block_index: int) -> MergedBuffer:
        """Feature and response block ``block_index`` joined column-wise."""
        try:
            x, y = self.x_block(block_index), self.y_block(block_index)
        except EmptySlice:
            raise EmptySlice(
                f"Dataset does not contain either X or Y block {block_index}"
            ) from None
        return MergedBuffer(x, y)

    def iter_blocks(self) -> Iterator[Tuple[Buffer, Optional[Buffer]]]:
        """Yield ``(x_block, y_block)`` pairs; ``y_block`` is None when unlabeled."""
        for block_index in range(self.num_blocks):
            x = self.x_block(block_index)
            y = self.y_block(block_index) if self.labeled else None
            yield x, y

    def empty(self) -> bool:
        if self.labeled:
            return not self.x_blocks or not self.y_blocks
        return not self.x_blocks

    def clear(self) -> None:
        """Drop every owned block. Safe to call repeatedly."""
        self.x_blocks.clear()
        self.y_blocks.clear()

    def __len__(self) -> int:
        return self.num_blocks

    def __repr__(self) -> str:
        kind = "labeled" if self.labeled else "unlabeled"
        return f"DataSlice({kind}, blocks={self.num_blocks}, rows={self.n_rows})"
