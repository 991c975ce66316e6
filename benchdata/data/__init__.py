"""
Tabular buffers and dataset partitioning for algorithm benchmarks.

This module provides:
- Buffer / MergedBuffer: typed 2D matrices with scoped row views
- BufferFactory: storage-type tag -> Buffer
- DataSlice: a partition split into independently-owned row blocks
- Dataset: train/test/full/index slices plus metadata
- DatasetFromCsv: builder that loads CSV files into a Dataset
"""

from benchdata.data.buffer import AllocationMode, Buffer, MergedBuffer, ReadWriteMode, RowView
from benchdata.data.csv_dataset import DatasetFromCsv
from benchdata.data.csv_source import CsvDataSource, Status
from benchdata.data.dataset import Dataset
from benchdata.data.factory import BufferFactory, BufferType
from benchdata.data.slice import DataSlice, block_bounds, copy_block

__all__ = [
    "AllocationMode",
    "Buffer",
    "MergedBuffer",
    "ReadWriteMode",
    "RowView",
    "BufferFactory",
    "BufferType",
    "CsvDataSource",
    "Status",
    "DataSlice",
    "block_bounds",
    "copy_block",
    "Dataset",
    "DatasetFromCsv",
]
