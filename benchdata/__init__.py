"""benchdata: CSV datasets partitioned into row blocks for algorithm benchmarks."""

from loguru import logger

from benchdata.data import (
    Buffer,
    BufferFactory,
    BufferType,
    DataSlice,
    Dataset,
    DatasetFromCsv,
)
from benchdata.workload import Workload

# Silent as a library until setup_logging is called
logger.disable("benchdata")

__version__ = "0.1.0"

__all__ = [
    "Buffer",
    "BufferFactory",
    "BufferType",
    "DataSlice",
    "Dataset",
    "DatasetFromCsv",
    "Workload",
]
