"""Tests for error helpers and logging setup."""

import numpy as np
import pytest
from loguru import logger

from benchdata.data.buffer import Buffer
from benchdata.data.factory import BufferType
from benchdata.data.slice import partition
from benchdata.errors import (
    BenchDataError,
    CannotOpenFile,
    EmptyBuffer,
    EmptySlice,
    join_sentences,
)
from benchdata.utils.logger import setup_logging


@pytest.mark.parametrize("parts,expected", [
    (["Cannot open file 'a.csv'", None], "Cannot open file 'a.csv'."),
    (["Cannot open file 'a.csv'", "Run setup first"], "Cannot open file 'a.csv'. Run setup first."),
    (["Done.", "  ", ""], "Done."),
    ([], ""),
])
def test_join_sentences(parts, expected):
    assert join_sentences(parts) == expected


def test_hierarchy():
    assert issubclass(EmptySlice, EmptyBuffer)
    assert issubclass(CannotOpenFile, BenchDataError)
    assert issubclass(BenchDataError, RuntimeError)


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "bench.log"
    setup_logging("DEBUG", log_file=log_file)
    logger.info("hello {}", "bench")
    setup_logging("INFO")
    assert "hello bench" in log_file.read_text()


def test_library_records_silent_until_setup():
    records = []
    logger.disable("benchdata")
    sink_id = logger.add(records.append, level="DEBUG")
    try:
        source = Buffer.from_array(np.zeros((4, 2)))
        partition(source, 2, BufferType.HOMOGEN_DOUBLE)
        assert not records
        setup_logging("DEBUG")
        partition(source, 2, BufferType.HOMOGEN_DOUBLE)
        assert any("Partitioning 4 rows" in str(record) for record in records)
    finally:
        logger.remove(sink_id)
