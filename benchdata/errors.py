"""
Exception hierarchy for dataset loading and partitioning.

Every error is terminal for the operation that raised it: nothing is
retried, and DatasetFromCsv.load() never returns a partially built Dataset.
"""

from __future__ import annotations

from typing import Iterable


class BenchDataError(RuntimeError):
    """Base class for all benchdata errors."""


class EmptyBuffer(BenchDataError):
    """A buffer role was never populated or has no storage bound."""


class EmptySlice(EmptyBuffer):
    """A dataset partition (or one side of a labeled slice) is empty."""


class UnsupportedBufferType(BenchDataError):
    """The buffer factory received an unknown storage-type tag."""


class BufferAllocationFailed(BenchDataError):
    """A known storage strategy produced no usable buffer."""


class CannotOpenFile(BenchDataError):
    """A configured dataset path is not a readable file."""


class CannotReadCsv(BenchDataError):
    """The CSV reader reported a failure after the file was opened."""


class CannotLoadDataset(BenchDataError):
    """A precondition for loading was not met (e.g. unknown feature count)."""


class ViewConflict(BenchDataError):
    """A row view overlaps a live view it is not allowed to share rows with."""


class ViewReleased(BenchDataError):
    """A row view was used after it was released."""


def join_sentences(parts: Iterable[str | None]) -> str:
    """Join non-empty message fragments into sentences.

    Args:
        parts: Message fragments, None or blank entries are skipped.

    Returns:
        Fragments separated by a space, each ending with a period.
    """
    sentences = []
    for part in parts:
        if not part:
            continue
        text = part.strip()
        if not text:
            continue
        if not text.endswith((".", "!", "?")):
            text += "."
        sentences.append(text)
    return " ".join(sentences)
