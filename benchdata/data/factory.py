"""
Buffer factory: storage-type tag -> allocated Buffer.

New storage strategies are added by extending BufferType and registering an
allocator with ``BufferFactory.register``.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np

from benchdata.data.buffer import AllocationMode, Buffer
from benchdata.errors import BufferAllocationFailed, UnsupportedBufferType

Allocator = Callable[[int, int, AllocationMode], Optional[Buffer]]


class BufferType(Enum):
    """Storage-type tags understood by the factory."""

    HOMOGEN_FLOAT = "float"
    HOMOGEN_DOUBLE = "double"

    @property
    def dtype(self) -> np.dtype:
        """Element type of buffers allocated for this tag."""
        return np.dtype(np.float32 if self is BufferType.HOMOGEN_FLOAT else np.float64)

    @classmethod
    def from_name(cls, name: str | BufferType) -> BufferType:
        """Parse a tag from its value ("float") or member name ("HOMOGEN_FLOAT")."""
        if isinstance(name, cls):
            return name
        key = str(name).strip()
        for member in cls:
            if key.lower() == member.value or key.upper() == member.name:
                return member
        raise UnsupportedBufferType(f"Unknown buffer type '{name}'")


def _homogen(dtype) -> Allocator:
    def allocate(num_features: int, num_observations: int, mode: AllocationMode) -> Buffer:
        return Buffer(num_features, num_observations, dtype=dtype, allocation_mode=mode)

    return allocate


class BufferFactory:
    """Registry-backed dispatch from BufferType to an allocator."""

    _allocators: Dict[BufferType, Allocator] = {
        BufferType.HOMOGEN_FLOAT: _homogen(np.float32),
        BufferType.HOMOGEN_DOUBLE: _homogen(np.float64),
    }

    @classmethod
    def register(cls, buffer_type: BufferType, allocator: Allocator) -> None:
        """Install (or replace) the allocator for ``buffer_type``."""
        cls._allocators[buffer_type] = allocator

    @classmethod
    def unregister(cls, buffer_type: BufferType) -> None:
        cls._allocators.pop(buffer_type, None)

    @classmethod
    def create(
        cls,
        buffer_type: BufferType,
        num_features: int,
        num_observations: int = 0,
        allocation_mode: AllocationMode = AllocationMode.DEFER,
    ) -> Buffer:
        """Allocate a buffer of ``num_features`` columns and ``num_observations`` rows.

        Args:
            buffer_type: Storage-type tag.
            num_features: Column count (0 lets the CSV reader infer it).
            num_observations: Row count.
            allocation_mode: ALLOCATE or DEFER.

        Returns:
            The new Buffer.

        Raises:
            UnsupportedBufferType: No allocator is registered for the tag.
            BufferAllocationFailed: The allocator returned nothing.
        """
        try:
            allocate = cls._allocators[buffer_type]
        except (KeyError, TypeError):
            raise UnsupportedBufferType(
                f"The given buffer type {buffer_type!r} is not implemented"
            ) from None

        buffer = allocate(num_features, num_observations, allocation_mode)
        if buffer is None:
            raise BufferAllocationFailed(
                f"Allocator for {buffer_type.name} produced no buffer "
                f"({num_features} columns x {num_observations} rows)"
            )
        return buffer
