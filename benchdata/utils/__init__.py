"""Logging helpers."""

from benchdata.utils.logger import setup_logging

__all__ = ["setup_logging"]
