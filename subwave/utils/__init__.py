"""Utility helpers (logging)."""

from .logging import DEFAULT_FORMAT, quiet_backend_logs, setup_logging

__all__ = [
    "DEFAULT_FORMAT",
    "quiet_backend_logs",
    "setup_logging",
]
