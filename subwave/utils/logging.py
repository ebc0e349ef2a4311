"""
Logging utilities for SubWave.

Every module logs through ``logging.getLogger(__name__)``; the CLI (or any
embedding application) calls :func:`setup_logging` once at startup.
"""

import logging
import os
import sys
from typing import Literal

# Default log format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Log level type
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Third-party loggers that are chatty while loading acoustic models
BACKEND_LOGGERS = ("transformers", "torch", "huggingface_hub", "urllib3")


def _level_from_env() -> str:
    """Resolve the level from SUBWAVE_LOG_LEVEL, then LOG_LEVEL, then INFO."""
    return (os.getenv("SUBWAVE_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()


def setup_logging(
    name: str | None = None,
    level: LogLevel | None = None,
    format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Configure logging and return a logger.

    Args:
        name: Logger name (typically __name__). If None, returns root logger.
        level: Log level. Defaults to SUBWAVE_LOG_LEVEL / LOG_LEVEL env vars or INFO.
        format: Log format string.

    Returns:
        Configured logger instance.

    Usage:
        from subwave.utils import setup_logging
        logger = setup_logging(__name__)
        logger.info("Capture started")
    """
    if level is None:
        level = _level_from_env()

    log_level = getattr(logging, str(level).upper(), logging.INFO)

    # Configure root logger (only once)
    logging.basicConfig(
        level=log_level,
        format=format,
        stream=sys.stdout,
    )

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    return logger


def quiet_backend_logs(level: int = logging.WARNING) -> None:
    """
    Lower the verbosity of the ASR libraries.

    Python loggers of the model stacks are raised to ``level``; Kaldi's own
    logging (vosk) is switched off when vosk is importable.
    """
    for name in BACKEND_LOGGERS:
        logging.getLogger(name).setLevel(level)

    try:
        from vosk import SetLogLevel
    except ImportError:
        return
    SetLogLevel(-1)
