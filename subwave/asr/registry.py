"""Backend registry: backend name -> implementation class."""

import logging
from typing import Any

from subwave.config.backends import BACKEND, BACKENDS, get_backend_config

from .base import TranscriptionBackend
from .vosk import VoskBackend
from .whisper import WhisperBackend

logger = logging.getLogger(__name__)

BACKEND_CLASSES: dict[str, type[TranscriptionBackend]] = {
    "whisper": WhisperBackend,
    "vosk": VoskBackend,
}


def register_backend(
    name: str, cls: type[TranscriptionBackend], config: dict[str, Any] | None = None
) -> None:
    """
    Make a backend class available to create_backend().

    Args:
        name: Backend name (also the key in BACKENDS)
        cls: TranscriptionBackend subclass
        config: BACKENDS entry for a backend that has none yet
    """
    if config is not None:
        BACKENDS[name] = config
    get_backend_config(name)
    cls.backend_name = name
    BACKEND_CLASSES[name] = cls


def create_backend(name: str | None = None, model_path: str | None = None) -> TranscriptionBackend:
    """
    Construct a backend (loads its model).

    Args:
        name: Backend name. Uses the configured default if None.
        model_path: Model location. Uses the backend's configured path if None.

    Raises:
        KeyError: Unknown backend name
        ModelLoadError: Model failed to load
    """
    key = name or BACKEND
    if key not in BACKEND_CLASSES:
        raise KeyError(f"Unknown backend: {key}. Available: {list(BACKEND_CLASSES.keys())}")
    cfg = get_backend_config(key)
    logger.info(f"Creating {cfg['kind']} backend '{key}'")
    return BACKEND_CLASSES[key](model_path=model_path)
