"""ASR backends: batch (Whisper) and streaming (Vosk)."""

from .base import BatchBackend, StreamingBackend, TranscriptionBackend
from .registry import BACKEND_CLASSES, create_backend, register_backend
from .vosk import VoskBackend
from .whisper import WhisperBackend

__all__ = [
    "BACKEND_CLASSES",
    "BatchBackend",
    "StreamingBackend",
    "TranscriptionBackend",
    "VoskBackend",
    "WhisperBackend",
    "create_backend",
    "register_backend",
]
