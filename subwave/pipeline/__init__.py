"""Pipeline: transcription worker, update channel and session control."""

from .channel import UpdateChannel
from .session import SessionController
from .worker import TranscriptionWorker

__all__ = ["SessionController", "TranscriptionWorker", "UpdateChannel"]
