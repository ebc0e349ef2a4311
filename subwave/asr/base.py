"""Transcription backend interface.

Two capabilities share one contract, ``process_chunk(chunk) -> str``:

- BatchBackend: context-free; each chunk is decoded in full and its segments
  are joined into one update string.
- StreamingBackend: keeps recognizer state across chunks and returns the
  running (or final) result; ``reset()`` starts a new utterance stream.

The worker only talks to this interface, so new backends register in
``subwave.asr.registry`` without touching the worker loop.
"""

from abc import ABC, abstractmethod

import numpy as np

from subwave.config.backends import get_backend_config


class TranscriptionBackend(ABC):
    """Base class for in-process ASR backends."""

    #: Key in subwave.config.backends.BACKENDS
    backend_name: str = ""

    def __init__(self, model_path: str | None = None):
        cfg = get_backend_config(self.backend_name)
        self.config = cfg
        self.model_path = model_path or cfg["model_path"]
        self.sample_rate: int = cfg["sample_rate"]
        self.sample_format: str = cfg["sample_format"]
        self.min_samples: int = int(self.sample_rate * cfg["min_chunk_ms"] / 1000)

    @property
    def name(self) -> str:
        return self.config["name"]

    @property
    def is_streaming(self) -> bool:
        return False

    @abstractmethod
    def process_chunk(self, chunk: np.ndarray | bytes) -> str:
        """Transcribe one chunk and return the update text ("" for nothing)."""

    def reset(self) -> None:
        """Start a fresh session. Stateless backends have nothing to reset."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model_path={self.model_path!r})"


class BatchBackend(TranscriptionBackend):
    """Full-context decoder with no state between chunks."""

    @abstractmethod
    def transcribe_segments(self, chunk: np.ndarray | bytes) -> list[str]:
        """Run full inference over the chunk and return ordered text segments."""

    def process_chunk(self, chunk: np.ndarray | bytes) -> str:
        segments = self.transcribe_segments(chunk)
        return " ".join(text.strip() for text in segments if text and text.strip())


class StreamingBackend(TranscriptionBackend):
    """Recognizer that maintains decoding state across chunks."""

    def __init__(self, model_path: str | None = None):
        super().__init__(model_path)
        #: True when the last process_chunk() closed an utterance
        self.last_is_final = False

    @property
    def is_streaming(self) -> bool:
        return True

    @abstractmethod
    def reset(self) -> None:
        """Discard recognizer state (called at every session start)."""
