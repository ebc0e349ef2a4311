"""
Shared Models for the Captioning Pipeline

Plain dataclasses and enums passed between the capture, transcription and
presentation sides:
- TranscriptUpdate: one event on the update channel
- CycleResult: typed outcome of one transcription cycle
"""

import time
from dataclasses import dataclass, field
from enum import Enum


class CaptureMode(str, Enum):
    """Where audio is captured from."""

    MICROPHONE = "microphone"
    LOOPBACK = "loopback"


class SessionState(str, Enum):
    """Lifecycle state of the session controller."""

    IDLE = "idle"
    CAPTURING = "capturing"


class DisplayPolicy(str, Enum):
    """How successive transcript updates are shown."""

    REPLACE = "replace"  # latest update supersedes everything shown
    APPEND = "append"  # updates accumulate


class CycleStatus(str, Enum):
    """Outcome of one transcription worker cycle."""

    EMITTED = "emitted"
    SKIPPED_EMPTY = "skipped_empty"
    SKIPPED_SHORT = "skipped_short"
    NO_TEXT = "no_text"
    BACKEND_ERROR = "backend_error"


@dataclass(frozen=True)
class TranscriptUpdate:
    """
    Most recent recognized speech for a time window.

    Attributes:
        text: Transcribed text (never empty when emitted by the worker)
        session_id: Session that produced the update
        sequence: Per-session emission counter, starting at 0
        is_final: False for running results a streaming backend may still refine
        created_at: time.time() at emission
    """

    text: str
    session_id: str
    sequence: int = 0
    is_final: bool = True
    created_at: float = field(default_factory=time.time)

    def __str__(self) -> str:
        status = "final" if self.is_final else "partial"
        preview = f"{self.text[:50]}..." if len(self.text) > 50 else self.text
        return f"TranscriptUpdate(#{self.sequence} {status}: {preview})"


@dataclass
class CycleResult:
    """
    Result of one drain/transcribe cycle.

    Attributes:
        status: What happened this cycle
        samples: Number of samples drained (source rate)
        elapsed: Seconds spent in the cycle
        text: Emitted or recognized text, if any
        error: Error message when the backend failed
    """

    status: CycleStatus
    samples: int = 0
    elapsed: float = 0.0
    text: str = ""
    error: str | None = None

    @classmethod
    def emitted(cls, text: str, samples: int, elapsed: float) -> "CycleResult":
        """Create a result for a cycle that sent an update."""
        return cls(status=CycleStatus.EMITTED, samples=samples, elapsed=elapsed, text=text)

    @classmethod
    def skipped(cls, status: CycleStatus, samples: int = 0) -> "CycleResult":
        """Create a result for a cycle that never reached the backend."""
        return cls(status=status, samples=samples)

    @classmethod
    def from_error(cls, error: str, samples: int, elapsed: float) -> "CycleResult":
        """Create an error result."""
        return cls(status=CycleStatus.BACKEND_ERROR, samples=samples, elapsed=elapsed, error=error)

    def __bool__(self) -> bool:
        """Result is truthy if an update was emitted."""
        return self.status == CycleStatus.EMITTED

    def __str__(self) -> str:
        if self.status == CycleStatus.BACKEND_ERROR:
            return f"CycleResult(error={self.error})"
        return f"CycleResult({self.status.value}, {self.samples} samples)"
