"""Core data model and error types."""

from .errors import (
    CaptureError,
    DeviceNotFound,
    ModelLoadError,
    SessionStartError,
    SubWaveError,
)
from .models import (
    CaptureMode,
    CycleResult,
    CycleStatus,
    DisplayPolicy,
    SessionState,
    TranscriptUpdate,
)

__all__ = [
    "CaptureError",
    "CaptureMode",
    "CycleResult",
    "CycleStatus",
    "DeviceNotFound",
    "DisplayPolicy",
    "ModelLoadError",
    "SessionStartError",
    "SessionState",
    "SubWaveError",
    "TranscriptUpdate",
]
