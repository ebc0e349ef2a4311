"""
Pipeline Settings

Runtime knobs for a capture session. Defaults live here; every value can be
overridden from the environment (see CaptionSettings.from_env) or from the
CLI flags.
"""

import logging
import os
from dataclasses import dataclass, field

from subwave.core.models import CaptureMode, DisplayPolicy

from .backends import BACKEND, BACKENDS, get_backend_config

logger = logging.getLogger(__name__)

# Noise gate: samples at or below this absolute amplitude are dropped
NOISE_THRESHOLD = 1e-4

# Loopback device preference (substring match on the device name)
LOOPBACK_KEYWORDS = ("hdmi", "displayport", "digital", "spdif", "external", "usb")

# How long stop() waits for an in-flight inference call
JOIN_TIMEOUT = 5.0


def _env_float(name: str, default: float) -> float:
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={val!r}, using {default}")
        return default


def _env_enum(name: str, enum_cls, default):
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return enum_cls(val.strip().lower())
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={val!r}, using {default.value}")
        return default


def _env_backend(name: str, default: str) -> str:
    val = os.environ.get(name)
    if val is None:
        return default
    key = val.strip().lower()
    if key not in BACKENDS:
        logger.warning(f"Ignoring unknown {name}={val!r}, using {default}")
        return default
    return key


def _env_keywords(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    val = os.environ.get(name)
    if val is None:
        return default
    keywords = tuple(part.strip().lower() for part in val.split(",") if part.strip())
    return keywords or default


@dataclass
class CaptionSettings:
    """Everything a SessionController needs to build a capture session."""

    backend: str = BACKEND
    model_path: str | None = None  # backend default when None
    capture_mode: CaptureMode = CaptureMode.MICROPHONE
    noise_threshold: float = NOISE_THRESHOLD
    interval: float | None = None  # seconds; backend default when None
    loopback_keywords: tuple[str, ...] = field(default_factory=lambda: LOOPBACK_KEYWORDS)
    display_policy: DisplayPolicy = DisplayPolicy.REPLACE
    join_timeout: float = JOIN_TIMEOUT

    def __post_init__(self):
        # Raises KeyError early for unknown backends
        get_backend_config(self.backend)
        if self.noise_threshold < 0:
            raise ValueError(f"noise_threshold must be >= 0, got {self.noise_threshold}")
        if self.interval is not None and self.interval <= 0:
            raise ValueError(f"interval must be > 0, got {self.interval}")

    @property
    def wake_interval(self) -> float:
        """Worker wake period in seconds."""
        if self.interval is not None:
            return self.interval
        return get_backend_config(self.backend)["interval_ms"] / 1000

    @property
    def resolved_model_path(self) -> str:
        return self.model_path or get_backend_config(self.backend)["model_path"]

    @classmethod
    def from_env(cls) -> "CaptionSettings":
        """Build settings from SUBWAVE_* environment variables."""
        d = cls()
        interval = d.interval
        interval_ms = _env_float("SUBWAVE_INTERVAL_MS", 0.0)
        if interval_ms > 0:
            interval = interval_ms / 1000

        return cls(
            backend=_env_backend("SUBWAVE_BACKEND", d.backend),
            model_path=os.environ.get("SUBWAVE_MODEL_PATH", d.model_path),
            capture_mode=_env_enum("SUBWAVE_CAPTURE_MODE", CaptureMode, d.capture_mode),
            noise_threshold=max(0.0, _env_float("SUBWAVE_NOISE_THRESHOLD", d.noise_threshold)),
            interval=interval,
            loopback_keywords=_env_keywords("SUBWAVE_LOOPBACK_KEYWORDS", d.loopback_keywords),
            display_policy=_env_enum("SUBWAVE_DISPLAY_POLICY", DisplayPolicy, d.display_policy),
        )
