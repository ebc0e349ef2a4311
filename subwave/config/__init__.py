"""
Configuration Module

Backend definitions and session settings.
"""

from .backends import (
    BACKEND,
    BACKENDS,
    get_backend_config,
    get_display_info,
    list_backends,
)
from .settings import JOIN_TIMEOUT, LOOPBACK_KEYWORDS, NOISE_THRESHOLD, CaptionSettings

__all__ = [
    "BACKEND",
    "BACKENDS",
    "JOIN_TIMEOUT",
    "LOOPBACK_KEYWORDS",
    "NOISE_THRESHOLD",
    "CaptionSettings",
    "get_backend_config",
    "get_display_info",
    "list_backends",
]
