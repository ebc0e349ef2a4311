"""
Backend Definitions

Single source of truth for the in-process transcription backends.
Set SUBWAVE_BACKEND to switch between them.

Kinds:
- batch: context-free decoder, full inference over every drained chunk
- streaming: stateful recognizer fed successive chunks, reset per session
"""

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

# ============== Backend Definitions ==============
BACKENDS: dict[str, dict[str, Any]] = {
    "whisper": {
        "name": "Whisper",
        "kind": "batch",
        "sample_format": "float32",
        "sample_rate": 16000,
        "interval_ms": 3000,
        "min_chunk_ms": 1000,
        "model_path": os.getenv("SUBWAVE_WHISPER_MODEL", "models/whisper-base.en"),
        "description": "Batch decoder - full-context inference per chunk",
    },
    "vosk": {
        "name": "Vosk",
        "kind": "streaming",
        "sample_format": "pcm16",
        "sample_rate": 16000,
        "interval_ms": 500,
        "min_chunk_ms": 0,
        "model_path": os.getenv("SUBWAVE_VOSK_MODEL", "models/vosk-model-small-en-us"),
        "description": "Streaming recognizer - running partial/final results",
    },
}

# ========== SWITCH BACKEND HERE ==========
# Options: "whisper" (batch), "vosk" (streaming, CPU, lightweight)
DEFAULT_BACKEND = "whisper"
BACKEND = os.getenv("SUBWAVE_BACKEND", DEFAULT_BACKEND).strip().lower()
if BACKEND not in BACKENDS:
    logger.warning(f"Ignoring unknown SUBWAVE_BACKEND={BACKEND!r}, using {DEFAULT_BACKEND}")
    BACKEND = DEFAULT_BACKEND
# =========================================


def get_backend_config(backend: str | None = None) -> dict[str, Any]:
    """
    Get configuration for a backend.

    Args:
        backend: Backend name ('whisper' or 'vosk'). Uses default if None.

    Returns:
        Backend configuration dictionary.

    Raises:
        KeyError: If backend name is not found.
    """
    key = backend or BACKEND
    if key not in BACKENDS:
        raise KeyError(f"Unknown backend: {key}. Available: {list(BACKENDS.keys())}")
    return BACKENDS[key]


def get_display_info(backend: str | None = None) -> str:
    """
    Get human-readable display string for a backend.

    Returns:
        Formatted string like "Whisper (batch) | every 3000ms"
    """
    cfg = get_backend_config(backend)
    return f"{cfg['name']} ({cfg['kind']}) | every {cfg['interval_ms']}ms"


def list_backends() -> dict[str, str]:
    """
    List all available backends with descriptions.

    Returns:
        Dict mapping backend name to description.
    """
    return {name: cfg["description"] for name, cfg in BACKENDS.items()}
