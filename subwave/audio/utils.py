"""Audio utility functions for downmixing, resampling and format conversion."""

import logging
from math import gcd

import numpy as np
from scipy import signal

logger = logging.getLogger(__name__)

# Audio settings
CHUNK_DURATION_MS = 100  # PortAudio frames per callback

PCM16_MAX = 32767


def decode_float32(audio_data: bytes) -> np.ndarray:
    """Decode a raw paFloat32 buffer into a float32 array."""
    return np.frombuffer(audio_data, dtype=np.float32)


def to_mono(samples: np.ndarray, channels: int) -> np.ndarray:
    """
    Downmix interleaved samples to mono by averaging channels.

    Args:
        samples: Interleaved float32 samples (L/R/L/R... for stereo)
        channels: Number of interleaved channels

    Returns:
        Mono float32 samples
    """
    if channels <= 1:
        return samples.astype(np.float32, copy=False)
    usable = len(samples) - (len(samples) % channels)
    frames = samples[:usable].reshape(-1, channels)
    return frames.mean(axis=1, dtype=np.float32)


def resample_audio(samples: np.ndarray, from_rate: int, to_rate: int) -> np.ndarray:
    """
    Resample float audio using polyphase filtering.

    Args:
        samples: Mono float32 samples
        from_rate: Source sample rate in Hz
        to_rate: Target sample rate in Hz

    Returns:
        Resampled float32 samples
    """
    if from_rate == to_rate or samples.size == 0:
        return samples.astype(np.float32, copy=False)

    g = gcd(from_rate, to_rate)
    resampled = signal.resample_poly(samples, to_rate // g, from_rate // g)
    return resampled.astype(np.float32)


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """
    Convert normalized float samples to signed 16-bit PCM.

    Linear scaling by the int16 maximum; values outside [-1, 1] are clipped.
    """
    scaled = np.clip(samples, -1.0, 1.0) * PCM16_MAX
    return scaled.astype(np.int16)


def convert_samples(
    samples: np.ndarray, from_rate: int, to_rate: int, sample_format: str
) -> np.ndarray | bytes:
    """
    Convert a drained chunk into the representation a backend expects.

    Args:
        samples: Mono float32 samples at the device rate
        from_rate: Device sample rate
        to_rate: Backend sample rate
        sample_format: "float32" (numpy array) or "pcm16" (little-endian bytes)

    Returns:
        float32 array or 16-bit PCM bytes
    """
    audio = resample_audio(samples, from_rate, to_rate)
    if sample_format == "float32":
        return audio
    if sample_format == "pcm16":
        return float_to_pcm16(audio).tobytes()
    raise ValueError(f"Unknown sample format: {sample_format}")


def calculate_chunk_size(sample_rate: int, duration_ms: int = CHUNK_DURATION_MS) -> int:
    """Calculate chunk size in samples for given duration."""
    return int(sample_rate * duration_ms / 1000)
