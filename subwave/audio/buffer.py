"""
Shared sample buffer between the capture callback and the transcription worker.

One writer (the PortAudio callback) appends gated samples; one drainer (the
worker) periodically takes everything. A single lock guards each operation
and is never held while samples are concatenated or transcribed.
"""

import logging
import threading

import numpy as np

logger = logging.getLogger(__name__)


def apply_noise_gate(samples: np.ndarray, threshold: float) -> np.ndarray:
    """
    Drop samples whose absolute amplitude is at or below ``threshold``.

    Surviving samples keep their original order.
    """
    samples = np.asarray(samples, dtype=np.float32)
    if samples.size == 0:
        return samples
    return samples[np.abs(samples) > threshold]


class SampleBuffer:
    """Mutex-guarded growable sample sequence with atomic drain.

    Usage:
        buffer = SampleBuffer()

        # Capture callback:
        buffer.append(samples)

        # Worker, once per wake interval:
        chunk = buffer.drain()
        if chunk.size == 0:
            ...  # nothing to process
    """

    def __init__(self):
        # Appended arrays are kept as-is; drain() joins them outside the lock
        self._chunks: list[np.ndarray] = []
        self._count = 0
        self._lock = threading.Lock()

    def append(self, samples: np.ndarray) -> None:
        """Append samples. Empty input is a no-op."""
        if len(samples) == 0:
            return
        chunk = np.array(samples, dtype=np.float32)
        with self._lock:
            self._chunks.append(chunk)
            self._count += len(chunk)

    def drain(self) -> np.ndarray:
        """Remove and return all buffered samples in append order.

        Returns an empty float32 array when nothing was buffered.
        """
        with self._lock:
            chunks = self._chunks
            self._chunks = []
            self._count = 0

        if not chunks:
            return np.array([], dtype=np.float32)
        if len(chunks) == 1:
            return chunks[0]
        return np.concatenate(chunks)

    def clear(self) -> None:
        """Discard everything buffered."""
        with self._lock:
            dropped = self._count
            self._chunks = []
            self._count = 0
        if dropped:
            logger.debug(f"Cleared {dropped} buffered samples")

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"SampleBuffer({self._count} samples)"
