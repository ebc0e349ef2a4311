"""Pytest configuration and shared fixtures for SubWave tests."""

import sys
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

# Add the project root to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from subwave.asr.base import BatchBackend, StreamingBackend
from subwave.audio.devices import DeviceInfo

SAMPLE_RATE = 16000


def make_tone(seconds: float, freq: float = 440.0, amplitude: float = 0.5, rate: int = SAMPLE_RATE):
    """Sine tone as mono float32 samples."""
    t = np.arange(int(seconds * rate)) / rate
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


class FakeBatchBackend(BatchBackend):
    """Batch backend returning canned segments; records every chunk."""

    backend_name = "whisper"

    def __init__(self, segments=None, error: Exception | None = None, gate=None):
        super().__init__(model_path="models/fake")
        self.segments = ["hello", "world"] if segments is None else segments
        self.error = error
        self.gate = gate  # threading.Event the call waits on, if set
        self.entered = threading.Event()
        self.calls = []
        self.reset_count = 0
        self.active = 0
        self.max_active = 0
        self.resets_during_call = 0
        self._lock = threading.Lock()

    def transcribe_segments(self, chunk):
        self.calls.append(chunk)
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        self.entered.set()
        try:
            if self.gate is not None:
                self.gate.wait(5.0)
        finally:
            with self._lock:
                self.active -= 1
        if self.error is not None:
            raise self.error
        return list(self.segments)

    def reset(self):
        self.reset_count += 1
        if self.active:
            self.resets_during_call += 1


class FakeStreamingBackend(StreamingBackend):
    """Streaming backend that reports the running byte count as text."""

    backend_name = "vosk"

    def __init__(self, final_every: int = 0):
        super().__init__(model_path="models/fake")
        self.final_every = final_every
        self.calls = []
        self.reset_count = 0
        self._received = 0

    def reset(self):
        self.reset_count += 1
        self._received = 0
        self.last_is_final = False

    def process_chunk(self, chunk):
        self.calls.append(chunk)
        self._received += len(chunk)
        self.last_is_final = bool(self.final_every) and len(self.calls) % self.final_every == 0
        return f"bytes {self._received}"


@pytest.fixture
def batch_backend():
    return FakeBatchBackend()


@pytest.fixture
def streaming_backend():
    return FakeStreamingBackend()


@pytest.fixture
def mic_device():
    return DeviceInfo(index=1, name="Test Microphone", sample_rate=SAMPLE_RATE, channels=1)


@pytest.fixture
def loopback_device():
    return DeviceInfo(
        index=7,
        name="Speakers (HDMI) [Loopback]",
        sample_rate=48000,
        channels=2,
        is_loopback=True,
    )


@pytest.fixture
def mock_pyaudio():
    """pyaudio replaced by a MagicMock module with an active stream."""
    module = MagicMock()
    module.paFloat32 = 1
    module.paContinue = 0
    module.paComplete = 1
    module.paAbort = 2
    stream = MagicMock()
    stream.is_active.return_value = True
    module.PyAudio.return_value.open.return_value = stream
    with patch.dict("sys.modules", {"pyaudio": module, "pyaudiowpatch": module}):
        yield module
