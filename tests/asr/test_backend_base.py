"""Tests for the backend base classes."""

import numpy as np

from conftest import FakeBatchBackend, FakeStreamingBackend


class TestBatchBackend:
    """Tests for BatchBackend.process_chunk."""

    def test_joins_segments_with_single_spaces(self):
        """Segments are stripped and joined by one space."""
        backend = FakeBatchBackend(segments=[" Hello there. ", "How are you?"])
        text = backend.process_chunk(np.zeros(16000, dtype=np.float32))
        assert text == "Hello there. How are you?"

    def test_skips_blank_segments(self):
        """Empty and whitespace-only segments are dropped."""
        backend = FakeBatchBackend(segments=["", "  ", "words", None])
        assert backend.process_chunk(np.zeros(10, dtype=np.float32)) == "words"

    def test_no_segments(self):
        """No segments gives an empty string."""
        backend = FakeBatchBackend(segments=[])
        assert backend.process_chunk(np.zeros(10, dtype=np.float32)) == ""

    def test_config_from_backend_table(self):
        """Rate, format and minimum come from the backend table."""
        backend = FakeBatchBackend()
        assert backend.name == "Whisper"
        assert backend.sample_rate == 16000
        assert backend.sample_format == "float32"
        assert backend.min_samples == 16000
        assert not backend.is_streaming


class TestStreamingBackend:
    """Tests for StreamingBackend."""

    def test_is_streaming(self):
        backend = FakeStreamingBackend()
        assert backend.is_streaming
        assert backend.sample_format == "pcm16"
        assert backend.min_samples == 0

    def test_reset_clears_state(self):
        """reset() starts the running result from scratch."""
        backend = FakeStreamingBackend()
        backend.process_chunk(b"\x00" * 100)
        backend.reset()
        assert backend.process_chunk(b"\x00" * 10) == "bytes 10"
