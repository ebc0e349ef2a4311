"""Tests for audio conversion helpers."""

import numpy as np
import pytest

from subwave.audio.utils import (
    PCM16_MAX,
    calculate_chunk_size,
    convert_samples,
    decode_float32,
    float_to_pcm16,
    resample_audio,
    to_mono,
)


class TestDecodeAndDownmix:
    """Tests for decode_float32 and to_mono."""

    def test_decode_float32(self):
        """Raw paFloat32 bytes decode to the original values."""
        samples = np.array([0.1, -0.2, 0.3], dtype=np.float32)
        np.testing.assert_array_equal(decode_float32(samples.tobytes()), samples)

    def test_mono_passthrough(self):
        """Single-channel input is unchanged."""
        samples = np.array([0.1, 0.2], dtype=np.float32)
        np.testing.assert_array_equal(to_mono(samples, 1), samples)

    def test_stereo_average(self):
        """Interleaved stereo is averaged per frame."""
        samples = np.array([0.2, 0.4, -1.0, 1.0], dtype=np.float32)
        np.testing.assert_allclose(to_mono(samples, 2), [0.3, 0.0])

    def test_partial_frame_dropped(self):
        """A trailing incomplete frame is ignored."""
        samples = np.array([1, 1, 1, 1, 1], dtype=np.float32)
        assert to_mono(samples, 2).size == 2


class TestResample:
    """Tests for resample_audio."""

    def test_same_rate_passthrough(self):
        """No resampling when rates match."""
        samples = np.ones(100, dtype=np.float32)
        np.testing.assert_array_equal(resample_audio(samples, 16000, 16000), samples)

    def test_48k_to_16k_length(self):
        """48 kHz -> 16 kHz divides the length by three."""
        out = resample_audio(np.zeros(4800, dtype=np.float32), 48000, 16000)
        assert out.size == 1600
        assert out.dtype == np.float32

    def test_44k1_to_16k_length(self):
        """Non-integer ratios use the reduced polyphase factors."""
        out = resample_audio(np.zeros(44100, dtype=np.float32), 44100, 16000)
        assert out.size == 16000

    def test_empty(self):
        """Empty input stays empty."""
        assert resample_audio(np.array([], dtype=np.float32), 48000, 16000).size == 0


class TestPcm16:
    """Tests for float_to_pcm16 and convert_samples."""

    def test_scaling(self):
        """Linear scale by the int16 maximum."""
        pcm = float_to_pcm16(np.array([0.0, 1.0, -1.0, 0.5], dtype=np.float32))
        assert pcm.dtype == np.int16
        assert list(pcm) == [0, PCM16_MAX, -PCM16_MAX, int(0.5 * PCM16_MAX)]

    def test_clipping(self):
        """Out-of-range values are clipped."""
        pcm = float_to_pcm16(np.array([2.0, -3.0], dtype=np.float32))
        assert list(pcm) == [PCM16_MAX, -PCM16_MAX]

    def test_convert_float32(self):
        """float32 format returns a resampled array."""
        out = convert_samples(np.ones(4800, dtype=np.float32), 48000, 16000, "float32")
        assert isinstance(out, np.ndarray)
        assert out.size == 1600

    def test_convert_pcm16(self):
        """pcm16 format returns two bytes per sample."""
        out = convert_samples(np.ones(1600, dtype=np.float32) * 0.5, 16000, 16000, "pcm16")
        assert isinstance(out, bytes)
        assert len(out) == 3200

    def test_convert_unknown_format(self):
        """Unknown formats are rejected."""
        with pytest.raises(ValueError):
            convert_samples(np.ones(10, dtype=np.float32), 16000, 16000, "mp3")

    def test_chunk_size(self):
        """100 ms chunks."""
        assert calculate_chunk_size(16000) == 1600
        assert calculate_chunk_size(48000) == 4800
