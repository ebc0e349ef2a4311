"""Tests for the noise gate and the shared sample buffer."""

import threading

import numpy as np

from subwave.audio.buffer import SampleBuffer, apply_noise_gate


class TestNoiseGate:
    """Tests for apply_noise_gate."""

    def test_drops_samples_at_or_below_threshold(self):
        """Samples with abs <= threshold are removed, others kept in order."""
        samples = np.array([0.0, 0.5, -0.01, 0.01, -0.3, 0.02, 0.011], dtype=np.float32)
        kept = apply_noise_gate(samples, 0.01)
        np.testing.assert_array_equal(kept, np.array([0.5, -0.3, 0.02, 0.011], dtype=np.float32))

    def test_gate_property_on_random_audio(self):
        """No survivor is at or below the threshold; every louder sample survives."""
        rng = np.random.default_rng(42)
        samples = rng.uniform(-0.001, 0.001, 5000).astype(np.float32)
        threshold = 1e-4
        kept = apply_noise_gate(samples, threshold)
        assert np.all(np.abs(kept) > threshold)
        np.testing.assert_array_equal(kept, samples[np.abs(samples) > threshold])

    def test_all_silence(self):
        """Digital silence produces nothing."""
        assert apply_noise_gate(np.zeros(1600, dtype=np.float32), 1e-4).size == 0

    def test_zero_threshold_keeps_non_zero(self):
        """Threshold 0 only drops exact zeros."""
        kept = apply_noise_gate(np.array([0.0, 1e-9, -1e-9], dtype=np.float32), 0.0)
        assert kept.size == 2

    def test_empty_input(self):
        """Empty input stays empty."""
        assert apply_noise_gate(np.array([], dtype=np.float32), 0.1).size == 0


class TestSampleBuffer:
    """Tests for SampleBuffer."""

    def test_drain_returns_appends_in_order(self):
        """Drain concatenates appended arrays in append order."""
        buffer = SampleBuffer()
        buffer.append(np.array([1, 2], dtype=np.float32))
        buffer.append(np.array([3], dtype=np.float32))
        np.testing.assert_array_equal(buffer.drain(), np.array([1, 2, 3], dtype=np.float32))

    def test_second_drain_is_empty(self):
        """Two drains with no append in between: the second is empty."""
        buffer = SampleBuffer()
        buffer.append(np.ones(10, dtype=np.float32))
        assert buffer.drain().size == 10
        second = buffer.drain()
        assert second.size == 0
        assert second.dtype == np.float32

    def test_empty_append_is_noop(self):
        """Appending nothing does not change the buffer."""
        buffer = SampleBuffer()
        buffer.append(np.array([], dtype=np.float32))
        assert len(buffer) == 0
        assert buffer.drain().size == 0

    def test_append_copies_input(self):
        """Later mutation of the caller's array does not leak into the buffer."""
        buffer = SampleBuffer()
        samples = np.array([0.5, 0.5], dtype=np.float32)
        buffer.append(samples)
        samples[:] = 0
        np.testing.assert_array_equal(buffer.drain(), np.array([0.5, 0.5], dtype=np.float32))

    def test_len_tracks_samples(self):
        """len() is the number of buffered samples."""
        buffer = SampleBuffer()
        buffer.append(np.ones(5, dtype=np.float32))
        buffer.append(np.ones(7, dtype=np.float32))
        assert len(buffer) == 12
        buffer.drain()
        assert len(buffer) == 0

    def test_clear(self):
        """clear() discards everything."""
        buffer = SampleBuffer()
        buffer.append(np.ones(5, dtype=np.float32))
        buffer.clear()
        assert buffer.drain().size == 0

    def test_concurrent_appends_then_drain(self):
        """All samples from concurrent writers arrive, each writer's order intact."""
        buffer = SampleBuffer()
        writers = 8
        appends = 200
        block = 4

        def writer(wid: int):
            for i in range(appends):
                base = wid * 1_000_000 + i * block
                buffer.append(np.arange(base, base + block, dtype=np.float64))

        threads = [threading.Thread(target=writer, args=(w,)) for w in range(writers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        drained = buffer.drain().astype(np.int64)
        assert drained.size == writers * appends * block
        for wid in range(writers):
            mine = drained[(drained >= wid * 1_000_000) & (drained < (wid + 1) * 1_000_000)]
            start = wid * 1_000_000
            np.testing.assert_array_equal(mine, np.arange(start, start + appends * block))

    def test_drain_while_appending_loses_nothing(self):
        """Samples appended during repeated drains are all seen exactly once."""
        buffer = SampleBuffer()
        total = 20000
        seen = []
        done = threading.Event()

        def writer():
            for i in range(0, total, 10):
                buffer.append(np.arange(i, i + 10, dtype=np.float32))
            done.set()

        t = threading.Thread(target=writer)
        t.start()
        while not done.is_set():
            seen.append(buffer.drain())
        t.join()
        seen.append(buffer.drain())

        result = np.concatenate(seen)
        np.testing.assert_array_equal(result, np.arange(total, dtype=np.float32))
