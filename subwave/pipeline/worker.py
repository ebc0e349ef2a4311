"""Transcription worker: periodic drain -> convert -> transcribe -> emit.

The worker wakes on a fixed interval rather than on buffer size, which bounds
caption latency to one interval regardless of speech activity. Every cycle
produces a CycleResult; failures are reported there and never reach the UI.
"""

import logging
import threading
import time
from collections import Counter
from collections.abc import Callable

from subwave.asr.base import TranscriptionBackend
from subwave.audio.buffer import SampleBuffer
from subwave.audio.utils import convert_samples
from subwave.core.models import CycleResult, CycleStatus, TranscriptUpdate

from .channel import UpdateChannel

logger = logging.getLogger(__name__)


class TranscriptionWorker:
    """Consumer thread for one capture session."""

    def __init__(
        self,
        buffer: SampleBuffer,
        backend: TranscriptionBackend,
        channel: UpdateChannel,
        session_id: str,
        source_rate: int,
        interval: float,
        on_cycle: Callable[[CycleResult], None] | None = None,
    ):
        """
        Initialize the worker.

        Args:
            buffer: Buffer filled by the capture stream
            backend: Backend receiving converted chunks
            channel: Channel receiving transcript updates
            session_id: Tag for emitted updates
            source_rate: Sample rate of the buffered audio (device rate)
            interval: Wake period in seconds
            on_cycle: Observer called with every CycleResult
        """
        self.buffer = buffer
        self.backend = backend
        self.channel = channel
        self.session_id = session_id
        self.source_rate = source_rate
        self.interval = interval
        self.on_cycle = on_cycle

        self.stats: Counter[CycleStatus] = Counter()
        self._sequence = 0
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def min_source_samples(self) -> int:
        """Backend minimum chunk size expressed at the source rate."""
        return int(self.backend.min_samples * self.source_rate / self.backend.sample_rate)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start the worker thread."""
        if self.is_alive:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name=f"transcription-{self.session_id[:8]}", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> bool:
        """
        Stop the worker and wait for an in-flight cycle to finish.

        Returns:
            True if the thread exited within the timeout
        """
        self._stop_event.set()
        if self._thread is None:
            return True
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)
        finished = not self._thread.is_alive()
        if not finished:
            logger.warning(f"Worker {self.session_id[:8]} still transcribing after {timeout}s")
        return finished

    def _run(self):
        logger.info(f"Transcription worker started (every {self.interval:.2f}s)")
        while not self._stop_event.wait(self.interval):
            self.run_cycle()
        logger.info(
            "Transcription worker stopped "
            f"({self.stats[CycleStatus.EMITTED]} updates, "
            f"{self.stats[CycleStatus.BACKEND_ERROR]} errors)"
        )

    def run_cycle(self) -> CycleResult:
        """Drain the buffer and run one transcription pass."""
        chunk = self.buffer.drain()

        if chunk.size == 0:
            return self._finish(CycleResult.skipped(CycleStatus.SKIPPED_EMPTY))

        if chunk.size < self.min_source_samples:
            # Too short for the backend, discarded
            return self._finish(CycleResult.skipped(CycleStatus.SKIPPED_SHORT, chunk.size))

        start = time.time()
        try:
            data = convert_samples(
                chunk, self.source_rate, self.backend.sample_rate, self.backend.sample_format
            )
            text = self.backend.process_chunk(data)
        except Exception as e:
            logger.warning(f"{self.backend.name} failed on {chunk.size} samples: {e}")
            logger.debug("Backend traceback", exc_info=True)
            return self._finish(CycleResult.from_error(str(e), chunk.size, time.time() - start))

        elapsed = time.time() - start
        text = (text or "").strip()
        if not text:
            return self._finish(
                CycleResult(status=CycleStatus.NO_TEXT, samples=chunk.size, elapsed=elapsed)
            )

        is_final = not self.backend.is_streaming or getattr(self.backend, "last_is_final", True)
        update = TranscriptUpdate(
            text=text, session_id=self.session_id, sequence=self._sequence, is_final=is_final
        )
        self._sequence += 1
        self.channel.send(update)
        logger.debug(f"{update} ({chunk.size / self.source_rate:.1f}s -> {elapsed:.2f}s)")
        return self._finish(CycleResult.emitted(text, chunk.size, elapsed))

    def _finish(self, result: CycleResult) -> CycleResult:
        self.stats[result.status] += 1
        if self.on_cycle:
            try:
                self.on_cycle(result)
            except Exception as e:
                logger.warning(f"Cycle observer failed: {e}")
        return result
