"""Update channel between the transcription worker and the UI.

Unbounded, ordered, many-producers/one-consumer. Sending never blocks and
never raises: once the receiving side closes the channel, further updates
are dropped silently.
"""

import asyncio
import logging
import queue
import threading
from collections.abc import AsyncIterator, Iterator

from subwave.core.models import TranscriptUpdate

logger = logging.getLogger(__name__)

# Poll period for async iteration (seconds)
ASYNC_POLL_INTERVAL = 0.1


class UpdateChannel:
    """Queue of TranscriptUpdate events.

    Usage:
        channel = UpdateChannel()

        # Worker thread:
        channel.send(update)

        # UI thread:
        for update in channel:         # blocks until closed
            show(update.text)

        # asyncio UI:
        async for update in channel:
            show(update.text)
    """

    def __init__(self):
        self._queue: queue.SimpleQueue[TranscriptUpdate] = queue.SimpleQueue()
        self._closed = threading.Event()
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, update: TranscriptUpdate) -> bool:
        """
        Queue an update.

        Returns:
            False if the channel is closed and the update was dropped
        """
        if self._closed.is_set():
            self.dropped += 1
            logger.debug(f"Channel closed, dropped {update}")
            return False
        self._queue.put(update)
        return True

    def recv(self, timeout: float | None = None) -> TranscriptUpdate | None:
        """Wait for the next update. Returns None on timeout or once closed and empty."""
        if self._closed.is_set():
            return self.try_recv()
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def try_recv(self) -> TranscriptUpdate | None:
        """Next update without waiting, or None."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> list[TranscriptUpdate]:
        """All queued updates, oldest first."""
        updates = []
        while True:
            update = self.try_recv()
            if update is None:
                return updates
            updates.append(update)

    def close(self) -> None:
        """Close the receiving side. Queued updates can still be drained."""
        self._closed.set()

    def __iter__(self) -> Iterator[TranscriptUpdate]:
        while True:
            update = self.recv(timeout=ASYNC_POLL_INTERVAL)
            if update is not None:
                yield update
            elif self._closed.is_set() and self._queue.empty():
                return

    def __aiter__(self) -> AsyncIterator[TranscriptUpdate]:
        return self._aiter()

    async def _aiter(self) -> AsyncIterator[TranscriptUpdate]:
        while True:
            update = self.try_recv()
            if update is not None:
                yield update
            elif self._closed.is_set():
                return
            else:
                await asyncio.sleep(ASYNC_POLL_INTERVAL)

    def __len__(self) -> int:
        return self._queue.qsize()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"UpdateChannel({state}, {len(self)} queued)"
