"""
Session Controller

Owns one capture session at a time: device, capture stream, shared buffer,
transcription worker and update channel. The backend outlives sessions so the
model is loaded only once.
"""

import logging
import threading
import uuid
from collections.abc import Callable

from subwave.asr.base import TranscriptionBackend
from subwave.asr.registry import create_backend
from subwave.audio.buffer import SampleBuffer
from subwave.audio.capture import AudioCapture, create_capture
from subwave.audio.devices import DeviceInfo, select_device
from subwave.config.settings import CaptionSettings
from subwave.core.errors import CaptureError, DeviceNotFound, ModelLoadError, SessionStartError
from subwave.core.models import CycleResult, SessionState

from .channel import UpdateChannel
from .worker import TranscriptionWorker

logger = logging.getLogger(__name__)

DeviceSelector = Callable[[CaptionSettings], DeviceInfo]
CaptureFactory = Callable[..., AudioCapture]


def _default_device_selector(settings: CaptionSettings) -> DeviceInfo:
    return select_device(settings.capture_mode, settings.loopback_keywords)


class SessionController:
    """Start/stop/restart control over the captioning pipeline.

    Usage:
        controller = SessionController(CaptionSettings(backend="vosk"))
        controller.start()
        for update in controller.updates:
            print(update.text)
        controller.stop()
    """

    def __init__(
        self,
        settings: CaptionSettings | None = None,
        backend: TranscriptionBackend | None = None,
        backend_factory: Callable[[], TranscriptionBackend] | None = None,
        device_selector: DeviceSelector | None = None,
        capture_factory: CaptureFactory | None = None,
        on_fault: Callable[[Exception], None] | None = None,
        on_cycle: Callable[[CycleResult], None] | None = None,
    ):
        """
        Initialize the controller. Nothing is opened until start().

        Args:
            settings: Session settings (environment defaults if None)
            backend: Already constructed backend to use for every session
            backend_factory: Builds the backend on first start (registry if None)
            device_selector: Picks the input device (settings-driven if None)
            capture_factory: Builds the capture stream (create_capture if None)
            on_fault: Called with the error when the capture stream faults
            on_cycle: Observer for every transcription cycle result
        """
        self.settings = settings or CaptionSettings.from_env()
        self._backend = backend
        self._backend_factory = backend_factory or (
            lambda: create_backend(self.settings.backend, self.settings.resolved_model_path)
        )
        self._select_device = device_selector or _default_device_selector
        self._create_capture = capture_factory or create_capture
        self.on_fault = on_fault
        self.on_cycle = on_cycle

        self.state = SessionState.IDLE
        self.session_id: str | None = None
        self.device: DeviceInfo | None = None
        self.fault: Exception | None = None

        self._lock = threading.RLock()
        self._buffer: SampleBuffer | None = None
        self._channel: UpdateChannel | None = None
        self._worker: TranscriptionWorker | None = None
        self._capture: AudioCapture | None = None
        # Worker of a stopped session whose inference call outlived the join
        self._lingering: TranscriptionWorker | None = None

    @property
    def is_capturing(self) -> bool:
        return self.state == SessionState.CAPTURING

    @property
    def updates(self) -> UpdateChannel | None:
        """Update channel of the current session, None when idle."""
        return self._channel

    @property
    def backend(self) -> TranscriptionBackend | None:
        return self._backend

    @property
    def source_name(self) -> str | None:
        return self._capture.source_name if self._capture is not None else None

    def _get_backend(self) -> TranscriptionBackend:
        if self._backend is None:
            self._backend = self._backend_factory()
        return self._backend

    def start(self) -> bool:
        """
        Start a new capture session.

        Returns:
            False if a session is already running, True once capturing

        Raises:
            SessionStartError: Device, model, reset or stream failure
        """
        with self._lock:
            if self.state == SessionState.CAPTURING:
                logger.debug("start() ignored, already capturing")
                return False

            try:
                device = self._select_device(self.settings)
                backend = self._get_backend()
            except (DeviceNotFound, ModelLoadError) as e:
                logger.error(f"Cannot start session: {e}")
                raise SessionStartError(str(e)) from e

            self._wait_for_lingering_worker()
            try:
                backend.reset()
            except Exception as e:
                logger.error(f"Cannot reset {backend.name}: {e}")
                raise SessionStartError(f"Cannot reset {backend.name}: {e}") from e

            session_id = uuid.uuid4().hex
            buffer = SampleBuffer()
            channel = UpdateChannel()
            worker = TranscriptionWorker(
                buffer=buffer,
                backend=backend,
                channel=channel,
                session_id=session_id,
                source_rate=device.sample_rate,
                interval=self.settings.wake_interval,
                on_cycle=self.on_cycle,
            )
            capture = self._create_capture(
                device,
                buffer,
                noise_threshold=self.settings.noise_threshold,
                on_error=self._on_capture_error,
            )

            self.fault = None
            try:
                capture.start()
            except CaptureError as e:
                capture.stop()
                logger.error(f"Cannot start session: {e}")
                raise SessionStartError(str(e)) from e

            worker.start()

            self.session_id = session_id
            self.device = device
            self._buffer = buffer
            self._channel = channel
            self._worker = worker
            self._capture = capture
            self.state = SessionState.CAPTURING

            logger.info(
                f"Session {session_id[:8]} started: {capture.source_name} -> {backend.name}"
            )
            return True

    def stop(self) -> bool:
        """
        Stop the current session. Safe to call when idle.

        Returns:
            True if a running session was stopped
        """
        with self._lock:
            if self.state == SessionState.IDLE:
                return False

            if self._capture is not None:
                self._capture.stop()
            if self._worker is not None:
                if not self._worker.stop(timeout=self.settings.join_timeout):
                    self._lingering = self._worker
            if self._channel is not None:
                # A cycle that outlived the join can no longer deliver
                self._channel.close()
            if self._buffer is not None:
                self._buffer.clear()

            logger.info(f"Session {self.session_id[:8]} stopped")
            self._capture = None
            self._worker = None
            self._buffer = None
            self._channel = None
            self.state = SessionState.IDLE
            return True

    def _wait_for_lingering_worker(self):
        """Block until the previous session's inference call has returned."""
        worker = self._lingering
        if worker is None:
            return
        if worker.is_alive:
            logger.info(f"Waiting for worker {worker.session_id[:8]} to finish its last chunk")
            worker.stop()
        self._lingering = None

    def restart(self) -> bool:
        """Stop the current session (if any) and start a fresh one."""
        with self._lock:
            self.stop()
            return self.start()

    def check_health(self) -> bool:
        """
        Poll the capture stream for a silent failure.

        Returns:
            True if idle or the stream is still delivering frames
        """
        capture = self._capture
        if capture is None:
            return True
        return capture.check_stream()

    def _on_capture_error(self, error: Exception):
        """Runs on the audio thread when the capture stream faults."""
        self.fault = error
        logger.error(f"Capture fault in session {(self.session_id or '')[:8]}: {error}")
        if self.on_fault:
            try:
                self.on_fault(error)
            except Exception as e:
                logger.warning(f"Fault callback failed: {e}")
