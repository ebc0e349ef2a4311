"""Audio capture classes for microphone and system audio."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from subwave.config.settings import NOISE_THRESHOLD
from subwave.core.errors import CaptureError

from .buffer import SampleBuffer, apply_noise_gate
from .devices import DeviceInfo
from .utils import calculate_chunk_size, decode_float32, to_mono

logger = logging.getLogger(__name__)


class AudioCapture(ABC):
    """Callback-driven capture stream feeding a SampleBuffer.

    PortAudio calls ``_audio_callback`` on its own thread for every frame;
    each frame is downmixed, noise-gated and appended to the buffer.
    """

    def __init__(
        self,
        device: DeviceInfo,
        buffer: SampleBuffer,
        noise_threshold: float = NOISE_THRESHOLD,
        on_error: Callable[[Exception], None] | None = None,
    ):
        """
        Initialize audio capture.

        Args:
            device: Device chosen by the device selector
            buffer: Shared buffer receiving gated mono float32 samples
            noise_threshold: Samples with abs amplitude <= this are dropped
            on_error: Called once with the exception when the stream faults
        """
        self.device = device
        self.buffer = buffer
        self.noise_threshold = noise_threshold
        self.on_error = on_error

        self.running = False
        self.pyaudio_instance = None
        self.stream = None
        self.fault: Exception | None = None

    @abstractmethod
    def _import_pyaudio(self):
        """Return the PyAudio flavour for this capture type."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return human-readable source name."""

    def start(self) -> None:
        """Open the input stream at the device's native configuration.

        Raises:
            CaptureError: If the stream cannot be opened
        """
        try:
            pyaudio = self._import_pyaudio()
        except ImportError as e:
            raise CaptureError(f"{self.source_name}: audio library not installed ({e})") from e

        chunk_size = calculate_chunk_size(self.device.sample_rate)
        logger.info(
            f"{self.source_name}: {self.device.sample_rate}Hz, {self.device.channels}ch, "
            f"gate {self.noise_threshold:g}"
        )

        try:
            self.pyaudio_instance = pyaudio.PyAudio()
            self.stream = self.pyaudio_instance.open(
                format=pyaudio.paFloat32,
                channels=self.device.channels,
                rate=self.device.sample_rate,
                input=True,
                input_device_index=self.device.index,
                frames_per_buffer=chunk_size,
                stream_callback=self._audio_callback,
            )
            self.fault = None
            self.running = True
            self.stream.start_stream()
        except Exception as e:
            self.running = False
            self._close()
            raise CaptureError(f"{self.source_name}: failed to open stream: {e}") from e

        logger.info(f"{self.source_name} capture started")

    def _audio_callback(self, in_data, frame_count, time_info, status):
        pyaudio = self._import_pyaudio()

        if not self.running:
            return (None, pyaudio.paComplete)

        if status:
            logger.debug(f"{self.source_name} status flags: {status}")

        try:
            samples = to_mono(decode_float32(in_data), self.device.channels)
            kept = apply_noise_gate(samples, self.noise_threshold)
            self.buffer.append(kept)
        except Exception as e:
            self._report_fault(e)
            return (None, pyaudio.paAbort)

        if len(kept):
            logger.debug(f"Captured {len(kept)}/{len(samples)} samples above gate")
        return (None, pyaudio.paContinue)

    @property
    def is_active(self) -> bool:
        """True while the stream is running and delivering frames."""
        if not self.running or self.stream is None:
            return False
        try:
            return bool(self.stream.is_active())
        except Exception:
            return False

    def check_stream(self) -> bool:
        """Report a fault if the stream stopped delivering while running.

        Returns:
            True if the stream is healthy (or intentionally stopped)
        """
        if not self.running:
            return True
        if self.is_active:
            return True
        self._report_fault(CaptureError(f"{self.source_name}: stream is no longer active"))
        return False

    def _report_fault(self, error: Exception):
        """Record a stream fault and notify the owner once."""
        if self.fault is not None:
            return
        self.fault = error
        logger.error(f"{self.source_name} stream error: {error}")
        if self.on_error:
            try:
                self.on_error(error)
            except Exception as e:
                logger.warning(f"Capture error callback failed: {e}")

    def _close(self):
        if self.stream:
            try:
                self.stream.stop_stream()
                self.stream.close()
            except Exception as e:
                logger.debug(f"Error closing stream: {e}")
            self.stream = None

        if self.pyaudio_instance:
            try:
                self.pyaudio_instance.terminate()
            except Exception as e:
                logger.debug(f"Error terminating PyAudio: {e}")
            self.pyaudio_instance = None

    def stop(self):
        """Stop capturing audio and tear the stream down."""
        was_running = self.running
        self.running = False
        self._close()
        if was_running:
            logger.info(f"{self.source_name} capture stopped")


class MicrophoneCapture(AudioCapture):
    """Capture audio from a microphone using PyAudio."""

    def _import_pyaudio(self):
        import pyaudio

        return pyaudio

    @property
    def source_name(self) -> str:
        return f"Microphone ({self.device.display_name})"


class SystemAudioCapture(AudioCapture):
    """Capture system output via WASAPI loopback using PyAudioWPatch."""

    def _import_pyaudio(self):
        import pyaudiowpatch

        return pyaudiowpatch

    @property
    def source_name(self) -> str:
        return f"System Audio ({self.device.display_name})"


def create_capture(
    device: DeviceInfo,
    buffer: SampleBuffer,
    noise_threshold: float = NOISE_THRESHOLD,
    on_error: Callable[[Exception], None] | None = None,
) -> AudioCapture:
    """Build the capture class matching the selected device."""
    cls = SystemAudioCapture if device.is_loopback else MicrophoneCapture
    return cls(device, buffer, noise_threshold=noise_threshold, on_error=on_error)
