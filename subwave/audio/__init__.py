"""Audio capture module: device selection, capture streams, shared buffer."""

from .buffer import SampleBuffer, apply_noise_gate
from .capture import AudioCapture, MicrophoneCapture, SystemAudioCapture, create_capture
from .devices import DeviceInfo, list_devices, match_keywords, select_device
from .utils import (
    CHUNK_DURATION_MS,
    calculate_chunk_size,
    convert_samples,
    float_to_pcm16,
    resample_audio,
    to_mono,
)

__all__ = [
    "CHUNK_DURATION_MS",
    "AudioCapture",
    "DeviceInfo",
    "MicrophoneCapture",
    "SampleBuffer",
    "SystemAudioCapture",
    "apply_noise_gate",
    "calculate_chunk_size",
    "convert_samples",
    "create_capture",
    "float_to_pcm16",
    "list_devices",
    "match_keywords",
    "resample_audio",
    "select_device",
    "to_mono",
]
