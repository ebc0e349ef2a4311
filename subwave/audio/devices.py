"""Audio device selection and listing.

Microphone capture uses PyAudio; system-output capture uses the WASAPI
loopback endpoints exposed by PyAudioWPatch. Both libraries are imported on
demand so the rest of the pipeline works without audio hardware.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from subwave.config.settings import LOOPBACK_KEYWORDS
from subwave.core.errors import DeviceNotFound
from subwave.core.models import CaptureMode

logger = logging.getLogger(__name__)

LOOPBACK_SUFFIX = " [Loopback]"


@dataclass(frozen=True)
class DeviceInfo:
    """Concrete input device handle."""

    index: int
    name: str
    sample_rate: int
    channels: int
    is_loopback: bool = False

    @classmethod
    def from_pyaudio(cls, info: dict, is_loopback: bool = False) -> "DeviceInfo":
        return cls(
            index=int(info["index"]),
            name=str(info["name"]),
            sample_rate=int(info["defaultSampleRate"]),
            channels=max(1, int(info["maxInputChannels"])),
            is_loopback=is_loopback,
        )

    @property
    def display_name(self) -> str:
        return self.name.replace(LOOPBACK_SUFFIX, "")


def match_keywords(name: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match of any keyword against a device name."""
    lowered = name.lower()
    return any(keyword.lower() in lowered for keyword in keywords if keyword)


def select_device(mode: CaptureMode, keywords: Iterable[str] | None = None) -> DeviceInfo:
    """
    Choose the input device for a capture mode.

    Args:
        mode: CaptureMode.MICROPHONE or CaptureMode.LOOPBACK
        keywords: Preferred loopback device name fragments (loopback only)

    Returns:
        DeviceInfo for the chosen device

    Raises:
        DeviceNotFound: If no usable device exists
    """
    if mode == CaptureMode.LOOPBACK:
        preferred = tuple(keywords) if keywords is not None else LOOPBACK_KEYWORDS
        return _select_loopback_device(preferred)
    return _select_microphone_device()


def _select_microphone_device() -> DeviceInfo:
    """Host default input device."""
    try:
        import pyaudio
    except ImportError as e:
        raise DeviceNotFound("pyaudio not installed. Run: pip install pyaudio") from e

    p = pyaudio.PyAudio()
    try:
        info = p.get_default_input_device_info()
    except (OSError, LookupError) as e:
        raise DeviceNotFound(f"No default input device: {e}") from e
    finally:
        p.terminate()

    device = DeviceInfo.from_pyaudio(info)
    logger.info(f"Microphone: {device.name} ({device.sample_rate}Hz, {device.channels}ch)")
    return device


def _select_loopback_device(keywords: tuple[str, ...]) -> DeviceInfo:
    """Keyword-matched loopback endpoint, else the default output's loopback."""
    try:
        import pyaudiowpatch as pyaudio
    except ImportError as e:
        raise DeviceNotFound("pyaudiowpatch not installed. Run: pip install pyaudiowpatch") from e

    p = pyaudio.PyAudio()
    try:
        loopbacks = list(p.get_loopback_device_info_generator())

        for info in loopbacks:
            if match_keywords(info["name"], keywords):
                device = DeviceInfo.from_pyaudio(info, is_loopback=True)
                logger.info(f"System audio (keyword match): {device.display_name}")
                return device

        default_name = _default_output_name(p, pyaudio)
        if default_name:
            for info in loopbacks:
                if default_name in info["name"]:
                    device = DeviceInfo.from_pyaudio(info, is_loopback=True)
                    logger.info(f"System audio (default output): {device.display_name}")
                    return device
    finally:
        p.terminate()

    raise DeviceNotFound("No loopback device found for any output device")


def _default_output_name(p, pyaudio) -> str | None:
    """Name of the host default output device, or None if there is none."""
    try:
        wasapi_info = p.get_host_api_info_by_type(pyaudio.paWASAPI)
        default_output = p.get_device_info_by_index(wasapi_info["defaultOutputDevice"])
    except (OSError, LookupError) as e:
        logger.debug(f"No default output device: {e}")
        return None
    return default_output["name"]


def list_devices(keywords: Iterable[str] | None = None):
    """List microphone and loopback devices for the --list-devices flag."""
    keywords = tuple(keywords) if keywords is not None else LOOPBACK_KEYWORDS

    print("\n" + "=" * 65)
    print("MICROPHONE DEVICES")
    print("=" * 65)

    _list_microphone_devices()

    print("\n" + "=" * 65)
    print("SYSTEM AUDIO DEVICES (--system-audio)")
    print("=" * 65)

    _list_loopback_devices(keywords)


def _list_microphone_devices():
    """List available microphone input devices."""
    try:
        import pyaudio

        p = pyaudio.PyAudio()
        try:
            try:
                default_index = p.get_default_input_device_info()["index"]
            except (OSError, LookupError):
                default_index = None

            for i in range(p.get_device_count()):
                info = p.get_device_info_by_index(i)
                if info["maxInputChannels"] > 0:
                    rate = int(info["defaultSampleRate"])
                    marker = " * DEFAULT" if i == default_index else ""
                    print(f"  [{i:2d}] {info['name']} ({rate}Hz){marker}")
        finally:
            p.terminate()
    except ImportError:
        print("  (pyaudio not installed)")
    except Exception as e:
        print(f"  Error listing microphones: {e}")


def _list_loopback_devices(keywords: tuple[str, ...]):
    """List WASAPI loopback devices, marking keyword matches and the default."""
    try:
        import pyaudiowpatch as pyaudio

        p = pyaudio.PyAudio()
        try:
            default_name = _default_output_name(p, pyaudio) or ""
            for dev in p.get_loopback_device_info_generator():
                name = dev["name"].replace(LOOPBACK_SUFFIX, "")
                rate = int(dev["defaultSampleRate"])
                marker = ""
                if match_keywords(dev["name"], keywords):
                    marker = " * PREFERRED"
                elif default_name and default_name in dev["name"]:
                    marker = " * DEFAULT"
                print(f"  [{dev['index']:2d}] {name} ({rate}Hz){marker}")
        finally:
            p.terminate()
    except ImportError:
        print("  (pyaudiowpatch not installed - system audio capture unavailable)")
    except Exception as e:
        print(f"  Error listing loopback devices: {e}")
