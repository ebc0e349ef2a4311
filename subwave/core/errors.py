"""Exception types raised by the captioning pipeline."""


class SubWaveError(Exception):
    """Base class for all SubWave errors."""


class DeviceNotFound(SubWaveError):
    """No usable input (or loopback) device for the requested capture mode."""


class ModelLoadError(SubWaveError):
    """The acoustic model could not be loaded."""


class CaptureError(SubWaveError):
    """The capture stream could not be opened."""


class SessionStartError(SubWaveError):
    """A capture session failed to start; the controller stays idle."""
