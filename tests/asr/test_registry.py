"""Tests for the backend registry."""

from unittest.mock import patch

import pytest

from subwave.asr.base import BatchBackend
from subwave.asr.registry import BACKEND_CLASSES, create_backend, register_backend
from subwave.asr.vosk import VoskBackend
from subwave.asr.whisper import WhisperBackend
from subwave.config.backends import BACKENDS


class EchoBackend(BatchBackend):
    def __init__(self, model_path=None):
        super().__init__(model_path)

    def transcribe_segments(self, chunk):
        return [f"{len(chunk)} samples"]


@pytest.fixture
def clean_registry():
    with patch.dict(BACKEND_CLASSES), patch.dict(BACKENDS):
        yield


class TestRegistry:
    """Tests for create_backend and register_backend."""

    def test_builtin_backends(self):
        assert BACKEND_CLASSES["whisper"] is WhisperBackend
        assert BACKEND_CLASSES["vosk"] is VoskBackend

    def test_unknown_backend(self):
        with pytest.raises(KeyError, match="Unknown backend"):
            create_backend("parakeet")

    def test_create_passes_model_path(self, clean_registry):
        """create_backend forwards the model path to the class."""
        with patch.object(VoskBackend, "__init__", return_value=None) as init:
            backend = create_backend("vosk", model_path="/models/v")
        assert isinstance(backend, VoskBackend)
        init.assert_called_once_with(model_path="/models/v")

    def test_register_new_backend(self, clean_registry):
        """A new backend with its own config is usable by name."""
        config = dict(BACKENDS["whisper"], name="Echo")
        register_backend("echo", EchoBackend, config)

        backend = create_backend("echo")
        assert isinstance(backend, EchoBackend)
        assert backend.name == "Echo"
        assert backend.process_chunk([0.0] * 5) == "5 samples"

    def test_register_without_config_requires_entry(self, clean_registry):
        """Registering a name with no backend config fails."""
        with pytest.raises(KeyError):
            register_backend("echo", EchoBackend)
