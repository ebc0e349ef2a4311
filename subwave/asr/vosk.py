"""Vosk streaming backend.

A Kaldi recognizer keeps decoding state across chunks. Each call returns the
final text when Vosk detects an endpoint (pause), otherwise the running
partial hypothesis for the current utterance.
"""

import json
import logging

import numpy as np

from subwave.audio.utils import float_to_pcm16
from subwave.core.errors import ModelLoadError

from .base import StreamingBackend

logger = logging.getLogger(__name__)


class VoskBackend(StreamingBackend):
    """Streaming recognizer fed 16-bit PCM."""

    backend_name = "vosk"

    def __init__(self, model_path: str | None = None):
        super().__init__(model_path)
        self.model = None
        self.recognizer = None
        self._load()
        self.reset()

    def _load(self):
        logger.info(f"Loading Vosk model from {self.model_path}...")
        try:
            from vosk import Model

            self.model = Model(self.model_path)
        except Exception as e:
            logger.error(f"Failed to load Vosk model: {e}")
            raise ModelLoadError(f"Cannot load Vosk model from {self.model_path}: {e}") from e
        logger.info("Vosk model loaded")

    def reset(self) -> None:
        from vosk import KaldiRecognizer

        self.recognizer = KaldiRecognizer(self.model, self.sample_rate)
        self.recognizer.SetMaxAlternatives(0)
        self.last_is_final = False

    def process_chunk(self, chunk: np.ndarray | bytes) -> str:
        if isinstance(chunk, np.ndarray):
            chunk = float_to_pcm16(chunk).tobytes()

        if self.recognizer.AcceptWaveform(chunk):
            # Natural endpoint (pause detected)
            result = json.loads(self.recognizer.Result())
            self.last_is_final = True
            return result.get("text", "").strip()

        partial = json.loads(self.recognizer.PartialResult())
        self.last_is_final = False
        return partial.get("partial", "").strip()
