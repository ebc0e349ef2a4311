"""Whisper batch backend.

Loads a Whisper checkpoint from a local directory into a Hugging Face
``transformers`` automatic-speech-recognition pipeline once, then decodes
every chunk from scratch.
"""

import logging

import numpy as np

from subwave.core.errors import ModelLoadError

from .base import BatchBackend

logger = logging.getLogger(__name__)


class WhisperBackend(BatchBackend):
    """Context-free Whisper decoder."""

    backend_name = "whisper"

    def __init__(self, model_path: str | None = None, device: str | None = None):
        """
        Load the model.

        Args:
            model_path: Directory with a pre-downloaded Whisper checkpoint
            device: "cuda" or "cpu" (auto-detected if None)

        Raises:
            ModelLoadError: If the checkpoint cannot be loaded
        """
        super().__init__(model_path)
        self.device = device
        self.pipe = None
        self._load()

    def _load(self):
        logger.info(f"Loading Whisper model from {self.model_path}...")
        try:
            import torch
            from transformers import AutoModelForSpeechSeq2Seq, AutoProcessor, pipeline

            device = self.device or ("cuda" if torch.cuda.is_available() else "cpu")
            torch_dtype = torch.float16 if device == "cuda" else torch.float32

            model = AutoModelForSpeechSeq2Seq.from_pretrained(
                self.model_path,
                torch_dtype=torch_dtype,
                low_cpu_mem_usage=True,
                local_files_only=True,  # Only use files on disk
            )
            model.to(device)
            processor = AutoProcessor.from_pretrained(self.model_path, local_files_only=True)

            self.pipe = pipeline(
                "automatic-speech-recognition",
                model=model,
                tokenizer=processor.tokenizer,
                feature_extractor=processor.feature_extractor,
                torch_dtype=torch_dtype,
                device=device,
            )
        except Exception as e:
            logger.error(f"Failed to load Whisper model: {e}")
            raise ModelLoadError(f"Cannot load Whisper model from {self.model_path}: {e}") from e

        self.device = device
        logger.info(f"Whisper model loaded on {device}")

    def transcribe_segments(self, chunk: np.ndarray | bytes) -> list[str]:
        """Decode the whole chunk; one string per timestamped segment."""
        audio = np.asarray(chunk, dtype=np.float32)
        result = self.pipe(
            {"raw": audio, "sampling_rate": self.sample_rate},
            return_timestamps=True,
        )

        chunks = result.get("chunks") or []
        if chunks:
            return [segment.get("text", "") for segment in chunks]
        text = result.get("text", "")
        return [text] if text else []
