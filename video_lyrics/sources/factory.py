from __future__ import annotations

import logging
from pathlib import Path

from video_lyrics.config import AppConfig

from .base import TranscriptSource
from .file import JsonFileSource
from .gemini import GeminiSource

logger = logging.getLogger(__name__)


def build_source(cfg: AppConfig, transcript_path: Path | None = None) -> TranscriptSource:
    """
    A transcript file wins over the API; without either there is nothing to ask.
    Raises ValueError when no API key is configured.
    """
    if transcript_path is not None:
        logger.info("Using transcript file %s", transcript_path)
        return JsonFileSource(transcript_path)
    if not cfg.gemini_api_key:
        raise ValueError("No Gemini API key configured")
    return GeminiSource(
        api_key=cfg.gemini_api_key,
        model=cfg.gemini_model,
        target_language=cfg.target_language,
        max_retries=cfg.api_max_retries,
        backoff_base_s=cfg.api_backoff_base_s,
        timeout_s=cfg.api_timeout_s,
    )
