from __future__ import annotations

import logging
from pathlib import Path

from video_lyrics.transcript.model import Transcript
from video_lyrics.transcript.parse import TranscriptParseError, parse_transcript

from .base import TranscriptionError, TranscriptSource

logger = logging.getLogger(__name__)


class JsonFileSource(TranscriptSource):
    """Serves a transcript prepared earlier (e.g. by `video-lyrics transcribe`)."""

    name = "file"

    def __init__(self, path: Path):
        self.path = path

    def transcribe(self, payload_b64: str, mime_type: str) -> Transcript:
        try:
            text = self.path.read_text(encoding="utf-8")
            return parse_transcript(text)
        except (OSError, TranscriptParseError) as e:
            logger.warning("transcript file %s unusable: %s", self.path, e)
            raise TranscriptionError(str(e)) from e
