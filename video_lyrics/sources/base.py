from __future__ import annotations

from video_lyrics.transcript.model import Transcript


class TranscriptionError(RuntimeError):
    pass


class TranscriptSource:
    name: str

    def transcribe(self, payload_b64: str, mime_type: str) -> Transcript:
        """Turn base64 media content into a transcript or raise TranscriptionError."""
        raise NotImplementedError
