from __future__ import annotations

import json
import logging
import time
from typing import Any

import requests

from video_lyrics.transcript.model import Transcript
from video_lyrics.transcript.parse import TranscriptParseError, parse_transcript

from .base import TranscriptionError, TranscriptSource

logger = logging.getLogger(__name__)

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

PROMPT = """You are a lyrics transcription engine for music videos.
Listen to the sung vocals and return JSON only, no commentary.

For every sung line produce:
- "id": a unique string, "1", "2", ... in order of appearance
- "start_time" / "end_time": seconds from the start of the video, as numbers
- "word_level_timings": every word of the line in the original language,
  each with "word", "start_time", "end_time" in seconds
- "translation": the line translated into {language}
- "phonetic": how the original line sounds, written for a {language} speaker

Also fill "title" and "artist" when you can recognise the song, otherwise "".
Lines must be in order of start_time. Do not invent lines for instrumental parts."""

_WORD_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "word": {"type": "STRING"},
        "start_time": {"type": "NUMBER"},
        "end_time": {"type": "NUMBER"},
    },
    "required": ["word", "start_time", "end_time"],
}

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "artist": {"type": "STRING"},
        "subtitles": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING"},
                    "start_time": {"type": "NUMBER"},
                    "end_time": {"type": "NUMBER"},
                    "word_level_timings": {"type": "ARRAY", "items": _WORD_SCHEMA},
                    "translation": {"type": "STRING"},
                    "phonetic": {"type": "STRING"},
                },
                "required": ["id", "start_time", "end_time", "word_level_timings", "translation", "phonetic"],
            },
        },
    },
    "required": ["subtitles"],
}


class GeminiSource(TranscriptSource):
    name = "gemini"

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        target_language: str,
        max_retries: int,
        backoff_base_s: float,
        timeout_s: float | None = None,
    ):
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.api_key = api_key
        self.model = model
        self.target_language = target_language
        self.max_retries = max(max_retries, 1)
        self.backoff_base_s = backoff_base_s
        self.timeout_s = timeout_s

    def build_request(self, payload_b64: str, mime_type: str) -> dict[str, Any]:
        return {
            "contents": [
                {
                    "parts": [
                        {"inline_data": {"mime_type": mime_type, "data": payload_b64}},
                        {"text": PROMPT.format(language=self.target_language)},
                    ]
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    def transcribe(self, payload_b64: str, mime_type: str) -> Transcript:
        body = self.build_request(payload_b64, mime_type)
        url = API_URL.format(model=self.model)
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("gemini request to %s: %s", url, dump_request_preview(body))

        for attempt in range(1, self.max_retries + 1):
            try:
                r = requests.post(url, json=body, headers=headers, timeout=self.timeout_s)
                if 400 <= r.status_code < 500 and r.status_code != 429:
                    # bad request / key / payload: retrying won't help
                    raise TranscriptionError(f"Gemini rejected the request: HTTP {r.status_code}")
                r.raise_for_status()
                return self._parse_response(r.json())
            except requests.RequestException as e:
                logger.warning("gemini error (attempt %s/%s): %s", attempt, self.max_retries, e)
                if attempt == self.max_retries:
                    raise TranscriptionError(f"Gemini request failed: {e}") from e
                time.sleep(self.backoff_base_s * attempt)

        raise TranscriptionError("Gemini request failed")

    @staticmethod
    def _parse_response(data: Any) -> Transcript:
        try:
            candidates = data.get("candidates") or []
            parts = candidates[0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts)
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise TranscriptionError("Gemini returned no candidates") from e
        if not text.strip():
            raise TranscriptionError("Gemini returned an empty answer")
        try:
            return parse_transcript(_strip_fence(text))
        except TranscriptParseError as e:
            raise TranscriptionError(f"Gemini returned an unusable transcript: {e}") from e


def _strip_fence(text: str) -> str:
    # models sometimes wrap JSON in ```json fences despite responseMimeType
    s = text.strip()
    if s.startswith("```"):
        s = s.split("\n", 1)[1] if "\n" in s else ""
        if s.rstrip().endswith("```"):
            s = s.rstrip()[:-3]
    return s


def dump_request_preview(body: dict[str, Any]) -> str:
    """Request body with the media payload elided, for debug logs."""
    preview = json.loads(json.dumps(body))
    for part in preview["contents"][0]["parts"]:
        data = part.get("inline_data")
        if data:
            data["data"] = f"<{len(data['data'])} base64 chars>"
    return json.dumps(preview, ensure_ascii=False)
