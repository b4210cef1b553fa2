from __future__ import annotations

import asyncio
import base64
from dataclasses import dataclass
from enum import Enum
import logging
import mimetypes
from pathlib import Path
from typing import Callable

from video_lyrics.i18n import t
from video_lyrics.sources.base import TranscriptSource
from video_lyrics.transcript.model import Transcript

logger = logging.getLogger(__name__)

DEFAULT_MIME = "video/mp4"


class SessionStatus(str, Enum):
    IDLE = "idle"
    ACQUIRING = "acquiring"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class MediaRef:
    """Locally playable reference to the selected file."""

    uri: str
    path: Path
    mime_type: str


@dataclass(frozen=True, slots=True)
class SessionState:
    status: SessionStatus = SessionStatus.IDLE
    transcript: Transcript | None = None
    error: str | None = None
    media: MediaRef | None = None


def make_media_ref(path: Path, mime_type: str | None = None) -> MediaRef:
    if mime_type is None:
        guessed, _enc = mimetypes.guess_type(path.name)
        mime_type = guessed or DEFAULT_MIME
    resolved = path.expanduser().resolve()
    return MediaRef(uri=resolved.as_uri(), path=resolved, mime_type=mime_type)


def encode_file(path: Path) -> str:
    return base64.b64encode(path.read_bytes()).decode("ascii")


class IngestionOrchestrator:
    """
    Idle -> Acquiring -> Ready | Failed; every selection goes back to Acquiring.

    A selection generation counter guards against stale results: a response
    whose generation is no longer current is dropped.
    """

    def __init__(
        self,
        source: TranscriptSource,
        *,
        on_reset: Callable[[], None] | None = None,
        on_change: Callable[[SessionState], None] | None = None,
    ):
        self.source = source
        self.on_reset = on_reset
        self.on_change = on_change
        self.generation = 0
        self.state = SessionState()
        self.task: asyncio.Task[None] | None = None

    def _set(self, state: SessionState) -> None:
        self.state = state
        logger.debug("session -> %s", state.status.value)
        if self.on_change is not None:
            self.on_change(state)

    def select(self, path: Path, mime_type: str | None = None) -> asyncio.Task[None]:
        """Must run inside the event loop; returns the ingestion task."""
        self.generation += 1
        generation = self.generation
        media = make_media_ref(path, mime_type)
        logger.info("Selected %s (%s), generation %s", media.path, media.mime_type, generation)

        self._set(SessionState(status=SessionStatus.ACQUIRING, media=media))
        if self.on_reset is not None:
            self.on_reset()

        self.task = asyncio.get_running_loop().create_task(self._ingest(generation, media))
        return self.task

    def fail(self, error: str) -> None:
        """Fail the current selection; its pending result will be dropped."""
        self.generation += 1
        self._set(SessionState(SessionStatus.FAILED, error=error, media=self.state.media))

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    async def _ingest(self, generation: int, media: MediaRef) -> None:
        try:
            payload = await asyncio.to_thread(encode_file, media.path)
        except OSError as e:
            logger.warning("Cannot read %s: %s", media.path, e)
            self._resolve(generation, SessionState(SessionStatus.FAILED, error=t("load_failed"), media=media))
            return

        try:
            transcript = await asyncio.to_thread(self.source.transcribe, payload, media.mime_type)
        except Exception as e:  # any collaborator failure is an ingestion failure
            logger.warning("Transcript source '%s' failed: %s", self.source.name, e)
            self._resolve(generation, SessionState(SessionStatus.FAILED, error=t("ingest_failed"), media=media))
            return

        logger.info("Transcript ready: %s lines", len(transcript.lines))
        self._resolve(generation, SessionState(SessionStatus.READY, transcript=transcript, media=media))

    def _resolve(self, generation: int, state: SessionState) -> None:
        if not self.is_current(generation):
            logger.debug(
                "Dropping %s result of generation %s (current %s)",
                state.status.value,
                generation,
                self.generation,
            )
            return
        self._set(state)
