from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
import logging
from pathlib import Path
from typing import Mapping

from video_lyrics.i18n import t
from video_lyrics.mpris.errors import PlayerUnavailable
from video_lyrics.playback.state import MediaSurface, PlaybackMachine
from video_lyrics.session.orchestrator import (
    IngestionOrchestrator,
    MediaRef,
    SessionState,
    SessionStatus,
)
from video_lyrics.sources.base import TranscriptSource
from video_lyrics.sync.indexer import LineStatus, highlight
from video_lyrics.sync.scroll import LayoutQuery, ScrollCenterController, ScrollSurface
from video_lyrics.sync.tracker import LineTracker
from video_lyrics.transcript.model import Transcript

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PresentationState:
    status: SessionStatus
    error: str | None = None
    current_time: float = 0.0
    active_line_id: str | None = None
    line_status: Mapping[str, LineStatus] = field(default_factory=dict)
    active_words: Mapping[str, frozenset[int]] = field(default_factory=dict)
    scroll_target: float | None = None
    ended: bool = False
    controls_visible: bool = True
    replay_visible: bool = False
    transcript: Transcript | None = None
    media: MediaRef | None = None


class LyricsController:
    """
    Owns the session state, the playback clock and the ended flag.

    Media signals are handled synchronously, one at a time; the ingestion
    task is the only thing that suspends.
    """

    def __init__(
        self,
        source: TranscriptSource,
        media: MediaSurface,
        *,
        layout: LayoutQuery | None = None,
        scroll: ScrollSurface | None = None,
    ):
        self.media = media
        self.playback = PlaybackMachine()
        self.session = IngestionOrchestrator(source, on_reset=self._on_reset, on_change=self._on_session)
        self.scroller = ScrollCenterController(layout, scroll) if layout is not None and scroll is not None else None
        self.tracker: LineTracker | None = None

    # session

    def select(self, path: Path, mime_type: str | None = None) -> asyncio.Task[None]:
        task = self.session.select(path, mime_type)
        media = self.session.state.media
        if media is not None:
            # playback doesn't wait for the transcript
            try:
                self.media.open(media.uri)
            except PlayerUnavailable as e:
                logger.warning("Player could not open %s: %s", media.uri, e)
                self.session.fail(t("load_failed"))
        return task

    def _on_reset(self) -> None:
        self.playback.reset()
        self.tracker = None
        if self.scroller is not None:
            self.scroller.reset()

    def _on_session(self, state: SessionState) -> None:
        if state.status is SessionStatus.READY and state.transcript is not None:
            self.tracker = LineTracker.from_transcript(state.transcript)
            # the clock may have run while transcribing
            self._track(self.playback.clock)
        else:
            self.tracker = None

    # media signals

    def on_time_update(self, t: float) -> None:
        self.playback.on_time_update(t)
        self._track(t)

    def on_played(self) -> None:
        self.playback.on_played()

    def on_ended(self) -> None:
        self.playback.on_ended()

    # user actions

    def replay(self) -> None:
        self.playback.replay(self.media)
        self._track(0.0)

    def seek(self, t: float) -> bool:
        return self.playback.seek(t, self.media)

    def relayout(self) -> float | None:
        if self.scroller is None:
            return None
        return self.scroller.relayout()

    def _track(self, t: float) -> None:
        if self.tracker is None:
            return
        if self.tracker.update(t) and self.scroller is not None:
            # scroll reacts to line changes, not to every tick
            self.scroller.follow(self.tracker.last_id)

    # presentation

    def view(self) -> PresentationState:
        state = self.session.state
        pb = self.playback
        base = PresentationState(
            status=state.status,
            error=state.error,
            current_time=pb.clock,
            ended=pb.ended,
            controls_visible=pb.controls_visible,
            replay_visible=pb.replay_visible,
            media=state.media,
        )
        if state.status is not SessionStatus.READY or state.transcript is None or self.tracker is None:
            return base

        hl = highlight(pb.clock, state.transcript, self.tracker.current_id(pb.clock))
        return replace(
            base,
            active_line_id=hl.active_line_id,
            line_status=hl.statuses,
            active_words=hl.words,
            scroll_target=(
                self.scroller.last_target
                if self.scroller is not None and hl.active_line_id is not None
                else None
            ),
            transcript=state.transcript,
        )
