from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class MediaSurface(Protocol):
    def open(self, uri: str) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def play(self) -> None: ...


class PlaybackState(str, Enum):
    PLAYING_OR_PAUSED = "playing_or_paused"
    ENDED = "ended"


@dataclass(slots=True)
class PlaybackMachine:
    """
    Ended/replay bookkeeping plus the last playback clock value.

    Native transport controls are shown only while not ended; the replay
    affordance replaces them in ENDED.
    """

    state: PlaybackState = PlaybackState.PLAYING_OR_PAUSED
    clock: float = 0.0

    @property
    def ended(self) -> bool:
        return self.state is PlaybackState.ENDED

    @property
    def controls_visible(self) -> bool:
        return self.state is PlaybackState.PLAYING_OR_PAUSED

    @property
    def replay_visible(self) -> bool:
        return self.state is PlaybackState.ENDED

    def on_time_update(self, t: float) -> None:
        prev = self.clock
        self.clock = t
        # only a forward move leaves ENDED; a repeated final tick doesn't
        if self.state is PlaybackState.ENDED and t > prev:
            logger.debug("time advanced %.3f -> %.3f, leaving ENDED", prev, t)
            self.state = PlaybackState.PLAYING_OR_PAUSED

    def on_played(self) -> None:
        self.state = PlaybackState.PLAYING_OR_PAUSED

    def on_ended(self) -> None:
        self.state = PlaybackState.ENDED

    def replay(self, media: MediaSurface) -> None:
        media.seek(0.0)
        media.play()
        self.clock = 0.0
        self.state = PlaybackState.PLAYING_OR_PAUSED

    def seek(self, t: float, media: MediaSurface) -> bool:
        if self.state is PlaybackState.ENDED:
            logger.debug("seek to %.3f refused while ended", t)
            return False
        media.seek(t)
        return True

    def reset(self) -> None:
        self.clock = 0.0
        self.state = PlaybackState.PLAYING_OR_PAUSED
