from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Protocol

from .errors import MediaLoadFailed, PlayerUnavailable

logger = logging.getLogger(__name__)


class SignalKind(str, Enum):
    TIME = "time"
    PLAYED = "played"
    ENDED = "ended"


@dataclass(frozen=True, slots=True)
class MediaSignal:
    kind: SignalKind
    position_s: float | None = None


class PlayerClient(Protocol):
    def playback_status(self) -> str: ...

    def position_s(self) -> float: ...

    def length_s(self) -> float | None: ...

    def set_position(self, seconds: float) -> None: ...

    def play(self) -> None: ...

    def open_uri(self, uri: str) -> None: ...


class MprisMedia:
    """
    Media surface backed by an MPRIS player.

    MPRIS has no "ended" or "timeupdate" events, so `poll` turns the polled
    status/position into ordered signals: PLAYED on entering Playing, TIME on
    every poll, ENDED once when playback stops or parks at the end of the track.
    """

    def __init__(self, client: PlayerClient, *, end_tolerance_s: float = 0.25):
        self.client = client
        self.end_tolerance_s = end_tolerance_s
        self._last_status: str | None = None
        self._at_end = False

    def open(self, uri: str) -> None:
        logger.info("Opening %s in %s", uri, getattr(self.client, "service_name", "player"))
        self._last_status = None
        self._at_end = False
        try:
            self.client.open_uri(uri)
        except PlayerUnavailable as e:
            raise MediaLoadFailed(uri, str(e)) from e

    def seek(self, seconds: float) -> None:
        self.client.set_position(seconds)

    def play(self) -> None:
        self.client.play()

    def _reached_end(self, status: str, pos: float) -> bool:
        if status == "stopped" and self._last_status == "playing":
            return True
        if status == "playing":
            return False
        length = self.client.length_s()
        return length is not None and length > 0 and pos >= length - self.end_tolerance_s

    def poll(self) -> list[MediaSignal]:
        status = self.client.playback_status().lower()
        pos = self.client.position_s()
        out: list[MediaSignal] = []

        if status == "playing" and self._last_status != "playing":
            self._at_end = False
            out.append(MediaSignal(SignalKind.PLAYED))

        out.append(MediaSignal(SignalKind.TIME, pos))

        if not self._at_end and self._reached_end(status, pos):
            self._at_end = True
            out.append(MediaSignal(SignalKind.ENDED))

        self._last_status = status
        return out
