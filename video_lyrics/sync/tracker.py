from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from video_lyrics.transcript.model import LyricLine, Transcript

from .indexer import active_line


@dataclass(slots=True)
class LineTracker:
    """
    Active-line lookup for the per-tick path: bisect bounds the first-match
    scan when start times are ordered, and `update` reports changes only.
    """

    lines: tuple[LyricLine, ...]
    starts: list[float]
    ordered: bool
    last_id: str | None = None

    @classmethod
    def from_transcript(cls, transcript: Transcript) -> "LineTracker":
        return cls(
            lines=transcript.lines,
            starts=[line.start_time for line in transcript.lines],
            ordered=transcript.is_ordered,
        )

    def current_id(self, now: float) -> str | None:
        # lines starting after `now` can't contain it
        stop = bisect_right(self.starts, now) if self.ordered else len(self.lines)
        return active_line(now, self.lines, stop)

    def update(self, now: float) -> bool:
        i = self.current_id(now)
        if i != self.last_id:
            self.last_id = i
            return True
        return False

    def reset(self) -> None:
        self.last_id = None
