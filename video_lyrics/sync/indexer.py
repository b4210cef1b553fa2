from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence

from video_lyrics.transcript.model import LyricLine, Transcript

_NO_WORDS: frozenset[int] = frozenset()


class LineStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    PASSED = "passed"


def active_line(time: float, lines: Sequence[LyricLine], stop: int | None = None) -> str | None:
    """
    First line (in sequence order) whose [start_time, end_time] contains `time`.
    Both bounds inclusive. Lines at index >= `stop` are not considered.
    """
    end = len(lines) if stop is None else min(stop, len(lines))
    for i in range(end):
        line = lines[i]
        if line.start_time <= time <= line.end_time:
            return line.id
    return None


def active_words(time: float, line: LyricLine) -> frozenset[int]:
    # independent of the line's own interval
    hits = [i for i, w in enumerate(line.original_words) if w.start_time <= time <= w.end_time]
    return frozenset(hits) if hits else _NO_WORDS


def line_status(time: float, line: LyricLine, active_id: str | None) -> LineStatus:
    if line.id == active_id:
        return LineStatus.ACTIVE
    if time > line.end_time:
        return LineStatus.PASSED
    return LineStatus.UPCOMING


@dataclass(frozen=True, slots=True)
class Highlight:
    time: float
    active_line_id: str | None
    statuses: Mapping[str, LineStatus]
    # only lines with at least one active word
    words: Mapping[str, frozenset[int]]

    def words_for(self, line_id: str) -> frozenset[int]:
        return self.words.get(line_id, _NO_WORDS)


_UNSET = object()


def highlight(time: float, transcript: Transcript, active_id: object = _UNSET) -> Highlight:
    """
    Full highlight snapshot for one playback time.

    Pass `active_id` when it is already known (e.g. from a LineTracker)
    to skip the first-match scan.
    """
    lines = transcript.lines
    current: str | None = active_line(time, lines) if active_id is _UNSET else active_id  # type: ignore[assignment]
    statuses: dict[str, LineStatus] = {}
    words: dict[str, frozenset[int]] = {}
    for line in lines:
        statuses[line.id] = line_status(time, line, current)
        hit = active_words(time, line)
        if hit:
            words[line.id] = hit
    return Highlight(time=time, active_line_id=current, statuses=statuses, words=words)
