from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Word:
    text: str
    start_time: float
    end_time: float

    def __post_init__(self) -> None:
        if self.start_time > self.end_time:
            raise ValueError(f"Word {self.text!r}: start_time > end_time")


@dataclass(frozen=True, slots=True)
class LyricLine:
    id: str
    start_time: float
    end_time: float
    # word intervals may stick out of the line interval
    original_words: tuple[Word, ...] = ()
    translation: str = ""
    phonetic: str = ""

    def __post_init__(self) -> None:
        if self.start_time > self.end_time:
            raise ValueError(f"Line {self.id!r}: start_time > end_time")

    @property
    def text(self) -> str:
        return " ".join(w.text for w in self.original_words)


@dataclass(frozen=True, slots=True)
class Transcript:
    """
    Ordered lyric lines as delivered by the transcript source.

    Lines are never re-sorted; ids must be unique.
    """

    lines: tuple[LyricLine, ...]
    title: str = ""
    artist: str = ""

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for line in self.lines:
            if line.id in seen:
                raise ValueError(f"Duplicate line id: {line.id!r}")
            seen.add(line.id)

    def by_id(self, line_id: str | None) -> LyricLine | None:
        if line_id is None:
            return None
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    @property
    def is_ordered(self) -> bool:
        return all(a.start_time <= b.start_time for a, b in zip(self.lines, self.lines[1:]))

    @property
    def duration(self) -> float:
        return max((line.end_time for line in self.lines), default=0.0)

    @property
    def display(self) -> str:
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.title or self.artist or ""
