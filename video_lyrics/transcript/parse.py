from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import re
from typing import Any, Mapping

from .model import LyricLine, Transcript, Word

logger = logging.getLogger(__name__)

_TS_RE = re.compile(r"^(\d{1,3}):(\d{2})(?:\.(\d{1,3}))?$")  # mm:ss / mm:ss.xx / mm:ss.xxx

_LINES_KEYS = ("subtitles", "lines")
_WORDS_KEYS = ("word_level_timings", "original_words", "words")
_WORD_TEXT_KEYS = ("word", "text")
_TRANSLATION_KEYS = ("translation", "vietnamese_translation")
_PHONETIC_KEYS = ("phonetic", "phonetic_vietnamese")


class TranscriptParseError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class TranscriptParseStats:
    lines_total: int
    words_total: int
    intervals_clamped: int
    ids_generated: int


def _first(obj: Mapping[str, Any], keys: tuple[str, ...], default: Any = None) -> Any:
    for k in keys:
        if k in obj and obj[k] is not None:
            return obj[k]
    return default


def parse_time(value: Any) -> float:
    """
    Seconds as int/float, numeric string, or "mm:ss[.xx]".
    Negative values are clamped to 0.
    """
    if isinstance(value, bool):
        raise TranscriptParseError(f"Invalid time: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        raw = value.strip()
        m = _TS_RE.match(raw)
        if m:
            mm, ss, frac = int(m.group(1)), int(m.group(2)), m.group(3)
            if not (0 <= ss <= 59):
                raise TranscriptParseError(f"Invalid seconds: {ss}")
            # "2" -> 0.2, "23" -> 0.23, "234" -> 0.234
            ms = int(frac.ljust(3, "0")[:3]) if frac else 0
            seconds = mm * 60 + ss + ms / 1000
        else:
            try:
                seconds = float(raw)
            except ValueError as e:
                raise TranscriptParseError(f"Invalid time: {value!r}") from e
    else:
        raise TranscriptParseError(f"Invalid time: {value!r}")
    if seconds != seconds or seconds in (float("inf"), float("-inf")):
        raise TranscriptParseError(f"Invalid time: {value!r}")
    return max(seconds, 0.0)


def _interval(obj: Mapping[str, Any], what: str) -> tuple[float, float, bool]:
    if "start_time" not in obj or "end_time" not in obj:
        raise TranscriptParseError(f"{what}: missing start_time/end_time")
    start = parse_time(obj["start_time"])
    end = parse_time(obj["end_time"])
    if end < start:
        logger.debug("%s: end_time %.3f < start_time %.3f, clamping", what, end, start)
        return start, start, True
    return start, end, False


def parse_transcript_with_stats(data: str | bytes | Mapping[str, Any]) -> tuple[Transcript, TranscriptParseStats]:
    """
    Supported:
    - a JSON document or an already decoded mapping
    - `subtitles` or `lines` at the top level, optional `title`/`artist`
    - per line: id, start_time, end_time, word_level_timings / original_words / words,
      translation / vietnamese_translation, phonetic / phonetic_vietnamese
    - per word: word / text, start_time, end_time

    Result is normalized:
    - delivery order kept (no sorting)
    - negative times clamped to 0
    - inverted intervals clamped to zero length
    - missing line ids replaced by the 1-based position
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise TranscriptParseError(f"Invalid JSON: {e}") from e
    if not isinstance(data, Mapping):
        raise TranscriptParseError("Transcript must be a JSON object")

    raw_lines = _first(data, _LINES_KEYS)
    if not isinstance(raw_lines, list):
        raise TranscriptParseError("Transcript has no line list ('subtitles' or 'lines')")

    lines: list[LyricLine] = []
    seen: set[str] = set()
    words_total = 0
    clamped = 0
    generated = 0

    for pos, raw in enumerate(raw_lines, start=1):
        if not isinstance(raw, Mapping):
            raise TranscriptParseError(f"Line #{pos} is not an object")

        line_id = raw.get("id")
        if line_id is None or str(line_id).strip() == "":
            line_id = str(pos)
            generated += 1
        line_id = str(line_id)
        if line_id in seen:
            raise TranscriptParseError(f"Duplicate line id: {line_id!r}")
        seen.add(line_id)

        start, end, fixed = _interval(raw, f"Line {line_id!r}")
        clamped += fixed

        raw_words = _first(raw, _WORDS_KEYS, [])
        if not isinstance(raw_words, list):
            raise TranscriptParseError(f"Line {line_id!r}: words must be a list")

        words: list[Word] = []
        for wpos, rw in enumerate(raw_words, start=1):
            if not isinstance(rw, Mapping):
                raise TranscriptParseError(f"Line {line_id!r}: word #{wpos} is not an object")
            ws, we, wfixed = _interval(rw, f"Line {line_id!r} word #{wpos}")
            clamped += wfixed
            words.append(Word(text=str(_first(rw, _WORD_TEXT_KEYS, "")), start_time=ws, end_time=we))
        words_total += len(words)

        lines.append(
            LyricLine(
                id=line_id,
                start_time=start,
                end_time=end,
                original_words=tuple(words),
                translation=str(_first(raw, _TRANSLATION_KEYS, "")).strip(),
                phonetic=str(_first(raw, _PHONETIC_KEYS, "")).strip(),
            )
        )

    doc = Transcript(
        lines=tuple(lines),
        title=str(data.get("title") or "").strip(),
        artist=str(data.get("artist") or "").strip(),
    )
    stats = TranscriptParseStats(
        lines_total=len(lines),
        words_total=words_total,
        intervals_clamped=clamped,
        ids_generated=generated,
    )
    return doc, stats


def parse_transcript(data: str | bytes | Mapping[str, Any]) -> Transcript:
    doc, _stats = parse_transcript_with_stats(data)
    return doc
