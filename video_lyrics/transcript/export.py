from __future__ import annotations

import json

from .model import Transcript


def export_json(doc: Transcript) -> str:
    return json.dumps(
        {
            "title": doc.title,
            "artist": doc.artist,
            "subtitles": [
                {
                    "id": line.id,
                    "start_time": line.start_time,
                    "end_time": line.end_time,
                    "word_level_timings": [
                        {"word": w.text, "start_time": w.start_time, "end_time": w.end_time}
                        for w in line.original_words
                    ],
                    "translation": line.translation,
                    "phonetic": line.phonetic,
                }
                for line in doc.lines
            ],
        },
        ensure_ascii=False,
        indent=2,
    )


def _ms(seconds: float) -> int:
    return int(round(seconds * 1000))


def _fmt_lrc_time(seconds: float) -> str:
    m, rem = divmod(_ms(seconds), 60_000)
    s, ms2 = divmod(rem, 1_000)
    # keep 2 decimals for compatibility
    return f"{m:02d}:{s:02d}.{ms2 // 10:02d}"


def export_lrc(doc: Transcript, include_tags: bool = True) -> str:
    out: list[str] = []
    if include_tags:
        if doc.artist:
            out.append(f"[ar:{doc.artist}]")
        if doc.title:
            out.append(f"[ti:{doc.title}]")

    for line in doc.lines:
        out.append(f"[{_fmt_lrc_time(line.start_time)}]{line.text}")
    return "\n".join(out) + ("\n" if out else "")


def _fmt_srt_time(seconds: float) -> str:
    # HH:MM:SS,mmm
    h, rem = divmod(_ms(seconds), 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms2 = divmod(rem, 1_000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms2:03d}"


def export_srt(doc: Transcript, include_translation: bool = True) -> str:
    """
    One cue per line, using the line's own interval.
    Zero-length lines get 1ms so players don't drop them.
    """
    if not doc.lines:
        return ""
    out: list[str] = []
    for i, line in enumerate(doc.lines, start=1):
        end = max(line.end_time, line.start_time + 0.001)
        out.append(str(i))
        out.append(f"{_fmt_srt_time(line.start_time)} --> {_fmt_srt_time(end)}")
        out.append(line.text)
        if include_translation and line.translation:
            out.append(line.translation)
        out.append("")
    return "\n".join(out)
