import json

from video_lyrics.transcript.export import export_json, export_lrc, export_srt
from video_lyrics.transcript.model import LyricLine, Transcript, Word
from video_lyrics.transcript.parse import parse_transcript
from tests.mocks.media_mock import hello_world, three_lines


def test_export_srt_basic():
    srt = export_srt(hello_world())
    assert "00:00:00,000 --> 00:00:05,000" in srt
    assert "\nHello world\nXin chào thế giới\n" in srt


def test_export_srt_zero_length_line_gets_a_millisecond():
    doc = Transcript(lines=(LyricLine("1", 61.5, 61.5, (Word("hey", 61.5, 61.5),)),))
    assert "00:01:01,500 --> 00:01:01,501" in export_srt(doc)


def test_export_srt_empty():
    assert export_srt(Transcript(lines=())) == ""


def test_export_lrc_with_tags():
    lrc = export_lrc(three_lines())
    assert lrc.splitlines() == [
        "[ar:Band]",
        "[ti:Song]",
        "[00:00.00]one two",
        "[00:03.00]three",
        "[00:06.00]four",
    ]


def test_export_json_uses_canonical_keys():
    data = json.loads(export_json(hello_world()))
    line = data["subtitles"][0]
    assert line["word_level_timings"][0] == {"word": "Hello", "start_time": 0.0, "end_time": 1.0}
    assert line["translation"] == "Xin chào thế giới"
    assert parse_transcript(data) == hello_world()
