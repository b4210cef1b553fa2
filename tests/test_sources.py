from __future__ import annotations

import json

import pytest

from video_lyrics.config import load_config
from video_lyrics.sources.base import TranscriptionError
from video_lyrics.sources.factory import build_source
from video_lyrics.sources.file import JsonFileSource
from video_lyrics.sources.gemini import GeminiSource


def test_json_file_source(tmp_path):
    path = tmp_path / "t.json"
    path.write_text(json.dumps({"subtitles": [{"id": "1", "start_time": 0, "end_time": 1}]}), encoding="utf-8")
    doc = JsonFileSource(path).transcribe("ignored", "video/mp4")
    assert doc.lines[0].id == "1"


@pytest.mark.parametrize("content", [None, "{bad json"])
def test_json_file_source_failures(tmp_path, content):
    path = tmp_path / "t.json"
    if content is not None:
        path.write_text(content, encoding="utf-8")
    with pytest.raises(TranscriptionError):
        JsonFileSource(path).transcribe("ignored", "video/mp4")


def test_build_source(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("VIDEO_LYRICS_GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    cfg = load_config()
    assert isinstance(build_source(cfg, tmp_path / "t.json"), JsonFileSource)
    with pytest.raises(ValueError):
        build_source(cfg)

    monkeypatch.setenv("GEMINI_API_KEY", "k")
    src = build_source(load_config())
    assert isinstance(src, GeminiSource)
    assert src.target_language == "Vietnamese"
