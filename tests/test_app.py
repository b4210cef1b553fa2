from __future__ import annotations

import asyncio

import pytest

pytest.importorskip("dbus")

from video_lyrics.app import dispatch, drain_keys, frame_key, handle_key  # noqa: E402
from video_lyrics.controller import LyricsController  # noqa: E402
from video_lyrics.mpris.errors import PlayerUnavailable  # noqa: E402
from video_lyrics.mpris.media import MediaSignal, MprisMedia, SignalKind  # noqa: E402
from video_lyrics.session.orchestrator import SessionStatus  # noqa: E402
from tests.mocks.media_mock import StaticSource, hello_world  # noqa: E402
from tests.mocks.mpris_mock import MockMprisClient  # noqa: E402


def _ready(tmp_path, client=None):
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"v")
    client = client or MockMprisClient(length_s=6.0)
    media = MprisMedia(client)
    ctl = LyricsController(StaticSource(hello_world()), media)

    async def scenario():
        await ctl.select(video)

    asyncio.run(scenario())
    return ctl, media, client


def test_dispatch_feeds_signals_in_order(tmp_path):
    ctl, _media, _client = _ready(tmp_path)
    dispatch(
        ctl,
        [
            MediaSignal(SignalKind.TIME, 5.9),
            MediaSignal(SignalKind.ENDED),
        ],
    )
    assert ctl.playback.clock == 5.9
    assert ctl.playback.ended

    dispatch(ctl, [MediaSignal(SignalKind.PLAYED), MediaSignal(SignalKind.TIME, 0.5)])
    assert not ctl.playback.ended
    assert ctl.view().active_line_id == "1"


def test_polled_player_drives_controller(tmp_path):
    ctl, media, client = _ready(tmp_path)
    assert client.commands[0][0] == "open_uri"

    dispatch(ctl, media.poll())
    client.advance(1.5)
    dispatch(ctl, media.poll())
    assert ctl.view().active_words["1"] == {1}

    client.advance(4.4)
    client.pause()
    dispatch(ctl, media.poll())
    assert ctl.view().replay_visible


def test_replay_key_only_when_ended(tmp_path):
    ctl, media, client = _ready(tmp_path)
    dispatch(ctl, media.poll())

    assert handle_key(ctl, "r") is True
    assert ("set_position", 0.0) not in client.commands

    ctl.on_ended()
    assert handle_key(ctl, "r") is True
    assert client.commands[-2:] == [("set_position", 0.0), ("play",)]
    assert not ctl.playback.ended


def test_quit_key():
    assert handle_key(None, "q") is False  # type: ignore[arg-type]


def test_frame_key_ignores_sub_second_clock(tmp_path):
    ctl, _media, _client = _ready(tmp_path)
    ctl.on_time_update(3.2)
    a = frame_key(ctl.view())
    ctl.on_time_update(3.7)
    b = frame_key(ctl.view())
    ctl.on_time_update(4.1)
    c = frame_key(ctl.view())
    assert a == b
    assert b != c


class _FlakyClient(MockMprisClient):
    """Answers polls but drops every command after the file is open."""

    def set_position(self, seconds: float) -> None:
        raise PlayerUnavailable("NoReply")


class _GoneClient(MockMprisClient):
    def open_uri(self, uri: str) -> None:
        raise PlayerUnavailable("ServiceUnknown")


def test_keys_survive_a_player_dropping_out(tmp_path):
    ctl, media, _client = _ready(tmp_path, _FlakyClient(length_s=6.0))
    dispatch(ctl, media.poll())
    ctl.on_ended()

    keys: asyncio.Queue[str] = asyncio.Queue()
    for key in "rr":
        keys.put_nowait(key)
    assert drain_keys(ctl, keys) is True
    assert keys.empty()
    assert ctl.playback.ended

    keys.put_nowait("q")
    keys.put_nowait("r")
    assert drain_keys(ctl, keys) is False


def test_player_that_cannot_open_shows_load_failure(tmp_path):
    ctl, _media, _client = _ready(tmp_path, _GoneClient())
    view = ctl.view()
    assert view.status is SessionStatus.FAILED
    assert view.transcript is None
