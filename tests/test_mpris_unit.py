from __future__ import annotations

import types

import pytest

pytest.importorskip("dbus")

import video_lyrics.mpris.client as mpris_client  # noqa: E402
from video_lyrics.mpris.client import MprisClient  # noqa: E402
from video_lyrics.mpris.errors import NoPlayersFound  # noqa: E402


class _FakeDbusException(Exception):
    pass


def test_list_players_returns_empty_on_dbus_error(monkeypatch):
    def _raise_session_bus():
        raise _FakeDbusException("no session bus")

    # Patch the imported `dbus` module inside `video_lyrics.mpris.client`
    monkeypatch.setattr(
        mpris_client,
        "dbus",
        types.SimpleNamespace(SessionBus=_raise_session_bus, DBusException=_FakeDbusException),
    )

    assert MprisClient.list_players() == []


def test_pick_player_without_players(monkeypatch):
    monkeypatch.setattr(MprisClient, "list_players", staticmethod(lambda: []))
    with pytest.raises(NoPlayersFound):
        MprisClient.pick_player()


def test_list_players_filters_mpris_names(monkeypatch):
    bus = types.SimpleNamespace(list_names=lambda: ["org.mpris.MediaPlayer2.mpv", "org.freedesktop.Notifications"])
    monkeypatch.setattr(
        mpris_client,
        "dbus",
        types.SimpleNamespace(SessionBus=lambda: bus, DBusException=_FakeDbusException),
    )
    assert MprisClient.list_players() == ["org.mpris.MediaPlayer2.mpv"]
