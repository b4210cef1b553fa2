from __future__ import annotations

import logging
from typing import Any

import dbus

from .errors import NoPlayersFound, PlayerUnavailable

logger = logging.getLogger(__name__)

PLAYER_IFACE = "org.mpris.MediaPlayer2.Player"
OBJECT_PATH = "/org/mpris/MediaPlayer2"


def _to_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return ""


class MprisClient:
    def __init__(self, service_name: str):
        self.service_name = service_name
        self._bus = dbus.SessionBus()
        self._obj = self._bus.get_object(service_name, OBJECT_PATH)
        self._props = dbus.Interface(self._obj, "org.freedesktop.DBus.Properties")
        self._player = dbus.Interface(self._obj, PLAYER_IFACE)

    @staticmethod
    def list_players() -> list[str]:
        try:
            bus = dbus.SessionBus()
            return [s for s in bus.list_names() if s.startswith("org.mpris.MediaPlayer2.")]
        except dbus.DBusException as e:
            # In restricted environments (tests/sandbox/CI), connecting to the
            # session bus can fail (e.g. AccessDenied). Treat as "no players".
            logger.debug("Unable to connect to D-Bus session bus: %s", e)
            return []

    @staticmethod
    def pick_player(preferred: str | None = None) -> "MprisClient":
        players = MprisClient.list_players()
        if not players:
            raise NoPlayersFound("No active MPRIS players")

        if preferred:
            # allow passing short name like "mpv"
            for s in players:
                if s == preferred or s.endswith("." + preferred):
                    return MprisClient(s)
            logger.warning("Preferred player '%s' not found, falling back", preferred)

        return MprisClient(players[0])

    def _get(self, prop: str) -> Any:
        try:
            return self._props.Get(PLAYER_IFACE, prop)
        except dbus.DBusException as e:
            raise PlayerUnavailable(str(e)) from e

    def playback_status(self) -> str:
        return _to_str(self._get("PlaybackStatus"))

    def metadata(self) -> dict[str, Any]:
        # dbus.Dictionary acts like dict
        return dict(self._get("Metadata"))

    def position_s(self) -> float:
        """
        MPRIS Position is microseconds.
        """
        return int(self._get("Position")) / 1_000_000

    def length_s(self) -> float | None:
        length = self.metadata().get("mpris:length")
        if length is None:
            return None
        return int(length) / 1_000_000

    def set_position(self, seconds: float) -> None:
        pos_us = max(int(seconds * 1_000_000), 0)
        try:
            track_id = self.metadata().get("mpris:trackid")
            if track_id:
                self._player.SetPosition(dbus.ObjectPath(track_id), dbus.Int64(pos_us))
            else:
                # no track id: relative seek from where we are
                current = int(self._get("Position"))
                self._player.Seek(dbus.Int64(pos_us - current))
        except dbus.DBusException as e:
            raise PlayerUnavailable(str(e)) from e

    def play(self) -> None:
        try:
            self._player.Play()
        except dbus.DBusException as e:
            raise PlayerUnavailable(str(e)) from e

    def open_uri(self, uri: str) -> None:
        try:
            self._player.OpenUri(uri)
        except dbus.DBusException as e:
            raise PlayerUnavailable(str(e)) from e
