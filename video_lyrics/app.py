from __future__ import annotations

import asyncio
import contextlib
from dataclasses import replace
import logging
import signal
import sys
from pathlib import Path
from typing import Iterator

from video_lyrics.config import AppConfig
from video_lyrics.controller import LyricsController, PresentationState
from video_lyrics.mpris.client import MprisClient
from video_lyrics.mpris.errors import PlayerUnavailable
from video_lyrics.mpris.media import MediaSignal, MprisMedia, SignalKind
from video_lyrics.render.ansi import AnsiRenderer
from video_lyrics.sources.base import TranscriptSource

logger = logging.getLogger(__name__)


def dispatch(ctl: LyricsController, signals: list[MediaSignal]) -> None:
    """Feed polled media signals to the controller, in order."""
    for sig in signals:
        if sig.kind is SignalKind.TIME and sig.position_s is not None:
            ctl.on_time_update(sig.position_s)
        elif sig.kind is SignalKind.PLAYED:
            ctl.on_played()
        elif sig.kind is SignalKind.ENDED:
            ctl.on_ended()


def handle_key(ctl: LyricsController, key: str) -> bool:
    """Returns False when the user asked to quit."""
    if key in ("q", "Q"):
        return False
    if key in ("r", "R") and ctl.playback.replay_visible:
        ctl.replay()
    return True


def drain_keys(ctl: LyricsController, keys: asyncio.Queue[str]) -> bool:
    """Handle queued key presses. Returns False when the user asked to quit."""
    while not keys.empty():
        try:
            if not handle_key(ctl, keys.get_nowait()):
                return False
        except PlayerUnavailable as e:
            # player went away mid-replay; keep the ended screen
            logger.warning("player command failed: %s", e)
    return True


def frame_key(view: PresentationState) -> PresentationState:
    # redraw when something visible changes; the clock shows whole seconds
    return replace(view, current_time=float(int(view.current_time)))


@contextlib.contextmanager
def _cbreak_stdin() -> Iterator[bool]:
    if not sys.stdin.isatty():
        yield False
        return
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


async def run(
    ctl: LyricsController,
    media: MprisMedia,
    renderer: AnsiRenderer,
    video: Path,
    *,
    refresh_hz: float,
) -> int:
    """
    Main loop:
    select -> (poll media -> signals -> controller -> render on change) until quit.
    """
    loop = asyncio.get_running_loop()
    keys: asyncio.Queue[str] = asyncio.Queue()
    tick_s = 1.0 / max(refresh_hz, 1.0)

    renderer.on_layout = ctl.relayout
    ctl.select(video)

    with _cbreak_stdin() as interactive:
        if interactive:
            loop.add_reader(sys.stdin.fileno(), lambda: keys.put_nowait(sys.stdin.read(1)))
        try:
            last: PresentationState | None = None
            while True:
                if not drain_keys(ctl, keys):
                    return 0

                try:
                    dispatch(ctl, media.poll())
                except PlayerUnavailable as e:
                    # if player briefly unavailable, don't crash; keep last frame
                    logger.debug("player unavailable: %s", e)

                view = ctl.view()
                key = frame_key(view)
                if key != last:
                    last = key
                    renderer.render(view)

                await asyncio.sleep(tick_s)
        finally:
            if interactive:
                loop.remove_reader(sys.stdin.fileno())


def play(
    cfg: AppConfig,
    video: Path,
    source: TranscriptSource,
    *,
    preferred_player: str | None,
) -> int:
    client = MprisClient.pick_player(preferred=preferred_player)
    logger.info("Using player %s", client.service_name)
    media = MprisMedia(client)

    renderer = AnsiRenderer(
        use_alt_screen=cfg.use_alt_screen,
        show_phonetic=cfg.show_phonetic,
        show_translation=cfg.show_translation,
    )
    ctl = LyricsController(source, media, layout=renderer, scroll=renderer)

    renderer.enter()

    # Handle SIGINT (Ctrl+C) gracefully
    def _on_sigint(signum, frame):
        renderer.exit()
        raise KeyboardInterrupt

    signal.signal(signal.SIGINT, _on_sigint)

    try:
        return asyncio.run(run(ctl, media, renderer, video, refresh_hz=cfg.refresh_hz))
    except KeyboardInterrupt:
        return 130
    finally:
        renderer.exit()
