from __future__ import annotations

import shutil
import signal
import sys
import unicodedata
from dataclasses import dataclass
from typing import Callable

import colorama

from video_lyrics.controller import PresentationState
from video_lyrics.i18n import t
from video_lyrics.session.orchestrator import SessionStatus
from video_lyrics.sync.indexer import LineStatus
from video_lyrics.sync.scroll import LineBox
from video_lyrics.transcript.model import LyricLine, Transcript


CSI = "\x1b["


def _sgr(*codes: int) -> str:
    return CSI + ";".join(str(c) for c in codes) + "m"


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = _sgr(36, 1)  # cyan bold
    current: str = _sgr(32, 1)  # green bold
    word: str = _sgr(30, 42, 1)  # black on green
    upcoming: str = _sgr(37)  # white
    passed: str = _sgr(90)  # bright black
    secondary: str = _sgr(90, 3)  # bright black italic
    warning: str = _sgr(33, 1)  # yellow bold
    reset: str = _sgr(0)


def _cell_width(s: str) -> int:
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in s)


def _fit(text: str, width: int) -> str:
    if _cell_width(text) <= width:
        return text
    out = ""
    for ch in text:
        if _cell_width(out + ch) > width - 1:
            break
        out += ch
    return out + "…"


def _fmt_clock(seconds: float) -> str:
    m, s = divmod(int(max(seconds, 0.0)), 60)
    return f"{m:02d}:{s:02d}"


class AnsiRenderer:
    """
    Terminal presentation surface.

    Also the layout and scroll surface for centring: positions are in rows,
    and layout is unknown until the first transcript frame is drawn.
    """

    # title row + footer row
    CHROME_ROWS = 2

    def __init__(
        self,
        use_alt_screen: bool = True,
        theme: Theme | None = None,
        *,
        show_phonetic: bool = True,
        show_translation: bool = True,
    ):
        self.use_alt_screen = use_alt_screen
        self.theme = theme or Theme()
        self.show_phonetic = show_phonetic
        self.show_translation = show_translation
        self.scroll_top = 0
        # called after layout changes, before drawing; hook for re-centring
        self.on_layout: Callable[[], object] | None = None
        self._entered = False
        self._resize_handler: Callable[..., None] | None = None
        self._last_view: PresentationState | None = None
        self._boxes: dict[str, LineBox] | None = None
        self._layout_key: tuple[int, int, int] | None = None
        self._content_rows = 0
        self._body_rows = 0

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()

    def enter(self) -> None:
        if self._entered:
            return
        colorama.just_fix_windows_console()
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049h")  # alt screen
        sys.stdout.write(CSI + "?25l")  # hide cursor
        sys.stdout.write(CSI + "H" + CSI + "2J")  # home + clear
        sys.stdout.flush()
        self._entered = True

        # Register SIGWINCH handler for resize
        def _on_resize(signum=None, frame=None):
            self._layout_key = None
            if self._last_view is not None:
                self.render(self._last_view)

        self._resize_handler = _on_resize
        if hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, _on_resize)

    def exit(self) -> None:
        if not self._entered:
            return
        # Restore default SIGWINCH handler
        if self._resize_handler:
            if hasattr(signal, "SIGWINCH"):
                signal.signal(signal.SIGWINCH, signal.SIG_DFL)
            self._resize_handler = None
        sys.stdout.write(self.theme.reset)
        sys.stdout.write(CSI + "?25h")  # show cursor
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049l")  # normal screen
        sys.stdout.flush()
        self._entered = False
        self._last_view = None

    # layout / scroll surface

    def line_box(self, line_id: str) -> LineBox | None:
        if self._boxes is None:
            return None
        return self._boxes.get(line_id)

    def container_height(self) -> float | None:
        if self._boxes is None:
            return None
        return float(self._body_rows)

    def smooth_scroll_to(self, top: float) -> None:
        # terminals can't animate; jump straight there
        max_top = max(self._content_rows - self._body_rows, 0)
        self.scroll_top = min(max(int(round(top)), 0), max_top)

    def _block_rows(self, line: LyricLine) -> int:
        rows = 1
        if self.show_phonetic and line.phonetic:
            rows += 1
        if self.show_translation and line.translation:
            rows += 1
        return rows

    def layout(self, transcript: Transcript, body_rows: int) -> None:
        boxes: dict[str, LineBox] = {}
        top = 0
        for line in transcript.lines:
            height = self._block_rows(line)
            boxes[line.id] = LineBox(top=float(top), height=float(height))
            top += height + 1  # spacer row
        self._boxes = boxes
        self._content_rows = top
        self._body_rows = body_rows

    # drawing

    def _line_rows(self, line: LyricLine, status: LineStatus, words: frozenset[int], cols: int) -> list[str]:
        th = self.theme
        base = {LineStatus.ACTIVE: th.current, LineStatus.PASSED: th.passed}.get(status, th.upcoming)
        marker = f"{th.current}▌{th.reset} " if status is LineStatus.ACTIVE else "  "
        width = max(cols - 2, 1)
        rows: list[str] = []

        if self.show_phonetic and line.phonetic:
            rows.append(f"  {th.secondary}{_fit(line.phonetic, width)}{th.reset}")

        parts: list[str] = []
        used = 0
        for i, w in enumerate(line.original_words):
            w_width = _cell_width(w.text) + (1 if parts else 0)
            if used + w_width > width:
                parts.append(f"{base}…{th.reset}")
                break
            style = th.word if i in words else base
            parts.append((" " if parts else "") + f"{style}{w.text}{th.reset}")
            used += w_width
        rows.append(marker + "".join(parts))

        if self.show_translation and line.translation:
            rows.append(f"  {th.secondary}{_fit(line.translation, width)}{th.reset}")
        return rows

    def _status_frame(self, view: PresentationState, cols: int) -> list[str]:
        th = self.theme
        if view.status is SessionStatus.ACQUIRING:
            name = view.media.path.name if view.media else ""
            return [t("status_acquiring"), f"{th.passed}{_fit(name, cols)}{th.reset}"]
        if view.status is SessionStatus.FAILED:
            return [f"{th.warning}{t('status_failed')}{th.reset}", view.error or ""]
        if view.status is SessionStatus.READY:
            return [t("no_lyrics")]
        return [t("status_idle")]

    def _footer(self, view: PresentationState) -> str:
        th = self.theme
        if view.replay_visible:
            return f"{th.warning}↻ {t('hint_replay')}{th.reset}"
        total = view.transcript.duration if view.transcript else 0.0
        clock = _fmt_clock(view.current_time)
        if total:
            clock += f" / {_fmt_clock(total)}"
        return f"{th.passed}{clock}  {t('hint_controls')}{th.reset}"

    def render(self, view: PresentationState) -> None:
        # Store view for SIGWINCH redraw
        self._last_view = view

        cols, rows = shutil.get_terminal_size(fallback=(80, 24))
        body_rows = max(rows - self.CHROME_ROWS, 1)
        th = self.theme

        transcript = view.transcript
        title = (transcript.display if transcript else "") or (view.media.path.name if view.media else t("app_name"))

        body: list[str]
        if view.status is SessionStatus.READY and transcript is not None and transcript.lines:
            key = (id(transcript), cols, rows)
            if key != self._layout_key:
                self._layout_key = key
                self.layout(transcript, body_rows)
                if self.on_layout is not None:
                    self.on_layout()

            body = []
            for line in transcript.lines:
                status = view.line_status.get(line.id, LineStatus.UPCOMING)
                words = view.active_words.get(line.id, frozenset())
                body.extend(self._line_rows(line, status, words, cols))
                body.append("")
            body = body[self.scroll_top : self.scroll_top + body_rows]
        else:
            self._boxes = None
            self._layout_key = None
            self.scroll_top = 0
            body = self._status_frame(view, cols)

        body += [""] * (body_rows - len(body))

        out: list[str] = [f"{th.title}♫ {_fit(title, max(cols - 4, 1))} ♫{th.reset}"]
        out.extend(body)
        out.append(self._footer(view))

        # move home + clear, then print full frame
        sys.stdout.write(CSI + "H" + CSI + "2J")
        sys.stdout.write("\n".join(out))
        sys.stdout.write(th.reset)
        sys.stdout.flush()
