from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LineBox:
    top: float
    height: float


class LayoutQuery(Protocol):
    def line_box(self, line_id: str) -> LineBox | None: ...

    def container_height(self) -> float | None: ...


class ScrollSurface(Protocol):
    def smooth_scroll_to(self, top: float) -> None: ...


def center_offset(line_top: float, line_height: float, container_height: float) -> float:
    """Scroll offset that puts the middle of the line in the middle of the container."""
    return line_top - container_height / 2 + line_height / 2


class ScrollCenterController:
    """
    Keeps the active line centred. Driven by active-line changes only;
    `relayout` re-issues the last target once layout is known or changed.
    """

    def __init__(self, layout: LayoutQuery, surface: ScrollSurface):
        self.layout = layout
        self.surface = surface
        self.line_id: str | None = None
        self.last_target: float | None = None

    def target_for(self, line_id: str | None) -> float | None:
        if line_id is None:
            return None
        box = self.layout.line_box(line_id)
        height = self.layout.container_height()
        if box is None or height is None:
            return None
        return center_offset(box.top, box.height, height)

    def follow(self, line_id: str | None) -> float | None:
        self.line_id = line_id
        return self._issue()

    def relayout(self) -> float | None:
        return self._issue()

    def reset(self) -> None:
        self.line_id = None
        self.last_target = None

    def _issue(self) -> float | None:
        target = self.target_for(self.line_id)
        if target is None:
            return None
        logger.debug("scroll line=%s target=%.1f", self.line_id, target)
        self.surface.smooth_scroll_to(target)
        self.last_target = target
        return target
