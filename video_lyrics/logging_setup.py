from __future__ import annotations

import logging
import os
from pathlib import Path


def setup_logging(debug: bool, log_file: Path | None = None) -> None:
    level = logging.DEBUG if debug else logging.INFO
    # Allow env override for e.g. systemd service runs
    level_name = os.getenv("VIDEO_LYRICS_LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), level)

    # the player screen owns the terminal; a file keeps logs out of the frame
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=str(log_file) if log_file else None,
    )
