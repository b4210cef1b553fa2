from __future__ import annotations

import json
from dataclasses import dataclass
import os
from pathlib import Path

LANGS = ("EN", "VI")


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "video-lyrics"
    return Path.home() / ".config" / "video-lyrics"


def _config_file() -> Path:
    return _config_dir() / "config.json"


def _env_flag(name: str, default: str = "1") -> bool:
    return os.getenv(name, default) not in ("0", "false", "False")


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # Locale
    lang: str

    # Transcript source
    gemini_api_key: str | None
    gemini_model: str
    target_language: str
    api_max_retries: int
    api_backoff_base_s: float
    api_timeout_s: float | None  # None: wait as long as the API takes

    # MPRIS
    preferred_player: str | None

    # Rendering
    refresh_hz: float
    use_alt_screen: bool
    show_phonetic: bool
    show_translation: bool


def load_config() -> AppConfig:
    timeout_env = os.getenv("VIDEO_LYRICS_API_TIMEOUT")

    config_dir = _config_dir()
    lang = _load_lang(config_dir)

    return AppConfig(
        config_dir=config_dir,
        lang=lang,
        gemini_api_key=os.getenv("VIDEO_LYRICS_GEMINI_API_KEY") or os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("VIDEO_LYRICS_GEMINI_MODEL", "gemini-2.5-flash"),
        target_language=os.getenv("VIDEO_LYRICS_TARGET_LANGUAGE", "Vietnamese"),
        api_max_retries=int(os.getenv("VIDEO_LYRICS_API_MAX_RETRIES", "3")),
        api_backoff_base_s=float(os.getenv("VIDEO_LYRICS_API_BACKOFF_BASE", "1.0")),
        api_timeout_s=float(timeout_env) if timeout_env else None,
        preferred_player=os.getenv("VIDEO_LYRICS_PLAYER") or None,
        refresh_hz=float(os.getenv("VIDEO_LYRICS_REFRESH_HZ", "30.0")),
        use_alt_screen=_env_flag("VIDEO_LYRICS_ALT_SCREEN"),
        show_phonetic=_env_flag("VIDEO_LYRICS_SHOW_PHONETIC"),
        show_translation=_env_flag("VIDEO_LYRICS_SHOW_TRANSLATION"),
    )


def _load_lang(config_dir: Path) -> str:
    # Priority: config.json → VIDEO_LYRICS_LANG → "EN"
    cfg_path = config_dir / "config.json"
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
            raw = (data.get("lang") or "en").upper()
            if raw in LANGS:
                return raw
        except (OSError, ValueError, AttributeError):
            pass
    env_lang = os.getenv("VIDEO_LYRICS_LANG")
    if env_lang and env_lang.upper() in LANGS:
        return env_lang.upper()
    return "EN"


def save_config_lang(lang: str) -> None:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, str] = {}
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            pass
    data["lang"] = lang.upper()
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
