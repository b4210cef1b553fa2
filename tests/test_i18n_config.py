from __future__ import annotations

from video_lyrics.config import load_config, save_config_lang
from video_lyrics.i18n import current_lang, set_lang, t


class TestI18n:
    """Test i18n t() and set_lang."""

    def test_t_en(self):
        set_lang("EN")
        assert t("ingest_failed") == "Could not transcribe this video. Try another one."
        assert t("no_mpris_players") == "No active MPRIS players"
        assert t("lang_saved", lang="VI") == "Language saved: VI"

    def test_t_vi(self):
        set_lang("VI")
        assert t("ingest_failed") == "Lỗi xử lý AI. Thử lại video khác."
        assert t("load_failed") == "Lỗi tải file."
        set_lang("EN")

    def test_t_fallback_to_key(self):
        set_lang("EN")
        assert t("nonexistent_key") == "nonexistent_key"

    def test_unknown_lang_falls_back_to_en(self):
        set_lang("fr")
        assert current_lang() == "en"

    def test_vi_locale_is_translated(self):
        set_lang("EN")
        en = {k: t(k) for k in ("status_idle", "status_acquiring", "hint_replay", "hint_controls")}
        set_lang("VI")
        vi = {k: t(k) for k in en}
        set_lang("EN")
        assert all(v != k for k, v in vi.items())
        assert en != vi


class TestConfig:
    """Test config --lang and load_config priority."""

    def test_save_config_lang_and_load(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.delenv("VIDEO_LYRICS_LANG", raising=False)

        save_config_lang("VI")
        cfg = load_config()
        assert cfg.lang == "VI"

        save_config_lang("EN")
        cfg = load_config()
        assert cfg.lang == "EN"

    def test_load_lang_priority_config_over_env(self, tmp_path, monkeypatch):
        (tmp_path / "video-lyrics").mkdir(parents=True, exist_ok=True)
        (tmp_path / "video-lyrics" / "config.json").write_text('{"lang": "VI"}', encoding="utf-8")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.setenv("VIDEO_LYRICS_LANG", "EN")

        assert load_config().lang == "VI"

    def test_load_lang_env_when_no_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.setenv("VIDEO_LYRICS_LANG", "vi")

        assert load_config().lang == "VI"

    def test_broken_config_file_is_ignored(self, tmp_path, monkeypatch):
        (tmp_path / "video-lyrics").mkdir(parents=True, exist_ok=True)
        (tmp_path / "video-lyrics" / "config.json").write_text("{oops", encoding="utf-8")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.delenv("VIDEO_LYRICS_LANG", raising=False)

        assert load_config().lang == "EN"

    def test_env_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.delenv("VIDEO_LYRICS_GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.setenv("VIDEO_LYRICS_API_TIMEOUT", "90")
        monkeypatch.setenv("VIDEO_LYRICS_SHOW_PHONETIC", "0")
        monkeypatch.setenv("VIDEO_LYRICS_REFRESH_HZ", "10")

        cfg = load_config()
        assert cfg.gemini_api_key == "k"
        assert cfg.api_timeout_s == 90.0
        assert cfg.show_phonetic is False
        assert cfg.show_translation is True
        assert cfg.refresh_hz == 10.0

    def test_no_timeout_by_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.delenv("VIDEO_LYRICS_API_TIMEOUT", raising=False)
        assert load_config().api_timeout_s is None
