from __future__ import annotations

from pathlib import Path
import typer

from video_lyrics.app import play as play_loop
from video_lyrics.config import LANGS, load_config, save_config_lang
from video_lyrics.i18n import set_lang, t
from video_lyrics.logging_setup import setup_logging
from video_lyrics.mpris.client import MprisClient
from video_lyrics.mpris.errors import NoPlayersFound
from video_lyrics.session.orchestrator import encode_file, make_media_ref
from video_lyrics.sources.base import TranscriptionError
from video_lyrics.sources.factory import build_source
from video_lyrics.transcript.export import export_json, export_lrc, export_srt
from video_lyrics.transcript.parse import TranscriptParseError, parse_transcript_with_stats


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _read_transcript(path: Path):
    try:
        return parse_transcript_with_stats(path.read_text(encoding="utf-8"))
    except TranscriptParseError as e:
        typer.echo(t("transcript_invalid", error=str(e)), err=True)
        raise typer.Exit(code=1)


@app.command()
def play(
    video: Path = typer.Argument(..., exists=True, dir_okay=False, help="Video file to play"),
    transcript: Path | None = typer.Option(None, "--transcript", help="Use a transcript JSON instead of Gemini"),
    player: str | None = typer.Option(None, "--player", help="MPRIS service or short name (e.g. mpv)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Write logs to this file"),
    refresh_hz: float | None = typer.Option(None, "--refresh-hz", help="Polling frequency (Hz)"),
    no_alt_screen: bool = typer.Option(False, "--no-alt-screen", help="Do not use alternate screen buffer"),
    lang: str | None = typer.Option(None, "--lang", help="UI language for this run: en|vi"),
):
    """
    Play a video in an MPRIS player and follow its lyrics in the terminal.
    """
    cfg = load_config()
    if lang is not None:
        if lang.upper() not in LANGS:
            typer.echo(t("lang_invalid", langs=", ".join(x.lower() for x in LANGS)), err=True)
            raise typer.Exit(code=1)
        cfg = cfg.__class__(**{**cfg.__dict__, "lang": lang.upper()})
    if refresh_hz is not None:
        cfg = cfg.__class__(**{**cfg.__dict__, "refresh_hz": refresh_hz})
    if no_alt_screen:
        cfg = cfg.__class__(**{**cfg.__dict__, "use_alt_screen": False})

    setup_logging(debug, log_file)
    set_lang(cfg.lang)

    try:
        source = build_source(cfg, transcript)
    except ValueError:
        typer.echo(t("missing_api_key"), err=True)
        raise typer.Exit(code=1)

    try:
        code = play_loop(cfg, video, source, preferred_player=player or cfg.preferred_player)
    except NoPlayersFound:
        typer.echo(t("no_mpris_players"), err=True)
        raise typer.Exit(code=1)
    raise typer.Exit(code=code)


@app.command()
def transcribe(
    video: Path = typer.Argument(..., exists=True, dir_okay=False, help="Video file to transcribe"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Ask Gemini for a timed transcript and print it as JSON."""
    cfg = load_config()
    setup_logging(debug)
    set_lang(cfg.lang)

    try:
        source = build_source(cfg)
    except ValueError:
        typer.echo(t("missing_api_key"), err=True)
        raise typer.Exit(code=1)

    ref = make_media_ref(video)
    try:
        doc = source.transcribe(encode_file(ref.path), ref.mime_type)
    except TranscriptionError as e:
        typer.echo(t("transcribe_failed", error=str(e)), err=True)
        raise typer.Exit(code=1)

    data = export_json(doc) + "\n"
    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data, nl=False)


@app.command()
def players():
    """List available MPRIS players."""
    for p in MprisClient.list_players():
        typer.echo(p)


@app.command()
def parse(transcript_path: Path):
    """Parse a transcript JSON and print stats."""
    doc, stats = _read_transcript(transcript_path)
    typer.echo(f"lines_total={stats.lines_total}")
    typer.echo(f"words_total={stats.words_total}")
    typer.echo(f"intervals_clamped={stats.intervals_clamped}")
    typer.echo(f"ids_generated={stats.ids_generated}")
    typer.echo(f"ordered={doc.is_ordered}")
    typer.echo(f"duration_s={doc.duration:.3f}")


@app.command()
def export(
    transcript_path: Path,
    fmt: str = typer.Option("srt", "--format", case_sensitive=False, help="lrc|srt|json"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
):
    """Export a transcript JSON to SRT/LRC/JSON (normalized)."""
    doc, _stats = _read_transcript(transcript_path)
    fmt_l = fmt.lower()
    if fmt_l == "json":
        data = export_json(doc) + "\n"
    elif fmt_l == "lrc":
        data = export_lrc(doc)
    elif fmt_l == "srt":
        data = export_srt(doc)
    else:
        raise typer.BadParameter(t("format_invalid"))

    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data, nl=False)


@app.command()
def config(
    lang: str | None = typer.Option(None, "--lang", help="UI language: en|vi"),
):
    """Show or change persistent settings."""
    cfg = load_config()
    set_lang(cfg.lang)
    if lang is None:
        typer.echo(f"lang={cfg.lang}")
        typer.echo(f"config_dir={cfg.config_dir}")
        return
    if lang.upper() not in LANGS:
        typer.echo(t("lang_invalid", langs=", ".join(x.lower() for x in LANGS)), err=True)
        raise typer.Exit(code=1)
    save_config_lang(lang)
    set_lang(lang)
    typer.echo(t("lang_saved", lang=lang.upper()))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
