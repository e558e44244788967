"""
Main CLI interface for EchoSummary.

This module provides the Typer-based command-line interface with commands for:
- Summarizing a text transcript into key terms
- Transcribing an audio file with Whisper and summarizing it
- Inspecting how each token of a transcript is tagged and filtered
"""

import json
import os
import sys
from pathlib import Path
from typing import Optional

import pyperclip
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.config import ConfigError, load_project_env
from .core.debug_log import DebugLogger, is_debug_enabled
from .core.keywords import accepting_rule, selection_rule
from .core.progress import reporter
from .core.session import SessionController
from .core.speech import WhisperTranscription
from .core.summary import build_report
from .core.tagger import GrammaticalTagger, ScriptedTagger, SpacyTagger, TaggerError
from .core.types import KeywordReport, SessionPhase, SessionState

app = typer.Typer(
    name="echo-summary",
    help="EchoSummary CLI - Turn dictated notes into a short list of key terms",
    no_args_is_help=True,
)

console = Console()


def _read_transcript(text: Optional[str], file: Optional[str]) -> str:
    """Resolve the transcript from --text or --file, exiting on invalid input."""
    if text and file:
        console.print("[bold red]Error:[/bold red] Cannot specify both --text and --file options")
        sys.exit(1)

    if file:
        file_path = Path(file)
        if not file_path.exists():
            console.print(f"[bold red]Error:[/bold red] File not found: {file}")
            sys.exit(1)
        try:
            return file_path.read_text(encoding="utf-8").strip()
        except OSError as e:
            console.print(f"[bold red]Error:[/bold red] Failed to read file '{file}': {e}")
            sys.exit(1)

    if text is None:
        console.print("[bold red]Error:[/bold red] Must specify either --text or --file option")
        sys.exit(1)
    return text


def _build_tagger(tags_file: Optional[str], model: Optional[str]) -> GrammaticalTagger:
    if tags_file:
        return ScriptedTagger.from_json(tags_file)
    return SpacyTagger(model=model)


def _debug_logger(project_root: str, debug: bool) -> DebugLogger:
    # CLI flag overrides the environment
    if debug:
        os.environ["ECHO_DEBUG"] = "1"
    return DebugLogger(project_root, enabled=debug or is_debug_enabled())


@app.command()
def summarize(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Transcript text to summarize"),
    file: Optional[str] = typer.Option(None, "--file", help="Path to file containing transcript text"),
    tags: Optional[str] = typer.Option(None, "--tags", help="JSON file of [token, tag] pairs to use instead of spaCy"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="spaCy pipeline to tag with (default: ECHO_TAGGER_MODEL)"),
    project_root: str = typer.Option(".", "--project-root", help="Project directory holding .echo_summary/ (env file and debug logs)"),
    output_format: str = typer.Option("rich", "--format", "-f", help="Output format (rich, plain, json)"),
    debug: bool = typer.Option(False, "--debug", help="Write a JSON debug record of the analysis"),
):
    """
    Summarize a transcript into its key terms.

    Examples:
        echo-summary summarize --text "El gato negro corrió rápidamente por el jardín"
        echo-summary summarize --file nota.txt --format json
        echo-summary summarize --text "..." --tags tags.json
    """
    try:
        load_project_env(project_root)
        transcript = _read_transcript(text, file)
        debug_logger = _debug_logger(project_root, debug)

        with reporter.initialize(console, "Loading tagger…"):
            tagger = _build_tagger(tags, model)
            reporter.step("Extracting keywords…")
            report = build_report(transcript, tagger, debug_logger)
            reporter.complete_step()

        _display_report(report, output_format)

    except (ConfigError, TaggerError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]Unexpected Error:[/bold red] {e}")
        sys.exit(1)


@app.command("from-audio")
def from_audio(
    path: str = typer.Argument(..., help="Path to audio file"),
    tags: Optional[str] = typer.Option(None, "--tags", help="JSON file of [token, tag] pairs to use instead of spaCy"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="spaCy pipeline to tag with (default: ECHO_TAGGER_MODEL)"),
    project_root: str = typer.Option(".", "--project-root", help="Project directory holding .echo_summary/ (env file and debug logs)"),
    output_format: str = typer.Option("rich", "--format", "-f", help="Output format (rich, plain, json)"),
    debug: bool = typer.Option(False, "--debug", help="Write a JSON debug record of the analysis"),
):
    """
    Transcribe an audio file with Whisper, then summarize the transcript.

    Examples:
        echo-summary from-audio nota.m4a
        echo-summary from-audio nota.wav --format json
    """
    try:
        load_project_env(project_root)
        debug_logger = _debug_logger(project_root, debug)

        with reporter.initialize(console, "Checking audio file…"):
            controller = SessionController(
                _build_tagger(tags, model),
                transcription=WhisperTranscription(path),
                analysis_delay=0.0,
                debug_logger=debug_logger,
            )

            def on_state(state: SessionState) -> None:
                if state.phase == SessionPhase.ANALYZING:
                    reporter.step("Extracting keywords…")

            controller.subscribe(on_state)

            if not controller.start():
                console.print(Text(controller.snapshot().transcript, style="bold red"))
                sys.exit(1)

            reporter.step("Transcribing audio…")
            controller.stop()
            reporter.complete_step()

        report = controller.report
        if report is None:
            console.print(Text(controller.snapshot().summary, style="bold red"))
            sys.exit(1)
        if output_format == "rich":
            transcript = report.transcript
            console.print(f"[dim]Transcript ({len(transcript.split())} words):[/dim]")
            console.print(Panel(Text(transcript[:200] + "..." if len(transcript) > 200 else transcript)))
        _display_report(report, output_format)

    except (ConfigError, TaggerError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]Unexpected Error:[/bold red] {e}")
        sys.exit(1)


@app.command("tags")
def show_tags(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Transcript text to inspect"),
    file: Optional[str] = typer.Option(None, "--file", help="Path to file containing transcript text"),
    tags: Optional[str] = typer.Option(None, "--tags", help="JSON file of [token, tag] pairs to use instead of spaCy"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="spaCy pipeline to tag with (default: ECHO_TAGGER_MODEL)"),
    project_root: str = typer.Option(".", "--project-root", help="Project directory holding .echo_summary/ (env file)"),
):
    """
    Show how every token is tagged and which rule keeps or drops it.

    Examples:
        echo-summary tags --text "El gato negro corrió rápidamente por el jardín"
    """
    try:
        load_project_env(project_root)
        transcript = _read_transcript(text, file)
        tagger = _build_tagger(tags, model)

        table = Table(title="Tagged Tokens")
        table.add_column("Token", style="cyan")
        table.add_column("Tag", style="white")
        table.add_column("Rule", style="white")
        table.add_column("Kept", style="white")

        for token in tagger.tag(transcript):
            kept = accepting_rule(token) is not None
            table.add_row(
                token.text,
                token.tag.value if token.tag else "-",
                selection_rule(token),
                "[green]yes[/green]" if kept else "[dim]no[/dim]",
            )

        console.print(table)

    except TaggerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]Unexpected Error:[/bold red] {e}")
        sys.exit(1)


def _copy_to_clipboard(text: str) -> None:
    try:
        pyperclip.copy(text)
    except Exception:
        # Clipboard is unavailable on headless systems
        pass


def _display_report(report: KeywordReport, output_format: str) -> None:
    """Display a keyword report in the specified format."""

    if output_format == "json":
        typer.echo(json.dumps(report.model_dump(), indent=2, ensure_ascii=False))
        return

    if output_format == "plain":
        typer.echo(report.summary)
        return

    console.print("\n[bold green]Local semantic analysis:[/bold green]")
    console.print(Panel(Text(report.summary), border_style="blue"))
    _copy_to_clipboard(report.summary)

    if report.keywords:
        console.print(f"[dim]{len(report.candidates)} candidates, {len(report.keywords)} key terms (copied to clipboard)[/dim]")


if __name__ == "__main__":
    app()
