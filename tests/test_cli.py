"""
Tests for the Typer command-line interface.

spaCy models and the Whisper API are never touched: commands are driven
with --tags scripts and a stand-in speech processor.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from echo_summary.core.types import Transcript
from echo_summary.main import app

runner = CliRunner()

SPANISH_TRANSCRIPT = "El gato negro corrió rápidamente por el jardín"
SPANISH_TAGS = [
    ["El", None],
    ["gato", "noun"],
    ["negro", "adjective"],
    ["corrió", None],
    ["rápidamente", None],
    ["por", None],
    ["el", None],
    ["jardín", "noun"],
]


@pytest.fixture
def tags_file(tmp_path: Path) -> Path:
    path = tmp_path / "tags.json"
    path.write_text(json.dumps(SPANISH_TAGS, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolate_debug_env(monkeypatch: pytest.MonkeyPatch):
    """--debug writes ECHO_DEBUG into the environment; restore it after each test."""
    monkeypatch.setenv("ECHO_DEBUG", "0")


class FakeSpeechProcessor:
    def transcribe_audio(self, path: str) -> Transcript:
        return Transcript(text=SPANISH_TRANSCRIPT, lang_hint="es")


class TestSummarizeCommand:
    def test_plain_output(self, tags_file: Path):
        result = runner.invoke(app, ["summarize", "--text", SPANISH_TRANSCRIPT, "--tags", str(tags_file), "--format", "plain"])
        assert result.exit_code == 0
        assert "Key terms detected:\n• Rápidamente\n• Corrió" in result.output

    def test_json_output(self, tags_file: Path):
        result = runner.invoke(app, ["summarize", "--text", SPANISH_TRANSCRIPT, "--tags", str(tags_file), "--format", "json"])
        assert result.exit_code == 0
        payload = json.loads(result.output[result.output.index("{") :])
        assert payload["keywords"] == ["rápidamente", "corrió", "jardín", "negro", "gato"]
        assert payload["too_short"] is False

    def test_rich_output_copies_summary(self, tags_file: Path):
        with patch("echo_summary.main.pyperclip.copy") as mock_copy:
            result = runner.invoke(app, ["summarize", "--text", SPANISH_TRANSCRIPT, "--tags", str(tags_file)])
        assert result.exit_code == 0
        assert "Rápidamente" in result.output
        mock_copy.assert_called_once()
        assert mock_copy.call_args[0][0].startswith("Key terms detected:")

    def test_clipboard_errors_are_ignored(self, tags_file: Path):
        with patch("echo_summary.main.pyperclip.copy", side_effect=Exception("Clipboard error")):
            result = runner.invoke(app, ["summarize", "--text", SPANISH_TRANSCRIPT, "--tags", str(tags_file)])
        assert result.exit_code == 0

    def test_short_text(self, tags_file: Path):
        result = runner.invoke(app, ["summarize", "--text", "hi", "--tags", str(tags_file), "--format", "plain"])
        assert result.exit_code == 0
        assert "Dictation too short." in result.output

    def test_from_file(self, tmp_path: Path, tags_file: Path):
        transcript_file = tmp_path / "nota.txt"
        transcript_file.write_text(SPANISH_TRANSCRIPT + "\n", encoding="utf-8")
        result = runner.invoke(app, ["summarize", "--file", str(transcript_file), "--tags", str(tags_file), "--format", "json"])
        assert result.exit_code == 0
        payload = json.loads(result.output[result.output.index("{") :])
        assert payload["transcript"] == SPANISH_TRANSCRIPT

    def test_text_and_file_conflict(self, tmp_path: Path):
        result = runner.invoke(app, ["summarize", "--text", "hola", "--file", str(tmp_path / "x.txt")])
        assert result.exit_code == 1
        assert "Cannot specify both" in result.output

    def test_missing_input(self):
        result = runner.invoke(app, ["summarize"])
        assert result.exit_code == 1
        assert "Must specify either" in result.output

    def test_bad_tags_file(self, tmp_path: Path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        result = runner.invoke(app, ["summarize", "--text", SPANISH_TRANSCRIPT, "--tags", str(bad)])
        assert result.exit_code == 1
        assert "Failed to read tag script" in result.output

    def test_debug_record_written(self, tmp_path: Path, tags_file: Path):
        result = runner.invoke(
            app,
            ["summarize", "--text", SPANISH_TRANSCRIPT, "--tags", str(tags_file), "--format", "plain", "--debug", "--project-root", str(tmp_path)],
        )
        assert result.exit_code == 0
        records = list((tmp_path / ".echo_summary" / "debug").glob("session_*/keyword_analysis_*.json"))
        assert len(records) == 1

    def test_tagger_model_from_project_env(self, tmp_path: Path):
        env_dir = tmp_path / ".echo_summary"
        env_dir.mkdir()
        (env_dir / ".env").write_text("ECHO_TAGGER_MODEL=xx_missing_model_from_env\n", encoding="utf-8")

        with patch.dict(os.environ, {}):
            os.environ.pop("ECHO_TAGGER_MODEL", None)
            os.environ.pop("ECHO_ENV_FILE", None)
            result = runner.invoke(app, ["summarize", "--text", SPANISH_TRANSCRIPT, "--project-root", str(tmp_path)])

        assert result.exit_code == 1
        assert "xx_missing_model_from_env" in result.output


class TestFromAudioCommand:
    def test_transcribes_and_summarizes(self, tmp_path: Path, tags_file: Path):
        audio = tmp_path / "nota.wav"
        audio.write_bytes(b"RIFF")
        with patch("echo_summary.core.speech.SpeechProcessor", FakeSpeechProcessor):
            result = runner.invoke(app, ["from-audio", str(audio), "--tags", str(tags_file), "--format", "plain"])
        assert result.exit_code == 0
        assert "• Rápidamente" in result.output

    def test_missing_audio_file(self, tmp_path: Path, tags_file: Path):
        result = runner.invoke(app, ["from-audio", str(tmp_path / "missing.wav"), "--tags", str(tags_file)])
        assert result.exit_code == 1
        assert "audio file not found" in result.output

    def test_unsupported_audio_format(self, tmp_path: Path, tags_file: Path):
        audio = tmp_path / "nota.ogg"
        audio.write_bytes(b"OggS")
        result = runner.invoke(app, ["from-audio", str(audio), "--tags", str(tags_file)])
        assert result.exit_code == 1
        assert "unsupported audio format" in result.output

    def test_analysis_failure_exits_with_message(self, tmp_path: Path):
        audio = tmp_path / "nota.wav"
        audio.write_bytes(b"RIFF")
        with patch("echo_summary.core.speech.SpeechProcessor", FakeSpeechProcessor):
            result = runner.invoke(app, ["from-audio", str(audio), "--model", "xx_missing_model_for_audio", "--format", "plain"])
        assert result.exit_code == 1
        assert "analysis failed" in result.output
        assert "xx_missing_model_for_audio" in result.output


class TestTagsCommand:
    def test_table_lists_tokens(self, tags_file: Path):
        result = runner.invoke(app, ["tags", "--text", SPANISH_TRANSCRIPT, "--tags", str(tags_file)])
        assert result.exit_code == 0
        assert "rápidamente" in result.output
        assert "noun" in result.output
        assert "length" in result.output
