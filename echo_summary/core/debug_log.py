"""
Debug logging for keyword analysis sessions.

When enabled, every analysis writes a JSON record with the transcript, the
tagged tokens, the accepted candidates, the ranking and the final summary to
{project_root}/.echo_summary/debug/session_<timestamp>/.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .types import KeywordReport, TaggedToken


class DebugLogger:
    """
    Writes per-session JSON records describing each keyword analysis.
    """

    def __init__(self, project_root: str = ".", enabled: Optional[bool] = None):
        """
        Initialize debug logger.

        Args:
            project_root: Project root directory for log storage
            enabled: Override debug enable flag, uses ECHO_DEBUG env var if None
        """
        self.project_root = project_root
        self.enabled = enabled if enabled is not None else is_debug_enabled()
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")

        if self.enabled:
            self._setup_log_directory()

    def _setup_log_directory(self) -> None:
        self.log_dir = Path(self.project_root) / ".echo_summary" / "debug"
        self.session_dir = self.log_dir / f"session_{self.session_id}"
        self.session_dir.mkdir(parents=True, exist_ok=True)

    def is_enabled(self) -> bool:
        return self.enabled

    def log_analysis(self, report: KeywordReport, tokens: List[TaggedToken]) -> Optional[Path]:
        """
        Log one keyword analysis.

        Args:
            report: Result of the analysis
            tokens: Tagged tokens the analysis saw (empty when the length guard fired)

        Returns:
            Path of the written record, or None when logging is disabled
        """
        if not self.enabled:
            return None

        timestamp = datetime.now().isoformat()
        log_data = {
            "timestamp": timestamp,
            "session_id": self.session_id,
            "step": "keyword_analysis",
            "transcript": report.transcript,
            "too_short": report.too_short,
            "tokens": [{"text": t.text, "tag": t.tag.value if t.tag else None} for t in tokens],
            "candidates": report.candidates,
            "keywords": report.keywords,
            "summary": report.summary,
            "stats": {
                "transcript_length": len(report.transcript),
                "token_count": len(tokens),
                "candidate_count": len(report.candidates),
                "keyword_count": len(report.keywords),
            },
        }

        filename = f"keyword_analysis_{timestamp.replace(':', '-').replace('.', '_')}.json"
        log_file = self.session_dir / filename

        with open(log_file, "w", encoding="utf-8") as f:
            json.dump(log_data, f, indent=2, ensure_ascii=False)
        return log_file


# Global debug logger instance
_debug_logger: Optional[DebugLogger] = None


def get_debug_logger(project_root: str = ".") -> DebugLogger:
    """Get or create the global debug logger for a project root."""
    global _debug_logger
    if _debug_logger is None or _debug_logger.project_root != project_root:
        _debug_logger = DebugLogger(project_root)
    return _debug_logger


def is_debug_enabled() -> bool:
    """True if ECHO_DEBUG=1 is set."""
    return os.getenv("ECHO_DEBUG", "0") == "1"
