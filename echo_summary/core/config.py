"""
Configuration management for EchoSummary.

Settings come from environment variables. A project-scoped env file
(.echo_summary/.env) can be loaded explicitly with python-dotenv; nothing is
loaded implicitly at import time.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from openai import OpenAI

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


METADATA_DIRNAME = ".echo_summary"
DEFAULT_ENV_FILENAME = os.getenv("ECHO_ENV_FILENAME", ".env")
ENV_FILE_ENV_VARS = ("ECHO_ENV_FILE",)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name} value: {raw!r}. Using {default} as default.")
        return default
    if value < 0:
        logger.warning(f"Negative {name} value: {value}. Using {default} as default.")
        return default
    return value


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid {name} value: {raw!r}. Using {default} as default.")
        return default


class Config:
    """Configuration settings for EchoSummary."""

    @property
    def openai_api_key(self) -> str:
        """Get OpenAI API key from environment."""
        key = os.getenv("OPENAI_API_KEY")
        if not key:
            raise ConfigError("OPENAI_API_KEY not found in environment. Please set it in your environment or .env file.")
        return key

    @property
    def tagger_model(self) -> str:
        """Get the spaCy pipeline used for tagging (default: es_core_news_sm)."""
        return os.getenv("ECHO_TAGGER_MODEL", "es_core_news_sm")

    @property
    def analysis_delay(self) -> float:
        """Seconds to wait before analysis starts, for UX pacing (default: 0)."""
        return _float_env("ECHO_ANALYSIS_DELAY", 0.0)

    @property
    def asr_model(self) -> str:
        """Get the model name for ASR (default: whisper-1)."""
        return os.getenv("ASR_MODEL", "whisper-1")

    @property
    def openai_timeout(self) -> int:
        """Get OpenAI API timeout in seconds (default: 60)."""
        return _int_env("OPENAI_TIMEOUT", 60)

    @property
    def max_retries(self) -> int:
        """Get maximum number of retries for API calls (default: 3)."""
        return _int_env("MAX_RETRIES", 3)


# Global config instance
config = Config()


def get_project_env_path(project_root: Optional[str] = None, filename: str = DEFAULT_ENV_FILENAME) -> Path:
    """Return the path of the project-scoped env file under .echo_summary."""
    root = Path(project_root) if project_root else Path.cwd()
    return root / METADATA_DIRNAME / filename


def load_project_env(project_root: Optional[str] = None, filename: str = DEFAULT_ENV_FILENAME, override: bool = False) -> Optional[str]:
    """
    Load a project-scoped environment file, if available.

    Load order (first match wins):
    1) Explicit env file path via ECHO_ENV_FILE
    2) <project_root>/.echo_summary/<filename> (default: .env)

    Returns the path loaded, or None if nothing was loaded.
    """
    for var in ENV_FILE_ENV_VARS:
        explicit = os.getenv(var)
        if explicit and Path(explicit).is_file():
            load_dotenv(dotenv_path=explicit, override=override)
            return explicit

    env_path = get_project_env_path(project_root, filename)
    if env_path.is_file():
        load_dotenv(dotenv_path=env_path, override=override)
        return str(env_path)

    return None


@lru_cache(maxsize=1)
def get_client() -> OpenAI:
    """
    Get configured OpenAI client with timeout and retry settings.

    If OPENAI_API_KEY is missing, the project-scoped env file is loaded first.

    Raises:
        ConfigError: If API key is not configured after project env lookup
    """
    if not os.getenv("OPENAI_API_KEY"):
        loaded_path = load_project_env()
        if not os.getenv("OPENAI_API_KEY"):
            where = loaded_path or f"{METADATA_DIRNAME}/{DEFAULT_ENV_FILENAME}"
            raise ConfigError(
                f"OPENAI_API_KEY not found in environment. Looked for project env at {where}. "
                f"Set it via environment, ECHO_ENV_FILE, or place it under {METADATA_DIRNAME}/{DEFAULT_ENV_FILENAME}."
            )
    try:
        return OpenAI(
            api_key=config.openai_api_key,
            timeout=config.openai_timeout,
            max_retries=config.max_retries,
        )
    except Exception as e:
        raise ConfigError(f"Failed to create OpenAI client: {e}")
