"""
Type definitions for EchoSummary.

This module defines the data structures that flow through the keyword
pipeline (tagged tokens, keyword reports) and the session state published
by the session controller.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class GrammaticalTag(str, Enum):
    """Coarse grammatical category assigned to a token by a tagger."""

    NOUN = "noun"
    ADJECTIVE = "adjective"
    PERSONAL_NAME = "personal_name"
    PLACE_NAME = "place_name"
    ORGANIZATION_NAME = "organization_name"
    OTHER = "other"


class TaggedToken(BaseModel):
    """
    A word unit produced by a tagger.

    Attributes:
        text: Normalized (lowercased) token text
        tag: Grammatical category, or None if the tagger could not classify it
    """

    model_config = {"frozen": True}

    text: str = Field(..., description="Lowercased token text")
    tag: Optional[GrammaticalTag] = Field(default=None, description="Grammatical category")


class Transcript(BaseModel):
    """
    Result of automatic speech recognition.
    """

    text: str = Field(..., description="Transcribed text")
    lang_hint: str = Field(default="auto", description="Detected or hinted language code")


class SessionPhase(str, Enum):
    """Phases of one record → stop → analyze cycle."""

    IDLE = "idle"
    RECORDING = "recording"
    ANALYZING = "analyzing"
    DONE = "done"


class SessionState(BaseModel):
    """
    Snapshot of a recording session as seen by the presentation layer.
    """

    model_config = {"frozen": True}

    phase: SessionPhase = Field(default=SessionPhase.IDLE, description="Current session phase")
    transcript: str = Field(default="", description="Live or frozen transcript")
    summary: str = Field(default="", description="Keyword summary, empty until analysis completes")
    level: float = Field(default=0.0, ge=0.0, description="Microphone level for visual feedback")

    @property
    def is_recording(self) -> bool:
        return self.phase == SessionPhase.RECORDING

    @property
    def is_analyzing(self) -> bool:
        return self.phase == SessionPhase.ANALYZING


class KeywordReport(BaseModel):
    """
    Result of running the keyword pipeline over one transcript.
    """

    transcript: str = Field(..., description="Transcript that was analyzed")
    candidates: List[str] = Field(default_factory=list, description="Accepted candidates, duplicates preserved")
    keywords: List[str] = Field(default_factory=list, description="Ranked unique keywords")
    summary: str = Field(..., description="Formatted summary text")
    too_short: bool = Field(default=False, description="Whether the length guard short-circuited analysis")
