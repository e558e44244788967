"""
Summary formatting and the keyword pipeline entry point.

summarize_transcript() takes a finished transcript and a tagger and returns
the text shown to the user: a bulleted list of key terms, a "too short"
notice, or the transcript echoed back when no keyword survives.
"""

from typing import List, Optional, Sequence

from .debug_log import DebugLogger, get_debug_logger
from .keywords import filter_keywords, rank_keywords
from .tagger import GrammaticalTagger
from .timing import timer
from .types import KeywordReport, TaggedToken

MIN_TRANSCRIPT_LENGTH = 5
TOO_SHORT_MESSAGE = "Dictation too short."
SUMMARY_HEADER = "Key terms detected:"
FALLBACK_PREFIX = "Summary: "
BULLET = "•"


def is_too_short(transcript: str) -> bool:
    return len(transcript) <= MIN_TRANSCRIPT_LENGTH


def capitalize_keyword(keyword: str) -> str:
    """Upper-case the first letter of each word, leaving the rest untouched."""
    return " ".join(word[:1].upper() + word[1:] for word in keyword.split(" "))


def format_summary(keywords: Sequence[str], transcript: str) -> str:
    """
    Render ranked keywords as a bulleted block.

    Args:
        keywords: Ranked unique keywords
        transcript: Original transcript, echoed back when there are no keywords

    Returns:
        Summary text
    """
    if not keywords:
        return FALLBACK_PREFIX + transcript

    lines = [f"{BULLET} {capitalize_keyword(keyword)}" for keyword in keywords]
    return SUMMARY_HEADER + "\n" + "\n".join(lines)


@timer
def build_report(transcript: str, tagger: GrammaticalTagger, debug_logger: Optional[DebugLogger] = None) -> KeywordReport:
    """
    Run the keyword pipeline over a finished transcript.

    Transcripts of 5 characters or fewer are not tagged at all.

    Args:
        transcript: Frozen transcript text
        tagger: Tagger used to classify the transcript's words
        debug_logger: Where to record the analysis (defaults to the global logger)

    Returns:
        KeywordReport with candidates, ranked keywords and summary text
    """
    debug_logger = debug_logger or get_debug_logger()
    tokens: List[TaggedToken] = []

    if is_too_short(transcript):
        report = KeywordReport(transcript=transcript, summary=TOO_SHORT_MESSAGE, too_short=True)
    else:
        tokens = list(tagger.tag(transcript))
        candidates = list(filter_keywords(tokens))
        keywords = rank_keywords(candidates)
        report = KeywordReport(
            transcript=transcript,
            candidates=candidates,
            keywords=keywords,
            summary=format_summary(keywords, transcript),
        )

    debug_logger.log_analysis(report, tokens)
    return report


def summarize_transcript(transcript: str, tagger: GrammaticalTagger) -> str:
    """Return the summary text for a finished transcript."""
    return build_report(transcript, tagger).summary
