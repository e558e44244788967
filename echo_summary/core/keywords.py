"""
Keyword selection and ranking.

Each tagged token is judged by exactly one of two rules:

- tagged rule: tokens tagged as a noun, adjective or name are kept when
  longer than 3 characters
- length rule: every other token is kept only when longer than 5 characters

Accepted candidates are then deduplicated and ranked longest first.
"""

from typing import Iterable, Iterator, List, Optional

from .types import GrammaticalTag, TaggedToken

KEEP_TAGS = frozenset(
    {
        GrammaticalTag.NOUN,
        GrammaticalTag.ADJECTIVE,
        GrammaticalTag.PERSONAL_NAME,
        GrammaticalTag.PLACE_NAME,
        GrammaticalTag.ORGANIZATION_NAME,
    }
)

TAGGED_MIN_LENGTH = 3
UNTAGGED_MIN_LENGTH = 5
MAX_KEYWORDS = 6

TAGGED_RULE = "tagged"
LENGTH_RULE = "length"


def selection_rule(token: TaggedToken) -> str:
    """Return which rule judges this token (never both)."""
    if token.tag is not None and token.tag in KEEP_TAGS:
        return TAGGED_RULE
    return LENGTH_RULE


def accepting_rule(token: TaggedToken) -> Optional[str]:
    """
    Return the rule that accepts the token, or None if it is rejected.
    """
    rule = selection_rule(token)
    threshold = TAGGED_MIN_LENGTH if rule == TAGGED_RULE else UNTAGGED_MIN_LENGTH
    return rule if len(token.text) > threshold else None


def is_keyword(token: TaggedToken) -> bool:
    return accepting_rule(token) is not None


def filter_keywords(tokens: Iterable[TaggedToken]) -> Iterator[str]:
    """
    Yield the accepted candidates in input order, duplicates included.
    """
    for token in tokens:
        if is_keyword(token):
            yield token.text


def rank_keywords(candidates: Iterable[str], limit: int = MAX_KEYWORDS) -> List[str]:
    """
    Deduplicate candidates and rank them by descending length.

    Equal-length keywords keep the order in which they first appeared.

    Args:
        candidates: Accepted candidates (already lowercased)
        limit: Maximum number of keywords to return

    Returns:
        At most `limit` unique keywords, longest first
    """
    unique = list(dict.fromkeys(candidates))
    # sorted() is stable with reverse=True, ties stay in appearance order
    return sorted(unique, key=len, reverse=True)[:limit]
