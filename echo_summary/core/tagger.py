"""
Grammatical tagger adapters.

A tagger turns a transcript into an ordered stream of TaggedToken objects,
skipping whitespace and punctuation and lowercasing every token. The keyword
pipeline only depends on the GrammaticalTagger protocol, so any classifier can
be plugged in:

- SpacyTagger wraps a spaCy pipeline (the production adapter)
- ScriptedTagger replays a fixed (token, tag) sequence
"""

import json
import unicodedata
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple, Union

import spacy
from spacy.language import Language
from spacy.tokens import Token

from .config import config
from .types import GrammaticalTag, TaggedToken


class TaggerError(Exception):
    """Raised when a tagger cannot be created or loaded."""

    pass


class GrammaticalTagger(Protocol):
    """Anything that can tag a text word by word."""

    def tag(self, text: str) -> Iterator[TaggedToken]: ...


def normalize_token(text: str) -> str:
    """Case-fold a token the way the keyword filter expects it (NFC, lowercase)."""
    return unicodedata.normalize("NFC", text).lower()


# spaCy entity labels differ between model families (es/de use PER, en uses PERSON)
PERSON_LABELS = {"PER", "PERSON"}
PLACE_LABELS = {"LOC", "GPE"}
ORGANIZATION_LABELS = {"ORG"}

POS_TAGS = {
    "NOUN": GrammaticalTag.NOUN,
    "PROPN": GrammaticalTag.NOUN,
    "ADJ": GrammaticalTag.ADJECTIVE,
}


class SpacyTagger:
    """
    Tagger backed by a spaCy pipeline.

    Named entities spanning several tokens are merged into a single token, so
    "Juan Pérez" reaches the filter as one personal name. Tokens for which the
    pipeline assigns no part of speech (e.g. a blank pipeline) come out untagged.
    """

    def __init__(self, nlp: Optional[Language] = None, model: Optional[str] = None, join_names: bool = True):
        self._nlp = nlp
        self.model = model or config.tagger_model
        self.join_names = join_names

    @property
    def nlp(self) -> Language:
        if self._nlp is None:
            try:
                self._nlp = spacy.load(self.model)
            except OSError as e:
                raise TaggerError(f"spaCy model '{self.model}' is not installed. Install it with: python -m spacy download {self.model}") from e
        return self._nlp

    def tag(self, text: str) -> Iterator[TaggedToken]:
        if not text.strip():
            return
        doc = self.nlp(text)
        if self.join_names and doc.ents:
            with doc.retokenize() as retokenizer:
                for ent in doc.ents:
                    if len(ent) > 1:
                        retokenizer.merge(ent, attrs={"ent_type": ent.label})
        for token in doc:
            if token.is_space or token.is_punct:
                continue
            yield TaggedToken(text=normalize_token(token.text), tag=self._category(token))

    @staticmethod
    def _category(token: Token) -> Optional[GrammaticalTag]:
        label = token.ent_type_
        if label in PERSON_LABELS:
            return GrammaticalTag.PERSONAL_NAME
        if label in PLACE_LABELS:
            return GrammaticalTag.PLACE_NAME
        if label in ORGANIZATION_LABELS:
            return GrammaticalTag.ORGANIZATION_NAME
        if not token.pos_:
            return None
        return POS_TAGS.get(token.pos_, GrammaticalTag.OTHER)


TagLike = Union[GrammaticalTag, str, None]


class ScriptedTagger:
    """
    Tagger that replays a pre-scripted sequence of (token, tag) pairs.

    The text passed to tag() is ignored; every call yields the script again.
    The number of calls is tracked so callers can check whether tagging ran.
    """

    def __init__(self, script: Iterable[Tuple[str, TagLike]]):
        self.script: List[TaggedToken] = [TaggedToken(text=normalize_token(token), tag=GrammaticalTag(tag) if tag else None) for token, tag in script]
        self.calls = 0

    def tag(self, text: str) -> Iterator[TaggedToken]:
        self.calls += 1
        yield from self.script

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "ScriptedTagger":
        """
        Load a script from a JSON file holding a list of [token, tag] pairs.

        Raises:
            TaggerError: If the file is missing or malformed
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise TaggerError(f"Failed to read tag script '{path}': {e}") from e

        if not isinstance(data, list):
            raise TaggerError(f"Tag script '{path}' must be a JSON list of [token, tag] pairs")
        pairs: List[Tuple[str, TagLike]] = []
        for item in data:
            if not isinstance(item, Sequence) or isinstance(item, str) or len(item) != 2:
                raise TaggerError(f"Invalid tag script entry: {item!r}")
            token, tag = item
            try:
                pairs.append((str(token), GrammaticalTag(tag) if tag else None))
            except ValueError as e:
                raise TaggerError(f"Unknown grammatical tag in tag script: {tag!r}") from e
        return cls(pairs)
