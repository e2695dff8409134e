"""
Token Model

Defines the tagged token record consumed by predicates and the token
sources that produce it.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

WORD_RE = re.compile(r"\w+(?:-\w+)*|[^\w\s]", re.UNICODE)


@dataclass(frozen=True)
class Token:
    """A single word (or punctuation mark) with its normal form and grammemes."""

    text: str
    lemma: str
    tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_row(cls, text: str, lemma: str = "", tags: Any = ()) -> "Token":
        """Builds a token, lowering the lemma and normalizing tags to a frozenset."""
        if isinstance(tags, str):
            tags = tags.split(",")
        return cls(
            text=text,
            lemma=(lemma or text).lower(),
            tags=frozenset(t.strip() for t in tags if t and t.strip()),
        )

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


class TokenSource(Protocol):
    """
    Interface for tokenizers / morphological taggers.
    Turns raw text into an ordered sequence of tokens.
    """

    def __call__(self, text: str) -> Sequence[Token]:
        ...


def tokenize(text: str) -> list[Token]:
    """Splits text into word and punctuation tokens without tagging."""
    return [Token(text=m.group(0), lemma=m.group(0).lower()) for m in WORD_RE.finditer(text)]


class LexiconTagger:
    """
    Dictionary-backed tagger.

    Looks up each lower-cased word form in a lexicon of
    ``form -> {"lemma": ..., "tags": [...]}`` entries. Unknown forms keep
    their lower-cased text as lemma and get no tags.
    """

    def __init__(self, lexicon: Mapping[str, Mapping[str, Any]]):
        self._lexicon = {form.lower(): entry for form, entry in lexicon.items()}

    def __call__(self, text: str) -> list[Token]:
        tokens = []
        for raw in tokenize(text):
            entry = self._lexicon.get(raw.lemma)
            if entry is None:
                tokens.append(raw)
                continue
            tokens.append(
                Token.from_row(raw.text, entry.get("lemma", raw.lemma), entry.get("tags", ()))
            )
        return tokens

    def __len__(self) -> int:
        return len(self._lexicon)
