from __future__ import annotations

from dataclasses import dataclass


class InvalidInputError(ValueError):
    """Raised when a corpus, vocabulary or ranking cannot be processed."""


class DivisionError(ZeroDivisionError):
    """Raised when a ratio is requested over zero tokens."""


class ConfigurationError(UserWarning):
    """Warning for a setting that was out of range and has been clamped."""


@dataclass
class Document:
    """Dataclass for a raw document in the collection."""
    id: str
    text: str


@dataclass(frozen=True)
class TokenizedDocument:
    """Dataclass for a document that has been tokenized."""
    id: str
    tokens: tuple[str, ...]


@dataclass(frozen=True)
class VocabularyEntry:
    """Dataclass for a word type and its total count in the corpus."""
    word: str
    count: int


@dataclass(frozen=True)
class RankedEntry:
    """Dataclass for a word type at a given frequency rank (1 is most frequent)."""
    rank: int
    word: str
    count: int
