from __future__ import annotations

import warnings
from collections import Counter

import numpy as np

from doctypes import (ConfigurationError, DivisionError, InvalidInputError,
                      RankedEntry, TokenizedDocument, VocabularyEntry)


def build_vocabulary(docs: list[TokenizedDocument]) -> dict[str, int]:
    """Count every word type across all documents.

    Words are matched by exact string equality; no case folding or stemming
    is applied here (see util.tokenize for that).

    Arguments:
        docs: list of tokenized documents
    Returns:
        dict of words to their total counts, in first-seen order
    """
    counter = Counter()
    for doc in docs:
        if doc.tokens is None:
            raise InvalidInputError(f'document {doc.id!r} has no token sequence')
        counter.update(doc.tokens)
    return dict(counter)


def build_document_term_matrix(
    docs: list[TokenizedDocument],
) -> dict[str, dict[str, int]]:
    """Build a sparse document-term matrix.

    Arguments:
        docs: list of tokenized documents
    Returns:
        dict of document ids to dicts of words to their counts in that document
    """
    dtm = {}
    for doc in docs:
        if doc.id in dtm:
            raise InvalidInputError(f'duplicate document id {doc.id!r}')
        if doc.tokens is None:
            raise InvalidInputError(f'document {doc.id!r} has no token sequence')
        dtm[doc.id] = dict(Counter(doc.tokens))
    return dtm


def vocabulary_entries(vocabulary: dict[str, int]) -> list[VocabularyEntry]:
    entries = []
    for word, count in vocabulary.items():
        if count < 0:
            raise InvalidInputError(f'negative count {count} for {word!r}')
        entries.append(VocabularyEntry(word, count))
    return entries


def rank(vocabulary: dict[str, int]) -> list[RankedEntry]:
    """Rank word types by descending frequency.

    Ties keep the insertion order of the vocabulary (sorted() is stable), so
    a vocabulary from build_vocabulary breaks ties by first appearance.

    Arguments:
        vocabulary: dict of words to counts
    Returns:
        ranked list of entries with ranks 1..N
    """
    if not vocabulary:
        raise InvalidInputError('cannot rank an empty vocabulary')
    entries = sorted(vocabulary_entries(vocabulary),
                     key=lambda e: e.count, reverse=True)
    return [RankedEntry(i + 1, e.word, e.count) for i, e in enumerate(entries)]


def ranking_to_vocabulary(ranking: list[RankedEntry]) -> dict[str, int]:
    """Convert a ranking back to a vocabulary in rank order."""
    return {entry.word: entry.count for entry in ranking}


def _check_min_frequency(min_frequency: int) -> int:
    if min_frequency < 0:
        warnings.warn(f'min_frequency={min_frequency} is negative, using 0',
                      ConfigurationError, stacklevel=3)
        return 0
    return min_frequency


def excluded_ranks(
    ranking: list[RankedEntry],
    stopwords: frozenset[str],
    min_frequency: int = 10,
) -> list[int]:
    """Return the ranks of stop-words and words rarer than min_frequency.

    Arguments:
        ranking: output of rank
        stopwords: words to exclude regardless of frequency
        min_frequency: words with a lower count are excluded (<= 0 disables)
    Returns:
        excluded ranks in ascending order
    """
    min_frequency = _check_min_frequency(min_frequency)
    return [entry.rank for entry in ranking
            if entry.word in stopwords or entry.count < min_frequency]


def filter_meaningful_range(
    ranking: list[RankedEntry],
    stopwords: frozenset[str],
    min_frequency: int = 10,
) -> list[int]:
    """Return the ranks that are neither stop-words nor rare words.

    Arguments:
        ranking: output of rank
        stopwords: words to exclude regardless of frequency
        min_frequency: words with a lower count are excluded (<= 0 disables)
    Returns:
        meaningful ranks in ascending order
    """
    min_frequency = _check_min_frequency(min_frequency)
    return [entry.rank for entry in ranking
            if entry.word not in stopwords and entry.count >= min_frequency]


def type_token_ratio(vocabulary: dict[str, int]) -> float:
    """Calculate the type-token ratio of a vocabulary.

    Arguments:
        vocabulary: dict of words to counts
    Returns:
        number of word types divided by number of tokens
    """
    # zero-count entries are not types of this corpus
    counts = [e.count for e in vocabulary_entries(vocabulary) if e.count > 0]
    total = sum(counts)
    if total == 0:
        raise DivisionError('type-token ratio of a corpus with no tokens')
    return len(counts) / total


def zipf_expected(ranking: list[RankedEntry]) -> list[float]:
    """Return the ideal Zipf frequencies C / r, C being the top count."""
    if not ranking:
        return []
    C = ranking[0].count
    return [C / entry.rank for entry in ranking]


def fit_zipf_exponent(ranking: list[RankedEntry]) -> float:
    """Fit the exponent s of f(r) = C / r**s by least squares in log-log space.

    Arguments:
        ranking: output of rank
    Returns:
        fitted exponent (close to 1 for natural language)
    """
    points = [(entry.rank, entry.count) for entry in ranking if entry.count > 0]
    if len(points) < 2:
        raise InvalidInputError('need at least two ranked words to fit')
    ranks, counts = np.array(points, dtype=float).T
    slope, _ = np.polyfit(np.log(ranks), np.log(counts), 1)
    return float(-slope)
