from __future__ import annotations

import functools

from doctypes import InvalidInputError, RankedEntry, TokenizedDocument
from ranker import (build_document_term_matrix, build_vocabulary,
                    filter_meaningful_range, rank, type_token_ratio)


class FrequencyRanker():
    def __init__(
        self,
        docs: list[TokenizedDocument],
        stopwords: frozenset[str] = frozenset(),
    ):
        if not docs:
            raise InvalidInputError('corpus must contain at least one document')
        self.docs = tuple(docs)
        self.stopwords = frozenset(stopwords)

    @functools.cached_property
    def _vocabulary(self) -> dict[str, int]:
        return build_vocabulary(self.docs)

    @functools.cached_property
    def _ranking(self) -> list[RankedEntry]:
        return rank(self._vocabulary)

    def vocabulary(self) -> dict[str, int]:
        return dict(self._vocabulary)

    def rank(self) -> list[RankedEntry]:
        return list(self._ranking)

    def document_term_matrix(self) -> dict[str, dict[str, int]]:
        return build_document_term_matrix(self.docs)

    def meaningful_range(self, min_frequency: int = 10) -> list[int]:
        return filter_meaningful_range(self._ranking, self.stopwords, min_frequency)

    def meaningful_words(self, min_frequency: int = 10) -> list[RankedEntry]:
        # ranks are 1-based positions in the ranking
        return [self._ranking[r - 1]
                for r in self.meaningful_range(min_frequency)]

    def type_token_ratio(self) -> float:
        return type_token_ratio(self._vocabulary)
