"""Analyzer: the engine façade over tokenizer, lookup, guesser and disambiguator."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ._config import Config
from ._disambiguator import Disambiguator
from ._formatter import restore_case, to_lemmas
from ._guesser import Guesser
from ._text import decode_input
from ._tokenizer import TokenStream, tokenize
from ._types import AnalyzedToken

if TYPE_CHECKING:
    from ._dictionary import Dictionary
    from ._types import Analysis, Token


class Analyzer:
    """Main analysis engine. Holds the loaded dictionary and exposes the public API.

    Requests share the dictionary read-only and keep no state between calls,
    so one Analyzer may serve any number of threads.
    """

    __slots__ = ("_dictionary", "_config", "_guesser", "_disambiguator")

    def __init__(self, dictionary: Dictionary, config: Config | None = None) -> None:
        self._dictionary = dictionary
        self._config = config if config is not None else Config()
        self._guesser = Guesser(dictionary, max_guesses=self._config.max_guesses)
        self._disambiguator = Disambiguator(
            dictionary,
            window=self._config.context_window,
            all_analyses=self._config.all_analyses,
            max_analyses=self._config.max_analyses,
        )

    @property
    def config(self) -> Config:
        return self._config

    @property
    def dictionary(self) -> Dictionary:
        return self._dictionary

    # -- Public analysis API --

    def lemmatize(self, text: str | bytes) -> list[str]:
        """Lemma per word token, delimiter text in between, in input order."""
        return to_lemmas(self.analyze(text))

    def analyze(self, text: str | bytes) -> list[AnalyzedToken]:
        """One record per token with ranked analyses (empty for delimiters)."""
        source = self._frame(decode_input(text))
        if not source:
            return []
        with self._dictionary.acquire():
            items = [(tok, self._token_candidates(tok)) for tok in tokenize(source)]
            records = self._disambiguator.disambiguate(items)
        if self._config.preserve_case:
            records = [self._restore_case(r) for r in records]
        return records

    def lemmatize_batch(self, texts: list[str | bytes]) -> list[list[str]]:
        return [self.lemmatize(t) for t in texts]

    def analyze_batch(self, texts: list[str | bytes]) -> list[list[AnalyzedToken]]:
        return [self.analyze(t) for t in texts]

    def parse(self, word: str) -> list[Analysis]:
        """Context-free candidates of a single word by intrinsic weight, best first."""
        with self._dictionary.acquire():
            candidates = self._candidates(word)
        total = sum(a.score for a in candidates) or 1.0
        ranked = sorted(candidates, key=lambda a: a.score, reverse=True)
        return [replace(a, score=a.score / total) for a in ranked]

    def tokenize(self, text: str | bytes) -> TokenStream:
        return tokenize(self._frame(decode_input(text)))

    def close(self, timeout: float | None = None) -> bool:
        """Unload the dictionary once in-flight requests finish."""
        return self._dictionary.close(timeout)

    def __enter__(self) -> Analyzer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- Internal methods --

    def _frame(self, source: str) -> str:
        if self._config.line_framing and source and not source.endswith("\n"):
            return source + "\n"
        return source

    def _candidates(self, word: str) -> list[Analysis]:
        """Non-empty candidate set: dictionary analyses, else guesses."""
        return self._dictionary.lookup(word) or self._guesser.guess(word)

    def _restore_case(self, record: AnalyzedToken) -> AnalyzedToken:
        if not record.is_word:
            return record
        surface = record.text
        return AnalyzedToken(
            record.token,
            [replace(a, lemma=restore_case(a.lemma, surface)) for a in record.analyses],
        )

    def _token_candidates(self, token: Token) -> list[Analysis]:
        return self._candidates(token.text) if token.is_word else []
