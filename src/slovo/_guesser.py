"""Analyses for out-of-dictionary words: hyphen split, known suffixes, fallback."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

import Stemmer

from ._dictionary import build_suffix_automaton, matching_suffixes
from ._text import normalize
from ._types import GUESSED, UNKNOWN_TAG, Analysis, candidate_order

if TYPE_CHECKING:
    from ._dictionary import Dictionary

logger = logging.getLogger(__name__)

_HYPHENS = "-'’"


class Guesser:
    """Guess analyses by analogy with dictionary words sharing a suffix.

    Example: гуляешь -> ...аешь, parsed like читаешь -> гулять.
    """

    __slots__ = ("_dictionary", "_max_guesses", "_suffix_ac", "_local")

    def __init__(self, dictionary: Dictionary, max_guesses: int = 3) -> None:
        self._dictionary = dictionary
        self._max_guesses = max_guesses
        max_len = dictionary.constant("max_suffix_length")
        self._suffix_ac = build_suffix_automaton(
            s for s in dictionary.suffixes if len(s) <= max_len
        )
        # Stemmer objects must not be shared between threads.
        self._local = threading.local()

    @property
    def max_guesses(self) -> int:
        return self._max_guesses

    def _stemmer(self) -> Stemmer.Stemmer:
        stemmer = getattr(self._local, "stemmer", None)
        if stemmer is None:
            stemmer = Stemmer.Stemmer("russian")
            self._local.stemmer = stemmer
        return stemmer

    def guess(self, word: str) -> list[Analysis]:
        """Never-empty list of guessed analyses, in candidate order."""
        self._dictionary.check_open()
        key = normalize(word)
        guesses = self._hyphenated(key) or self._known_suffix(key)
        if not guesses:
            logger.debug("No guess for %r, using the surface form", word)
            return [self.fallback(key or word)]
        return self._top(guesses)

    def fallback(self, key: str) -> Analysis:
        """The surface form as its own lemma with the unknown tag."""
        return Analysis(
            lemma=key,
            tag=UNKNOWN_TAG,
            score=self._dictionary.scaled("unknown_weight"),
            provenance=GUESSED,
        )

    def _top(self, guesses: list[Analysis]) -> list[Analysis]:
        best: dict[tuple[str, str], Analysis] = {}
        for g in guesses:
            ident = (g.lemma, g.tag.raw)
            prev = best.get(ident)
            if prev is None or g.score > prev.score:
                best[ident] = g
        ranked = sorted(best.values(), key=candidate_order)
        ranked.sort(key=lambda a: a.score, reverse=True)
        return sorted(ranked[: self._max_guesses], key=candidate_order)

    def _hyphenated(self, key: str) -> list[Analysis]:
        """интернет-магазина -> "интернет-" + магазин."""
        head, sep, tail = key.rpartition("-")
        if not sep or not head or not tail or head[-1] in _HYPHENS:
            return []
        decay = self._dictionary.scaled("hyphen_decay")
        return [
            Analysis(
                lemma=f"{head}-{a.lemma}",
                tag=a.tag,
                score=a.score * decay,
                provenance=GUESSED,
            )
            for a in self._dictionary.lookup(tail)
        ]

    def _known_suffix(self, key: str) -> list[Analysis]:
        d = self._dictionary
        if len(key) < d.constant("min_guess_length"):
            return []

        # The longest known suffix decides; shorter ones are less specific.
        for suffix in reversed(matching_suffixes(self._suffix_ac, key)):
            if len(suffix) >= len(key):
                continue
            result = self._from_suffix(key, suffix)
            if result:
                return result
        return []

    def _from_suffix(self, key: str, suffix: str) -> list[Analysis]:
        d = self._dictionary
        entries = d.suffixes[suffix]
        total = sum(count for _, _, count in entries)
        decay = d.scaled("guess_decay")
        bonus = d.scaled("stemmer_bonus")

        snowball = self._stemmer().stemWord(key)
        boundary = len(snowball) if key.startswith(snowball) else -1

        result: list[Analysis] = []
        for paradigm_id, form_index, count in entries:
            paradigm = d.paradigms[paradigm_id]
            form = paradigm.forms[form_index]
            stem = key[: len(key) - len(form.suffix)]
            if not stem or not key.endswith(form.suffix):
                continue
            score = count / total * decay
            if len(stem) == boundary:
                score *= bonus
            result.append(Analysis(
                lemma=stem + paradigm.lemma_suffix,
                tag=form.tag,
                score=score,
                provenance=GUESSED,
            ))
        return result
