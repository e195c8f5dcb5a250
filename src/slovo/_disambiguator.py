"""Context scoring and selection of analyses, left to right."""

from __future__ import annotations

import math
import re
from collections import deque
from collections.abc import Iterable
from dataclasses import replace
from typing import TYPE_CHECKING

from ._types import AnalyzedToken

if TYPE_CHECKING:
    from ._dictionary import Dictionary
    from ._types import Analysis, Tag, Token

SENTENCE_START = "^"

# Parts of speech that agree with the noun they precede.
MODIFIERS = frozenset({"ADJF", "PRTF"})
# Parts of speech governed in case by a preceding preposition.
GOVERNED = frozenset({"NOUN", "ADJF", "PRTF", "NPRO"})

_SENTENCE_END_RE = re.compile(r"[.!?…]")
_MIN_WEIGHT = 1e-9


def agree(a: Tag, b: Tag) -> bool:
    """Case, number, gender (singular only) and animacy agreement.

    A feature missing on either side is not a conflict.
    """
    for left, right in (
        (a.case, b.case), (a.number, b.number), (a.animacy, b.animacy),
    ):
        if left is not None and right is not None and left != right:
            return False
    if a.number == "sing" and b.number == "sing":
        ga, gb = a.gender, b.gender
        if ga is not None and gb is not None and ga != gb:
            return False
    return True


def _softmax(scores: list[float]) -> list[float]:
    top = max(scores)
    exps = [math.exp(s - top) for s in scores]
    total = sum(exps)
    return [e / total for e in exps]


class Disambiguator:
    """Greedy left-to-right selection over a bounded window of prior choices.

    Each candidate is scored in log space from its intrinsic weight, the POS
    transition from the previous choice, preposition case government,
    agreement with the preceding modifier chain, and (for modifiers)
    agreement with the next word's candidates. Ties keep candidate order.
    """

    __slots__ = (
        "_dictionary", "_window", "_all_analyses", "_max_analyses",
    )

    def __init__(
        self,
        dictionary: Dictionary,
        *,
        window: int = 2,
        all_analyses: bool = False,
        max_analyses: int | None = None,
    ) -> None:
        self._dictionary = dictionary
        self._window = window
        self._all_analyses = all_analyses
        self._max_analyses = max_analyses

    def disambiguate(
        self, items: Iterable[tuple[Token, list[Analysis]]]
    ) -> list[AnalyzedToken]:
        """Rank the candidates of every word token; delimiters pass through."""
        items = list(items)
        lookahead = self._lookahead(items)
        history: deque[Analysis] = deque(maxlen=self._window)
        results: list[AnalyzedToken] = []

        for i, (token, candidates) in enumerate(items):
            if not token.is_word:
                results.append(AnalyzedToken(token, []))
                if _SENTENCE_END_RE.search(token.text):
                    history.clear()
                continue

            ranked = self.rank(candidates, history, lookahead[i])
            if ranked:
                history.append(ranked[0])
            if not self._all_analyses:
                ranked = ranked[:1]
            elif self._max_analyses is not None:
                ranked = ranked[: self._max_analyses]
            results.append(AnalyzedToken(token, ranked))

        return results

    def rank(
        self,
        candidates: list[Analysis],
        history: Iterable[Analysis] = (),
        following: list[Analysis] | None = None,
    ) -> list[Analysis]:
        """Candidates sorted by context score, scores normalized to sum to 1."""
        if not candidates:
            return []
        history = list(history)
        scores = [self.score(c, history, following) for c in candidates]
        probs = _softmax(scores)
        order = sorted(range(len(candidates)), key=lambda k: -scores[k])
        return [replace(candidates[k], score=probs[k]) for k in order]

    def score(
        self,
        candidate: Analysis,
        history: list[Analysis],
        following: list[Analysis] | None = None,
    ) -> float:
        d = self._dictionary
        tag = candidate.tag
        prev = history[-1] if history else None

        s = math.log(max(candidate.score, _MIN_WEIGHT))
        s += math.log(self._transition(
            prev.tag.pos if prev is not None else SENTENCE_START, tag.pos,
        ))

        if prev is not None and prev.tag.pos == "PREP" and tag.pos in GOVERNED:
            cases = d.government.get(prev.lemma)
            if cases and tag.case is not None:
                if tag.case in cases:
                    s += d.scaled("government_bonus")
                else:
                    s -= d.scaled("government_penalty")

        if tag.pos == "NOUN" or tag.pos in MODIFIERS:
            for left in reversed(history):
                if left.tag.pos not in MODIFIERS:
                    break
                s += self._agreement(left.tag, tag)

        if following and tag.pos in MODIFIERS:
            heads = [
                a for a in following
                if a.tag.pos == "NOUN" or a.tag.pos in MODIFIERS
            ]
            if heads:
                if any(agree(tag, a.tag) for a in heads):
                    s += d.scaled("agreement_bonus")
                else:
                    s -= d.scaled("agreement_penalty")

        return s

    def _agreement(self, left: Tag, right: Tag) -> float:
        d = self._dictionary
        if agree(left, right):
            return d.scaled("agreement_bonus")
        return -d.scaled("agreement_penalty")

    def _transition(self, prev_pos: str, pos: str) -> float:
        d = self._dictionary
        p = d.transitions.get(f"{prev_pos} {pos}")
        if p is None:
            p = d.scaled("transition_floor")
        return max(p, _MIN_WEIGHT)

    def _lookahead(
        self, items: list[tuple[Token, list[Analysis]]]
    ) -> list[list[Analysis] | None]:
        """Candidates of the next word in the same sentence, per position."""
        out: list[list[Analysis] | None] = [None] * len(items)
        following: list[Analysis] | None = None
        for i in range(len(items) - 1, -1, -1):
            token, candidates = items[i]
            out[i] = following
            if token.is_word:
                following = candidates
            elif _SENTENCE_END_RE.search(token.text):
                following = None
        return out
