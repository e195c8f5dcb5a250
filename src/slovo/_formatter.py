"""Rendering of analyzed tokens as lemma streams, records, JSON and text."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from ._types import AnalyzedToken


def restore_case(lemma: str, surface: str) -> str:
    """Carry the casing pattern of the surface form over to the lemma."""
    if len(surface) > 1 and surface.isupper():
        return lemma.upper()
    if surface[:1].isupper():
        return lemma[:1].upper() + lemma[1:]
    return lemma


def to_lemmas(records: Iterable[AnalyzedToken]) -> list[str]:
    """Best lemma per word token, original text per delimiter token."""
    return [r.lemma for r in records]


def reconstruct(records: Iterable[AnalyzedToken]) -> str:
    """The analyzed text, rebuilt from the original token surfaces."""
    return "".join(r.text for r in records)


def substitute(records: Iterable[AnalyzedToken]) -> str:
    """The analyzed text with every word replaced by its lemma."""
    return "".join(to_lemmas(records))


def to_records(
    records: Iterable[AnalyzedToken],
    *,
    grammar: bool = True,
    weights: bool = False,
) -> list[dict[str, Any]]:
    """JSON-ready records.

    Words become ``{"text", "analysis": [{"lex", "gr", "wt", "qual"}]}``,
    delimiters ``{"text"}``. ``qual`` is ``"bastard"`` for guessed analyses.
    """
    out: list[dict[str, Any]] = []
    for r in records:
        if not r.is_word:
            out.append({"text": r.text})
            continue
        analysis = []
        for a in r.analyses:
            item: dict[str, Any] = {"lex": a.lemma}
            if grammar:
                item["gr"] = a.tag.raw
            if weights:
                item["wt"] = a.score
            if a.is_guessed:
                item["qual"] = "bastard"
            analysis.append(item)
        out.append({"text": r.text, "analysis": analysis})
    return out


def to_json(
    records: Iterable[AnalyzedToken],
    *,
    grammar: bool = True,
    weights: bool = False,
) -> str:
    return json.dumps(
        to_records(records, grammar=grammar, weights=weights),
        ensure_ascii=False,
    )


def to_text(
    records: Iterable[AnalyzedToken],
    *,
    grammar: bool = False,
    weights: bool = False,
) -> str:
    """Inline text form: ``Привет{привет}``, alternatives joined by ``|``.

    With ``grammar`` each lemma carries ``=tag``; with ``weights`` a
    ``:score``. Guessed lemmas end in ``?``. Delimiters are copied as-is.
    """
    parts: list[str] = []
    for r in records:
        if not r.is_word:
            parts.append(r.text)
            continue
        alts = []
        for a in r.analyses:
            alt = a.lemma + ("?" if a.is_guessed else "")
            if grammar:
                alt += f"={a.tag.raw}"
            if weights:
                alt += f":{a.score:.4g}"
            alts.append(alt)
        parts.append(f"{r.text}{{{'|'.join(alts)}}}")
    return "".join(parts)
