"""Lossless segmentation of text into word and delimiter tokens."""

from __future__ import annotations

import re
from collections.abc import Iterator

from ._text import byte_length
from ._types import Token

# A letter followed by any combining diacritics (stress marks, decomposed ё and й).
_LETTER = r"[^\W\d_][\u0300-\u036f]*"
# Hyphens and apostrophes stay inside a word when flanked by letters.
_WORD_RE = re.compile(rf"(?:{_LETTER})+(?:[-'’](?:{_LETTER})+)*")
# Delimiter runs are split so every line break is its own token.
_DELIM_RE = re.compile(r"\r\n|\n|\r|[^\r\n]+")


def _scan(text: str) -> Iterator[Token]:
    pos = 0
    byte_pos = 0

    def emit(piece: str, is_word: bool) -> Token:
        nonlocal pos, byte_pos
        nbytes = byte_length(piece)
        tok = Token(
            text=piece,
            start=pos,
            end=pos + len(piece),
            byte_start=byte_pos,
            byte_end=byte_pos + nbytes,
            is_word=is_word,
        )
        pos += len(piece)
        byte_pos += nbytes
        return tok

    for m in _WORD_RE.finditer(text):
        if m.start() > pos:
            for d in _DELIM_RE.finditer(text, pos, m.start()):
                yield emit(d.group(), False)
        yield emit(m.group(), True)

    if pos < len(text):
        for d in _DELIM_RE.finditer(text, pos):
            yield emit(d.group(), False)


class TokenStream:
    """Lazy, restartable token sequence over one text.

    Every iteration rescans the text; concatenating the token texts
    reproduces it exactly.
    """

    __slots__ = ("_text",)

    def __init__(self, text: str) -> None:
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def __iter__(self) -> Iterator[Token]:
        return _scan(self._text)

    def words(self) -> Iterator[Token]:
        return (t for t in _scan(self._text) if t.is_word)


def tokenize(text: str) -> TokenStream:
    return TokenStream(text)
