"""Input decoding and lookup-key normalization."""

from __future__ import annotations

from ._errors import SlovoInputError

# Combining acute and grave (stress marks) are dropped; ё folds to е, also
# when written as е plus a combining diaeresis.
_LOOKUP_TABLE = {0x0301: None, 0x0300: None, 0x0308: None, ord("ё"): "е"}


def decode_input(text: str | bytes) -> str:
    """Return text as str.

    Bytes are decoded as UTF-8 with ``surrogateescape`` so that malformed
    byte spans survive as lone surrogates instead of failing the request.
    """
    if isinstance(text, str):
        return text
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode("utf-8", errors="surrogateescape")
    raise SlovoInputError(
        f"expected str or bytes, got {type(text).__name__}"
    )


def normalize(word: str) -> str:
    """Lower-case, strip stress marks, compose й, fold ё to е."""
    return word.lower().replace("и\u0306", "й").translate(_LOOKUP_TABLE)


def byte_length(text: str) -> int:
    """UTF-8 length of text, counting escaped bytes as one byte each."""
    try:
        return len(text.encode("utf-8", errors="surrogateescape"))
    except UnicodeEncodeError:
        return len(text.encode("utf-8", errors="surrogatepass"))
