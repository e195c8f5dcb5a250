"""Slovo: Russian morphological analysis, lemmatization and disambiguation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ._config import Config, load_config
from ._errors import (
    SlovoChecksumError,
    SlovoClosedError,
    SlovoError,
    SlovoInputError,
    SlovoResourceError,
    SlovoVersionError,
)
from ._formatter import (
    reconstruct,
    restore_case,
    substitute,
    to_json,
    to_lemmas,
    to_records,
    to_text,
)
from ._tokenizer import TokenStream, tokenize
from ._types import (
    DICTIONARY,
    GUESSED,
    UNKNOWN_TAG,
    Analysis,
    AnalyzedToken,
    Tag,
    Token,
)

if TYPE_CHECKING:
    from pathlib import Path

    from ._analyzer import Analyzer
    from ._dictionary import Dictionary

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "load",
    "load_dictionary",
    "Analysis",
    "AnalyzedToken",
    "Analyzer",
    "Config",
    "DICTIONARY",
    "Dictionary",
    "GUESSED",
    "SlovoChecksumError",
    "SlovoClosedError",
    "SlovoError",
    "SlovoInputError",
    "SlovoResourceError",
    "SlovoVersionError",
    "Tag",
    "Token",
    "TokenStream",
    "UNKNOWN_TAG",
    "load_config",
    "reconstruct",
    "restore_case",
    "substitute",
    "to_json",
    "to_lemmas",
    "to_records",
    "to_text",
    "tokenize",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())


def load_dictionary(data_dir: Path | str | None = None) -> "Dictionary":
    """Load and validate a dictionary resource.

    Args:
        data_dir: Path to data directory. If None, uses bundled package data.

    Raises:
        SlovoResourceError: The resource is missing, corrupt or of another version.
    """
    from ._dictionary import Dictionary
    from ._loader import load_data

    return Dictionary.from_tables(load_data(data_dir))


def load(
    data_dir: Path | str | None = None,
    config: Config | None = None,
    **overrides: Any,
) -> "Analyzer":
    """Load data and return a ready-to-use Analyzer.

    Args:
        data_dir: Path to data directory. Overrides ``config.data_dir``; if
            both are None, uses bundled package data.
        config: Engine configuration. Defaults to ``Config()``.
        **overrides: Config fields to replace, e.g. ``all_analyses=True``.
    """
    from dataclasses import replace

    from ._analyzer import Analyzer

    config = config if config is not None else Config()
    if overrides:
        config = replace(config, **overrides)
    return Analyzer(load_dictionary(data_dir or config.data_dir), config)


# Deferred imports so Analyzer and Dictionary are available as slovo.Analyzer
# and slovo.Dictionary without loading msgpack and ahocorasick up front.
def __getattr__(name: str):
    if name == "Analyzer":
        from ._analyzer import Analyzer
        return Analyzer
    if name == "Dictionary":
        from ._dictionary import Dictionary
        return Dictionary
    raise AttributeError(f"module 'slovo' has no attribute {name!r}")
