"""Engine configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Config:
    data_dir: Path | None = None      # None: bundled package data
    all_analyses: bool = False        # ranked alternatives instead of best only
    max_analyses: int | None = None   # cap for all_analyses; None keeps every one
    max_guesses: int = 3
    context_window: int = 2
    preserve_case: bool = False       # lemma casing follows the surface form
    line_framing: bool = True         # terminate non-empty input with "\n"

    def __post_init__(self) -> None:
        if self.max_analyses is not None and self.max_analyses < 1:
            raise ValueError(
                f"max_analyses must be >= 1 or None, got {self.max_analyses}"
            )
        if self.max_guesses < 1:
            raise ValueError(f"max_guesses must be >= 1, got {self.max_guesses}")
        if self.context_window < 1:
            raise ValueError(
                f"context_window must be >= 1, got {self.context_window}"
            )
        if self.data_dir is not None and not isinstance(self.data_dir, Path):
            object.__setattr__(self, "data_dir", Path(self.data_dir))


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in _FALSE_VALUES


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build a Config from SLOVO_* environment variables."""
    env = os.environ if environ is None else environ
    data_dir = env.get("SLOVO_DATA_DIR")
    max_analyses = _int(env, "SLOVO_MAX_ANALYSES", 0)
    return Config(
        data_dir=Path(data_dir) if data_dir else None,
        all_analyses=_flag(env, "SLOVO_ALL_ANALYSES", False),
        max_analyses=max_analyses or None,
        max_guesses=_int(env, "SLOVO_MAX_GUESSES", 3),
        context_window=_int(env, "SLOVO_CONTEXT_WINDOW", 2),
        preserve_case=_flag(env, "SLOVO_PRESERVE_CASE", False),
        line_framing=_flag(env, "SLOVO_LINE_FRAMING", True),
    )
