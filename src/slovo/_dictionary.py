"""Shared read-only dictionary: paradigm tables, stem index, lifecycle."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import ahocorasick

from ._errors import SlovoClosedError
from ._text import normalize
from ._types import DICTIONARY, Analysis, Paradigm, Tag, candidate_order

logger = logging.getLogger(__name__)

# Appended to a word before the automaton scan; a match ending on it is a suffix.
_END = "\x00"


def build_suffix_automaton(suffixes) -> ahocorasick.Automaton | None:
    """Automaton over ``suffix + _END`` keys, valued by the suffix itself."""
    ac = ahocorasick.Automaton()
    n = 0
    for suffix in suffixes:
        if suffix:
            ac.add_word(suffix + _END, suffix)
            n += 1
    if n == 0:
        return None
    ac.make_automaton()
    return ac


def matching_suffixes(ac: ahocorasick.Automaton | None, word: str) -> list[str]:
    """All automaton suffixes the word ends with, shortest first."""
    if ac is None or not word:
        return []
    end = len(word)
    found = {suffix for idx, suffix in ac.iter(word + _END) if idx == end}
    return sorted(found, key=len)


class Dictionary:
    """Immutable dictionary resource shared by all components.

    Loaded once, read concurrently without locks, and unloaded by ``close``
    after in-flight requests (held through ``acquire``) have drained.
    """

    __slots__ = (
        "_tags", "_paradigms", "_stems", "_suffixes", "_transitions",
        "_government", "_constants", "_endings_ac", "_version", "_data_dir",
        "_cond", "_active", "_closing", "_closed",
    )

    def __init__(
        self,
        tags: list[Tag],
        paradigms: list[Paradigm],
        stems: dict[str, tuple[tuple[int, float], ...]],
        suffixes: dict[str, tuple[tuple[int, int, int], ...]],
        transitions: dict[str, float],
        government: dict[str, frozenset[str]],
        constants: dict[str, Any],
        version: str = "",
        data_dir: Path | None = None,
    ) -> None:
        self._tags = tags
        self._paradigms = paradigms
        self._stems = stems
        self._suffixes = suffixes
        self._transitions = transitions
        self._government = government
        self._constants = constants
        self._version = version
        self._data_dir = data_dir
        self._endings_ac = build_suffix_automaton(
            {form.suffix for p in paradigms for form in p.forms}
        )

        self._cond = threading.Condition()
        self._active = 0
        self._closing = False
        self._closed = False

    @classmethod
    def from_tables(cls, tables: dict[str, Any]) -> Dictionary:
        return cls(
            tags=tables["tags"],
            paradigms=tables["paradigms"],
            stems=tables["stems"],
            suffixes=tables["suffixes"],
            transitions=tables["transitions"],
            government=tables["government"],
            constants=tables["constants"],
            version=tables.get("version", ""),
            data_dir=tables.get("data_dir"),
        )

    # -- Read-only accessors --

    @property
    def version(self) -> str:
        return self._version

    @property
    def data_dir(self) -> Path | None:
        return self._data_dir

    @property
    def paradigms(self) -> list[Paradigm]:
        return self._paradigms

    @property
    def suffixes(self) -> dict[str, tuple[tuple[int, int, int], ...]]:
        return self._suffixes

    @property
    def transitions(self) -> dict[str, float]:
        return self._transitions

    @property
    def government(self) -> dict[str, frozenset[str]]:
        return self._government

    def constant(self, name: str) -> Any:
        return self._constants[name]

    def scaled(self, name: str) -> float:
        """A quantized constant divided by the weight scale."""
        return self._constants[name] / self._constants["weight_scale"]

    @property
    def n_stems(self) -> int:
        return len(self._stems)

    @property
    def closed(self) -> bool:
        return self._closed

    def check_open(self) -> None:
        """Raise SlovoClosedError once the tables have been released."""
        if self._closed:
            raise SlovoClosedError("dictionary has been unloaded")

    # -- Lookup --

    def lookup(self, word: str) -> list[Analysis]:
        """All dictionary analyses of a surface form, in candidate order.

        The whole word is tried as a stem first; then each known paradigm
        ending the word ends with is stripped and the remainder looked up.
        Returns [] when the word is not in the dictionary.
        """
        self.check_open()
        key = normalize(word)
        if not key:
            return []

        found: dict[tuple[str, str], Analysis] = {}
        for ending in ["", *matching_suffixes(self._endings_ac, key)]:
            stem = key[: len(key) - len(ending)]
            entries = self._stems.get(stem)
            if not entries:
                continue
            for paradigm_id, freq in entries:
                paradigm = self._paradigms[paradigm_id]
                forms = paradigm.by_suffix.get(ending)
                if not forms:
                    continue
                lemma = stem + paradigm.lemma_suffix
                for form in forms:
                    ident = (lemma, form.tag.raw)
                    weight = freq * form.weight
                    prev = found.get(ident)
                    if prev is None or weight > prev.score:
                        found[ident] = Analysis(lemma, form.tag, weight, DICTIONARY)

        return sorted(found.values(), key=candidate_order)

    def contains(self, word: str) -> bool:
        return bool(self.lookup(word))

    # -- Lifecycle --

    @contextmanager
    def acquire(self) -> Iterator[Dictionary]:
        """Hold the dictionary for the duration of one request."""
        with self._cond:
            if self._closing or self._closed:
                raise SlovoClosedError("dictionary has been unloaded")
            self._active += 1
        try:
            yield self
        finally:
            with self._cond:
                self._active -= 1
                if self._active == 0:
                    self._cond.notify_all()

    def close(self, timeout: float | None = None) -> bool:
        """Stop admitting requests, wait for in-flight ones, release tables.

        Returns False if ``timeout`` expired before the requests drained; the
        dictionary then stays loaded but refuses new requests.
        """
        with self._cond:
            if self._closed:
                return True
            self._closing = True
            if self._active:
                logger.debug("Waiting for %d in-flight requests", self._active)
            if not self._cond.wait_for(lambda: self._active == 0, timeout):
                return False
            self._closed = True
            self._stems = {}
            self._suffixes = {}
            self._paradigms = []
            self._transitions = {}
            self._government = {}
            self._endings_ac = None
        logger.info("Unloaded dictionary %s", self._data_dir or "")
        return True
