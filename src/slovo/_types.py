"""Data structures for slovo."""

from __future__ import annotations

from dataclasses import dataclass, field

CASES: tuple[str, ...] = ("nomn", "gent", "datv", "accs", "ablt", "loct")
NUMBERS: tuple[str, ...] = ("sing", "plur")
GENDERS: tuple[str, ...] = ("masc", "femn", "neut")
ANIMACY: tuple[str, ...] = ("anim", "inan")

DICTIONARY = "dictionary"
GUESSED = "guessed"


def _pick(grammemes: frozenset[str], group: tuple[str, ...]) -> str | None:
    for g in group:
        if g in grammemes:
            return g
    return None


@dataclass(slots=True, frozen=True)
class Tag:
    raw: str                    # "NOUN,inan,masc,sing,nomn"
    pos: str                    # first grammeme
    grammemes: frozenset[str] = field(compare=False)

    @classmethod
    def parse(cls, raw: str) -> Tag:
        parts = [p for p in raw.split(",") if p]
        if not parts:
            raise ValueError(f"empty tag: {raw!r}")
        return cls(raw=",".join(parts), pos=parts[0], grammemes=frozenset(parts))

    def __str__(self) -> str:
        return self.raw

    def __contains__(self, grammeme: str) -> bool:
        return grammeme in self.grammemes

    @property
    def case(self) -> str | None:
        return _pick(self.grammemes, CASES)

    @property
    def number(self) -> str | None:
        return _pick(self.grammemes, NUMBERS)

    @property
    def gender(self) -> str | None:
        return _pick(self.grammemes, GENDERS)

    @property
    def animacy(self) -> str | None:
        return _pick(self.grammemes, ANIMACY)


UNKNOWN_TAG = Tag.parse("UNKN")


@dataclass(slots=True, frozen=True)
class ParadigmForm:
    suffix: str
    tag: Tag
    weight: float   # relative form frequency, 0.0-1.0


@dataclass(slots=True, frozen=True)
class Paradigm:
    forms: tuple[ParadigmForm, ...]             # forms[0] is the normal form
    by_suffix: dict[str, tuple[ParadigmForm, ...]] = field(compare=False)

    @classmethod
    def from_forms(cls, forms: tuple[ParadigmForm, ...]) -> Paradigm:
        index: dict[str, list[ParadigmForm]] = {}
        for form in forms:
            index.setdefault(form.suffix, []).append(form)
        return cls(
            forms=forms,
            by_suffix={k: tuple(v) for k, v in index.items()},
        )

    @property
    def lemma_suffix(self) -> str:
        return self.forms[0].suffix


@dataclass(slots=True, frozen=True)
class Token:
    text: str
    start: int        # character offsets into the analyzed text
    end: int
    byte_start: int   # UTF-8 byte offsets
    byte_end: int
    is_word: bool

    @property
    def is_space(self) -> bool:
        return not self.is_word and self.text.isspace()


@dataclass(slots=True, frozen=True)
class Analysis:
    lemma: str
    tag: Tag
    score: float
    provenance: str = DICTIONARY

    @property
    def is_guessed(self) -> bool:
        return self.provenance != DICTIONARY


@dataclass(slots=True, frozen=True)
class AnalyzedToken:
    token: Token
    analyses: list[Analysis]    # ranked, highest score first; [] for delimiters

    @property
    def text(self) -> str:
        return self.token.text

    @property
    def is_word(self) -> bool:
        return self.token.is_word

    @property
    def best(self) -> Analysis | None:
        return self.analyses[0] if self.analyses else None

    @property
    def lemma(self) -> str:
        """Best lemma for a word, the original text for a delimiter."""
        best = self.best
        return best.lemma if best is not None else self.token.text


def candidate_order(analysis: Analysis) -> tuple[str, str]:
    """Deterministic declared order of a candidate set: tag, then lemma."""
    return (analysis.tag.raw, analysis.lemma)
