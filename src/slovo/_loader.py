"""Data loading, manifest validation, and SHA-256 checksum verification."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from importlib import resources
from pathlib import Path
from typing import Any

import msgpack

from ._errors import SlovoChecksumError, SlovoResourceError, SlovoVersionError
from ._types import Paradigm, ParadigmForm, Tag

logger = logging.getLogger(__name__)

_EXPECTED_VERSION = "1.0"

_DATA_FILES = (
    "tags.bin",
    "paradigms.bin",
    "stems.bin",
    "suffixes.bin",
    "context.bin",
    "constants.bin",
)

_REQUIRED_CONSTANTS = (
    "weight_scale",
    "transition_floor",
    "agreement_bonus",
    "agreement_penalty",
    "government_bonus",
    "government_penalty",
    "guess_decay",
    "hyphen_decay",
    "stemmer_bonus",
    "unknown_weight",
    "min_guess_length",
    "max_suffix_length",
)


def _default_data_dir() -> Path:
    return Path(str(resources.files("slovo") / "data"))


def _sha256(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()


def _read_manifest(data_dir: Path) -> dict[str, Any]:
    manifest_path = data_dir / "manifest.json"
    if not manifest_path.exists():
        raise SlovoResourceError(f"manifest.json not found in {data_dir}")
    try:
        with open(manifest_path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise SlovoResourceError(f"Corrupt manifest.json in {data_dir}: {e}") from e


def _validate_manifest(manifest: dict[str, Any], data_dir: Path) -> None:
    version = manifest.get("version")
    if version != _EXPECTED_VERSION:
        raise SlovoVersionError(
            f"Expected data version {_EXPECTED_VERSION!r}, got {version!r}"
        )
    checksums = manifest.get("files", {})
    for filename in _DATA_FILES:
        filepath = data_dir / filename
        if not filepath.exists():
            raise SlovoResourceError(f"Missing data file: {filepath}")
        expected = checksums.get(filename)
        if expected is None:
            raise SlovoResourceError(f"No checksum in manifest for {filename}")
        actual = _sha256(filepath)
        if actual != expected:
            raise SlovoChecksumError(
                f"Checksum mismatch for {filename}: "
                f"expected {expected[:16]}..., got {actual[:16]}..."
            )


def _load_msgpack(path: Path) -> Any:
    with open(path, "rb") as f:
        try:
            return msgpack.unpackb(f.read(), raw=False)
        except ValueError as e:
            raise SlovoResourceError(f"Corrupt data file {path.name}: {e}") from e


def _build_tables(raw: dict[str, Any]) -> dict[str, Any]:
    constants = raw["constants"]
    missing = [k for k in _REQUIRED_CONSTANTS if k not in constants]
    if missing:
        raise SlovoResourceError(f"constants.bin lacks {', '.join(missing)}")
    scale = float(constants["weight_scale"])
    if scale <= 0:
        raise SlovoResourceError("weight_scale must be positive")

    tags = [Tag.parse(t) for t in raw["tags"]]

    # paradigms: list[list[(suffix, tag_id, weight_q)]]
    paradigms: list[Paradigm] = []
    for forms in raw["paradigms"]:
        if not forms:
            raise SlovoResourceError("Empty paradigm in paradigms.bin")
        for _, tag_id, _ in forms:
            if not 0 <= tag_id < len(tags):
                raise SlovoResourceError(
                    f"Paradigm form refers to unknown tag {tag_id}"
                )
        paradigms.append(Paradigm.from_forms(tuple(
            ParadigmForm(suffix=suffix, tag=tags[tag_id], weight=w / scale)
            for suffix, tag_id, w in forms
        )))

    # stems: dict[stem -> [(paradigm_id, freq_q)]]
    stems: dict[str, tuple[tuple[int, float], ...]] = {}
    for stem, entries in raw["stems"].items():
        for paradigm_id, _ in entries:
            if not 0 <= paradigm_id < len(paradigms):
                raise SlovoResourceError(
                    f"Stem {stem!r} refers to unknown paradigm {paradigm_id}"
                )
        stems[stem] = tuple((pid, freq / scale) for pid, freq in entries)

    # suffixes: dict[suffix -> [(paradigm_id, form_index, count)]]
    suffixes: dict[str, tuple[tuple[int, int, int], ...]] = {}
    for suffix, entries in raw["suffixes"].items():
        for paradigm_id, form_index, count in entries:
            if not 0 <= paradigm_id < len(paradigms):
                raise SlovoResourceError(
                    f"Suffix {suffix!r} refers to unknown paradigm {paradigm_id}"
                )
            if count <= 0:
                raise SlovoResourceError(
                    f"Suffix {suffix!r} has non-positive count {count}"
                )
            if not 0 <= form_index < len(paradigms[paradigm_id].forms):
                raise SlovoResourceError(
                    f"Suffix {suffix!r} refers to unknown form {form_index}"
                )
        suffixes[suffix] = tuple(tuple(e) for e in entries)  # type: ignore[misc]

    context = raw["context"]
    transitions = {
        key: q / scale for key, q in context.get("transitions", {}).items()
    }
    government = {
        prep: frozenset(cases)
        for prep, cases in context.get("government", {}).items()
    }

    return {
        "tags": tags,
        "paradigms": paradigms,
        "stems": stems,
        "suffixes": suffixes,
        "transitions": transitions,
        "government": government,
        "constants": constants,
    }


def load_data(data_dir: Path | str | None = None) -> dict[str, Any]:
    """Load and validate all data files, returning a dict of parsed structures."""
    if data_dir is None:
        data_dir = _default_data_dir()
    else:
        data_dir = Path(data_dir)

    started = time.perf_counter()
    manifest = _read_manifest(data_dir)
    _validate_manifest(manifest, data_dir)

    raw = {
        filename[: -len(".bin")]: _load_msgpack(data_dir / filename)
        for filename in _DATA_FILES
    }
    try:
        tables = _build_tables(raw)
    except SlovoResourceError:
        raise
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        raise SlovoResourceError(f"Malformed dictionary data in {data_dir}: {e}") from e

    logger.info(
        "Loaded dictionary from %s: %d stems, %d paradigms, %d suffixes in %.1f ms",
        data_dir, len(tables["stems"]), len(tables["paradigms"]),
        len(tables["suffixes"]), (time.perf_counter() - started) * 1000,
    )
    tables["version"] = manifest["version"]
    tables["data_dir"] = data_dir
    return tables
