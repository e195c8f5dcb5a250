"""Tests for data loading and validation."""

import json
import shutil
from pathlib import Path

import pytest

import slovo
from slovo._errors import (
    SlovoChecksumError,
    SlovoResourceError,
    SlovoVersionError,
)
from slovo._loader import _DATA_FILES, _default_data_dir, load_data
from slovo._types import Paradigm, Tag

from conftest import write_resource


def _copy_bundled(tmpdir: Path) -> Path:
    for f in _default_data_dir().iterdir():
        shutil.copy2(f, tmpdir)
    return Path(tmpdir)


def test_load_default():
    """Loading with default path should succeed."""
    data = load_data()
    for key in ("tags", "paradigms", "stems", "suffixes", "transitions",
                "government", "constants"):
        assert key in data
    assert data["version"] == "1.0"


def test_load_explicit_path():
    """Loading from an explicit path should work."""
    data = load_data(_default_data_dir())
    assert len(data["paradigms"]) == 23
    assert len(data["tags"]) == 140


def test_bundled_tables_shape():
    """Bundled tables have the expected sizes."""
    data = load_data()
    assert all(isinstance(t, Tag) for t in data["tags"])
    assert all(isinstance(p, Paradigm) for p in data["paradigms"])
    assert "привет" in data["stems"]
    # personal pronouns live on the empty stem
    assert "" in data["stems"]
    assert data["government"]["в"] == frozenset({"accs", "loct"})


def test_weights_are_dequantized():
    """Quantized weights are divided by weight_scale."""
    data = load_data()
    stol = data["paradigms"][0]
    assert stol.forms[0].weight == pytest.approx(1.0)
    assert stol.forms[1].weight == pytest.approx(0.7)
    pid, freq = data["stems"]["привет"][0]
    assert pid == 0
    assert freq == pytest.approx(0.6)


def test_paradigm_normal_form_first():
    """Form 0 of a verb paradigm is the infinitive."""
    data = load_data()
    verb = data["paradigms"][10]
    assert verb.lemma_suffix == "ть"
    assert verb.forms[0].tag.pos == "INFN"


def test_missing_directory():
    """A missing directory should raise SlovoResourceError."""
    with pytest.raises(SlovoResourceError, match="manifest.json not found"):
        load_data("/nonexistent/path")


def test_version_mismatch(tmp_path):
    """Tampered version should raise SlovoVersionError."""
    data_dir = _copy_bundled(tmp_path)
    manifest_path = data_dir / "manifest.json"
    with open(manifest_path) as f:
        manifest = json.load(f)
    manifest["version"] = "99.0"
    with open(manifest_path, "w") as f:
        json.dump(manifest, f)
    with pytest.raises(SlovoVersionError):
        load_data(data_dir)


def test_checksum_mismatch(tmp_path):
    """Tampered file should raise SlovoChecksumError."""
    data_dir = _copy_bundled(tmp_path)
    with open(data_dir / "stems.bin", "ab") as f:
        f.write(b"tampered")
    with pytest.raises(SlovoChecksumError):
        load_data(data_dir)


def test_missing_data_file(tmp_path):
    """A file listed in the manifest must exist."""
    data_dir = _copy_bundled(tmp_path)
    (data_dir / "suffixes.bin").unlink()
    with pytest.raises(SlovoResourceError, match="Missing data file"):
        load_data(data_dir)


def test_checksum_errors_are_resource_errors():
    """Version and checksum errors subclass SlovoResourceError."""
    assert issubclass(SlovoChecksumError, SlovoResourceError)
    assert issubclass(SlovoVersionError, SlovoResourceError)


def test_corrupt_msgpack_with_valid_checksum(tmp_path, mini_tables):
    """Undecodable msgpack is reported as corrupt."""
    data_dir = write_resource(tmp_path / "bad", mini_tables)
    garbage = b"\xc1\xc1\xc1"
    (data_dir / "tags.bin").write_bytes(garbage)
    manifest = json.loads((data_dir / "manifest.json").read_text())
    import hashlib
    manifest["files"]["tags.bin"] = hashlib.sha256(garbage).hexdigest()
    (data_dir / "manifest.json").write_text(json.dumps(manifest))
    with pytest.raises(SlovoResourceError):
        load_data(data_dir)


def test_unknown_paradigm_reference(tmp_path, mini_tables):
    """A stem pointing past the paradigm table is rejected."""
    mini_tables["stems"]["кот"] = [[42, 100]]
    data_dir = write_resource(tmp_path / "bad", mini_tables)
    with pytest.raises(SlovoResourceError, match="unknown paradigm"):
        load_data(data_dir)


def test_missing_constant(tmp_path, mini_tables):
    """A missing scoring constant is named in the error."""
    del mini_tables["constants"]["guess_decay"]
    data_dir = write_resource(tmp_path / "bad", mini_tables)
    with pytest.raises(SlovoResourceError, match="guess_decay"):
        load_data(data_dir)


def test_bad_tag_id(tmp_path, mini_tables):
    """An out-of-range tag id is rejected."""
    mini_tables["paradigms"][2] = [["", 99, 1000]]
    data_dir = write_resource(tmp_path / "bad", mini_tables)
    with pytest.raises(SlovoResourceError):
        load_data(data_dir)


def test_negative_tag_id(tmp_path, mini_tables):
    """A negative tag id is rejected rather than wrapping to the last tag."""
    mini_tables["paradigms"][2] = [["", -1, 1000]]
    data_dir = write_resource(tmp_path / "bad", mini_tables)
    with pytest.raises(SlovoResourceError, match="unknown tag -1"):
        load_data(data_dir)


@pytest.mark.parametrize("paradigm_id", [-1, 3])
def test_suffix_unknown_paradigm(tmp_path, mini_tables, paradigm_id):
    """Suffix statistics must refer to an existing paradigm."""
    mini_tables["suffixes"]["ет"] = [[paradigm_id, 0, 2]]
    data_dir = write_resource(tmp_path / "bad", mini_tables)
    with pytest.raises(SlovoResourceError, match="unknown paradigm"):
        load_data(data_dir)


@pytest.mark.parametrize("count", [0, -3])
def test_suffix_count_must_be_positive(tmp_path, mini_tables, count):
    """Zero or negative suffix counts fail at load, not per request."""
    mini_tables["suffixes"]["ет"] = [[1, 1, count]]
    data_dir = write_resource(tmp_path / "bad", mini_tables)
    with pytest.raises(SlovoResourceError, match="non-positive count"):
        slovo.load(data_dir)


def test_load_fails_before_serving(tmp_path):
    """slovo.load fails at startup on a bad resource."""
    with pytest.raises(SlovoResourceError):
        slovo.load(tmp_path)


def test_all_data_files_listed_in_manifest():
    """The bundled manifest covers every data file."""
    manifest = json.loads((_default_data_dir() / "manifest.json").read_text())
    assert set(manifest["files"]) == set(_DATA_FILES)
