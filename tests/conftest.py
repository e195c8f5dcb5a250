"""Shared fixtures for slovo tests."""

import copy
import hashlib
import json
from pathlib import Path

import msgpack
import pytest

import slovo
from slovo._loader import _DATA_FILES

MINI_TABLES = {
    "tags": [
        "NOUN,inan,masc,sing,nomn",
        "NOUN,inan,masc,sing,gent",
        "NOUN,inan,masc,sing,accs",
        "NOUN,inan,masc,plur,nomn",
        "VERB,impf,sing,3per,pres,indc",
        "INFN,impf",
        "PREP",
    ],
    "paradigms": [
        [["", 0, 1000], ["а", 1, 700], ["", 2, 600], ["ы", 3, 500]],
        [["ть", 5, 800], ["ет", 4, 800]],
        [["", 6, 1000]],
    ],
    "stems": {
        "стол": [[0, 500]],
        "чита": [[1, 600]],
        "в": [[2, 1000]],
    },
    "suffixes": {
        "ол": [[0, 0, 1], [0, 2, 1]],
        "ет": [[1, 1, 2]],
        "ает": [[1, 1, 2]],
    },
    "context": {
        "transitions": {"^ NOUN": 600, "^ PREP": 500, "PREP NOUN": 900},
        "government": {"в": ["accs"]},
    },
    "constants": {
        "weight_scale": 1000,
        "transition_floor": 100,
        "agreement_bonus": 1500,
        "agreement_penalty": 1000,
        "government_bonus": 1500,
        "government_penalty": 1500,
        "guess_decay": 500,
        "hyphen_decay": 750,
        "stemmer_bonus": 1300,
        "unknown_weight": 100,
        "min_guess_length": 4,
        "max_suffix_length": 5,
    },
}


def write_resource(data_dir: Path, tables=None, *, version="1.0") -> Path:
    """Write tables as a msgpack dictionary resource with a valid manifest."""
    tables = MINI_TABLES if tables is None else tables
    data_dir.mkdir(parents=True, exist_ok=True)
    files = {}
    for filename in _DATA_FILES:
        payload = msgpack.packb(tables[filename[: -len(".bin")]], use_bin_type=True)
        (data_dir / filename).write_bytes(payload)
        files[filename] = hashlib.sha256(payload).hexdigest()
    with open(data_dir / "manifest.json", "w") as f:
        json.dump({"version": version, "files": files}, f)
    return data_dir


@pytest.fixture
def mini_tables():
    """A deep copy of the small test dictionary, safe to modify."""
    return copy.deepcopy(MINI_TABLES)


@pytest.fixture
def mini_dir(tmp_path):
    return write_resource(tmp_path / "mini")


@pytest.fixture
def mini_dictionary(mini_dir):
    return slovo.load_dictionary(mini_dir)


@pytest.fixture(scope="session")
def analyzer():
    """Load the bundled dictionary once for all tests."""
    return slovo.load()


@pytest.fixture
def fresh_analyzer():
    """A private analyzer that tests may close."""
    a = slovo.load()
    yield a
    a.close()
