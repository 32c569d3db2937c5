"""
Shared test fixtures for jsonmock tests.
"""
import copy
import json
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from jsonmock import create_app
from jsonmock.config import TestConfig
from jsonmock.extensions import STORE_KEY
from jsonmock.storage.json_store import DocumentStore


SEED_DATA = {
    "posts": [
        {"id": 1, "title": "First", "author": "ann"},
        {"id": 2, "title": "Second", "author": "bob"},
        {"id": 3, "title": "Third", "author": "cy"},
    ],
    "comments": [],
}


def write_db(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def read_db(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def db_file(tmp_path: Path) -> Path:
    """A backing file seeded with a few posts and an empty collection."""
    return write_db(tmp_path / "db.json", SEED_DATA)


@pytest.fixture
def empty_db_file(tmp_path: Path) -> Path:
    return write_db(tmp_path / "db.json", {})


@pytest.fixture
def document_store(db_file: Path) -> DocumentStore:
    return DocumentStore.load(db_file)


@pytest.fixture
def app(db_file: Path) -> Flask:
    """Create a test Flask application bound to a temporary backing file."""
    yield create_app(TestConfig, db_path=db_file)


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a Flask test client."""
    return app.test_client()


@pytest.fixture
def store(app: Flask) -> DocumentStore:
    """The store instance the app serves from."""
    return app.extensions[STORE_KEY]


@pytest.fixture
def seed_data() -> dict:
    return copy.deepcopy(SEED_DATA)


@pytest.fixture
def make_db(tmp_path: Path):
    """Factory writing arbitrary content to a fresh backing file."""
    def _make(data, name: str = "custom.json") -> Path:
        return write_db(tmp_path / name, data)
    return _make


@pytest.fixture
def disk_data():
    """Reader for what a backing file currently holds."""
    return read_db
