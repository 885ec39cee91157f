"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from blacklist_registry.models import Entry  # noqa: E402
from blacklist_registry.storage import InMemoryRegistryStore  # noqa: E402
from blacklist_registry.validator import SchemaValidator  # noqa: E402

SAMPLE_DOCUMENTS = [
    {"position": 2, "name": "Raymond", "status": "active"},
    {"position": 5, "name": "", "status": "redacted"},
    {"position": 7, "name": "The Freelancer", "status": "deceased"},
    {"position": 12, "name": "Anslo Garrick", "status": "captured"},
    {"position": 31, "name": "Secret Name", "status": "redacted"},
    {"position": 104, "name": "Berlin", "status": "incarcerated"},
]


@pytest.fixture
def sample_documents():
    return [dict(doc) for doc in SAMPLE_DOCUMENTS]


@pytest.fixture
def sample_entries(sample_documents):
    return [Entry.model_validate(doc) for doc in sample_documents]


@pytest.fixture
def store(sample_entries):
    """In-memory store seeded out of position order."""
    return InMemoryRegistryStore(reversed(sample_entries))


@pytest.fixture
def validator():
    return SchemaValidator.default()


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document to a temp file and return its path."""

    def _write(data, name="data.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
