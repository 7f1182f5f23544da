# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory store standing in for Supabase
# - Mocked OpenAI client
# - TestClient wired through app.dependency_overrides (lifespan not run)
# =============================================================================

import os
from copy import deepcopy
from unittest.mock import MagicMock

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest

from core.models.symptoms import SCHEMA_VERSION, empty_counts
from lib.supabase_client import DuplicateKeyError, SupabaseClientError


# =============================================================================
# Fakes
# =============================================================================

class FakeStore:
    """In-memory replacement for SupabaseClient with the same methods."""

    def __init__(self):
        self.zips: dict[str, dict] = {}
        self.users: dict[str, dict] = {}
        self.update_calls = 0
        self.fail_with: Exception | None = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def ping(self):
        self._check()

    def close(self):
        pass

    def fetch_zip(self, zip_code):
        self._check()
        doc = self.zips.get(zip_code)
        return deepcopy(doc) if doc is not None else None

    def update_zip_entries(self, zip_code, entries, schema_version):
        self._check()
        if zip_code not in self.zips:
            raise SupabaseClientError("no match", code="UPDATE_ZIP_NO_MATCH")
        self.update_calls += 1
        self.zips[zip_code]["entries"] = deepcopy(entries)
        self.zips[zip_code]["schema_version"] = schema_version

    def upsert_zip(self, zip_code, population):
        self._check()
        doc = self.zips.setdefault(
            zip_code,
            {"zip": zip_code, "entries": [], "schema_version": SCHEMA_VERSION},
        )
        doc["population"] = population

    def fetch_user_by_email(self, email):
        self._check()
        row = self.users.get(email)
        return dict(row) if row is not None else None

    def insert_user(self, row):
        self._check()
        if row["email"] in self.users:
            raise DuplicateKeyError("users")
        self.users[row["email"]] = dict(row)
        return dict(row)


def make_entry(day: int, **counts) -> dict:
    """Stored-shape day entry with the full symptom key set."""
    symptoms = empty_counts()
    symptoms.update(counts)
    return {"day": day, "symptoms": symptoms}


def make_completion(content: str | None) -> MagicMock:
    """Mock chat completion response carrying `content`."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_store():
    """Store seeded with one ZIP that has a day-100 entry and one without population."""
    store = FakeStore()
    store.zips["91344"] = {
        "zip": "91344",
        "entries": [make_entry(100, fever=5)],
        "population": 52450,
        "schema_version": SCHEMA_VERSION,
    }
    store.zips["90001"] = {
        "zip": "90001",
        "entries": [],
        "population": None,
        "schema_version": SCHEMA_VERSION,
    }
    return store


@pytest.fixture
def mock_openai():
    """OpenAI client whose chat completion returns a fixed analysis."""
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion('  {"possibleDiseases": ["none"]}  ')
    return client


@pytest.fixture
def analyst(mock_openai):
    from core.services.analysis_service import OutbreakAnalyst
    return OutbreakAnalyst(mock_openai, model="gpt-test")


@pytest.fixture
def zip_csv(tmp_path):
    """Small ZIP metadata CSV."""
    path = tmp_path / "zips.csv"
    path.write_text(
        "ZIP_CODE,PO_NAME,POPULATION\n"
        "91344,Granada Hills,\"52,450\"\n"
        "90001,Los Angeles,\n"
        "02134,Allston,21000\n"
    )
    return path


@pytest.fixture
def zip_metadata(zip_csv):
    from lib.zip_metadata import ZipMetadataSource
    return ZipMetadataSource(zip_csv)


@pytest.fixture
def passwords():
    from core.services.user_service import build_password_context
    return build_password_context(rounds=4)


@pytest.fixture
def client(fake_store, analyst, zip_metadata, passwords):
    """TestClient with every service handle replaced by a test double."""
    from fastapi.testclient import TestClient

    from app import dependencies
    from app.main import app
    from lib.locks import ZipLockRegistry

    locks = ZipLockRegistry()
    app.dependency_overrides[dependencies.get_store] = lambda: fake_store
    app.dependency_overrides[dependencies.get_analyst] = lambda: analyst
    app.dependency_overrides[dependencies.get_zip_metadata] = lambda: zip_metadata
    app.dependency_overrides[dependencies.get_zip_locks] = lambda: locks
    app.dependency_overrides[dependencies.get_password_context] = lambda: passwords

    yield TestClient(app)

    app.dependency_overrides.clear()
