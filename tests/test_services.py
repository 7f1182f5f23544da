# =============================================================================
# tests/test_services.py - Service Layer Tests
# =============================================================================
# This module contains tests for:
# - SymptomService (store reads, report ingestion, per-ZIP locking)
# - OutbreakAnalyst (mocked OpenAI)
# - UserService (bcrypt hashing, duplicate emails, login checks)
#
# Tests use an in-memory store to avoid database calls.
# =============================================================================

import threading
from datetime import datetime, timezone

import pytest
from openai import OpenAIError

from app.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidPasswordError,
    PopulationMissingError,
    UpstreamServiceError,
    UserNotFoundError,
    ZipNotFoundError,
)
from core.models.symptoms import ZipRecord
from core.services.aggregator import day_index
from core.services.symptom_service import SymptomService
from core.services.user_service import UserService
from lib.locks import ZipLockRegistry
from tests.conftest import make_completion, make_entry

DAY_100 = datetime.fromtimestamp(100 * 86400 + 3600, tz=timezone.utc)
DAY_101 = datetime.fromtimestamp(101 * 86400 + 3600, tz=timezone.utc)


# =============================================================================
# SymptomService
# =============================================================================

class TestSymptomService:

    @pytest.fixture
    def service(self, fake_store):
        return SymptomService(fake_store, ZipLockRegistry())

    def test_get_zip_record(self, service):
        record = service.get_zip_record("91344")

        assert record.zip == "91344"
        assert record.entries[0].symptoms["fever"] == 5

    def test_get_unknown_zip(self, service):
        with pytest.raises(ZipNotFoundError):
            service.get_zip_record("00000")

    def test_report_same_day_is_persisted(self, service, fake_store):
        assert day_index(DAY_100) == 100

        service.record_report("91344", {"fever": 3}, now=DAY_100)

        stored = fake_store.zips["91344"]["entries"]
        assert len(stored) == 1
        assert stored[0]["symptoms"]["fever"] == 8

    def test_report_new_day_is_appended(self, service, fake_store):
        service.record_report("91344", {"fever": 3}, now=DAY_101)

        stored = fake_store.zips["91344"]["entries"]
        assert [e["day"] for e in stored] == [100, 101]
        assert stored[0]["symptoms"]["fever"] == 5
        assert stored[1]["symptoms"]["fever"] == 3

    def test_report_for_unknown_zip_creates_nothing(self, service, fake_store):
        with pytest.raises(ZipNotFoundError):
            service.record_report("00000", {"fever": 1}, now=DAY_100)

        assert "00000" not in fake_store.zips
        assert fake_store.update_calls == 0

    def test_unknown_zips_do_not_grow_lock_registry(self, fake_store):
        locks = ZipLockRegistry()
        service = SymptomService(fake_store, locks)

        for i in range(50):
            with pytest.raises(ZipNotFoundError):
                service.record_report(f"bogus{i}", {"fever": 1}, now=DAY_100)

        assert len(locks) == 0

        service.record_report("91344", {"fever": 1}, now=DAY_100)
        assert len(locks) == 1

    def test_report_upgrades_v1_document(self, service, fake_store):
        fake_store.zips["12345"] = {"zip": "12345", "symptoms": {"fever": 2}, "population": 10}

        service.record_report("12345", {"fever": 1}, now=DAY_100)

        stored = fake_store.zips["12345"]
        assert [e["day"] for e in stored["entries"]] == [0, 100]
        assert stored["schema_version"] == 2

    def test_concurrent_reports_do_not_lose_increments(self, fake_store):
        service = SymptomService(fake_store, ZipLockRegistry())
        fake_store.zips["91344"]["entries"] = [make_entry(day_index())]

        threads = [
            threading.Thread(target=service.record_report, args=("91344", {"cough": 1}))
            for _ in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = fake_store.zips["91344"]["entries"]
        assert sum(e["symptoms"]["cough"] for e in entries) == 20


class TestZipLockRegistry:

    def test_same_zip_same_lock(self):
        locks = ZipLockRegistry()

        assert locks.get("91344") is locks.get("91344")
        assert locks.get("91344") is not locks.get("90001")
        assert len(locks) == 2

    def test_hold_acquires_and_releases(self):
        locks = ZipLockRegistry()

        with locks.hold("91344"):
            assert locks.get("91344").locked()
        assert not locks.get("91344").locked()


# =============================================================================
# OutbreakAnalyst
# =============================================================================

class TestOutbreakAnalyst:

    def test_complete_returns_stripped_text(self, analyst, mock_openai):
        assert analyst.complete("hello") == '{"possibleDiseases": ["none"]}'

        kwargs = mock_openai.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["messages"][0] == {"role": "system", "content": "You are a helpful assistant."}
        assert kwargs["messages"][1] == {"role": "user", "content": "hello"}

    def test_api_error_becomes_upstream_error(self, analyst, mock_openai):
        mock_openai.chat.completions.create.side_effect = OpenAIError("secret internal detail")

        with pytest.raises(UpstreamServiceError) as exc_info:
            analyst.complete("hello")

        assert "secret internal detail" not in str(exc_info.value.to_dict())

    def test_empty_completion_is_upstream_error(self, analyst, mock_openai):
        mock_openai.chat.completions.create.return_value = make_completion(None)

        with pytest.raises(UpstreamServiceError):
            analyst.complete("hello")

    def test_analyze_zip_builds_prompt_from_window(self, analyst, mock_openai):
        record = ZipRecord.from_document({
            "zip": "91344",
            "entries": [make_entry(10, fever=50), make_entry(30, fever=2), make_entry(31, fever=1)],
            "population": 1000,
        })

        result = analyst.analyze_zip(record, "PO_NAME = Granada Hills", window_days=14)

        prompt = mock_openai.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert result == '{"possibleDiseases": ["none"]}'
        assert "3 out of 1000 people have fever" in prompt
        assert "Over the last 2 reporting day(s)" in prompt
        assert "PO_NAME = Granada Hills" in prompt

    @pytest.mark.parametrize("population", [None, 0])
    def test_analyze_zip_requires_population(self, analyst, mock_openai, population):
        record = ZipRecord(zip="91344", population=population)

        with pytest.raises(PopulationMissingError):
            analyst.analyze_zip(record, "", window_days=14)

        mock_openai.chat.completions.create.assert_not_called()


# =============================================================================
# UserService
# =============================================================================

class TestUserService:

    @pytest.fixture
    def users(self, fake_store, passwords):
        return UserService(fake_store, passwords)

    def test_register_stores_hash(self, users, fake_store):
        users.register("jdoe", "jdoe@example.com", "hunter2")

        row = fake_store.users["jdoe@example.com"]
        assert row["username"] == "jdoe"
        assert row["password"] != "hunter2"
        assert row["password"].startswith("$2")

    def test_register_duplicate_email(self, users, fake_store):
        users.register("jdoe", "jdoe@example.com", "hunter2")

        with pytest.raises(EmailAlreadyRegisteredError) as exc_info:
            users.register("other", "JDoe@Example.com ", "different")

        assert exc_info.value.status_code == 400
        assert len(fake_store.users) == 1
        assert fake_store.users["jdoe@example.com"]["username"] == "jdoe"

    def test_register_race_maps_duplicate_key(self, users, fake_store, monkeypatch):
        fake_store.users["jdoe@example.com"] = {"email": "jdoe@example.com", "password": "x"}
        monkeypatch.setattr(fake_store, "fetch_user_by_email", lambda email: None)

        with pytest.raises(EmailAlreadyRegisteredError):
            users.register("jdoe", "jdoe@example.com", "hunter2")

    def test_login_success(self, users):
        users.register("jdoe", "jdoe@example.com", "hunter2")

        user = users.login("jdoe@example.com", "hunter2")

        assert user.username == "jdoe"

    def test_login_wrong_password(self, users):
        users.register("jdoe", "jdoe@example.com", "hunter2")

        with pytest.raises(InvalidPasswordError) as exc_info:
            users.login("jdoe@example.com", "wrong")

        assert exc_info.value.status_code == 401

    def test_login_unknown_user(self, users):
        with pytest.raises(UserNotFoundError):
            users.login("nobody@example.com", "hunter2")
