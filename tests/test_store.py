"""Tests for backend collaborators: in-memory tables, storage, auth and factory."""

from datetime import timedelta

import pytest
from conftest import NOW

from ecredit.config import EcreditConfig, StorageConfig
from ecredit.exceptions import BackendUnavailableError
from ecredit.store import (
    InMemoryAuthClient,
    InMemoryTableClient,
    LocalObjectStorage,
    build_backend,
)
from ecredit.store.base import ACTIVITY_LOG, LOANS, PROFILES


class TestInMemoryTableClient:
    """Tests for InMemoryTableClient."""

    def test_insert_generates_id(self, tables) -> None:
        """Test that inserted rows get an id."""
        row = tables.insert(PROFILES, {"email": "a@example.com"})

        assert len(row["id"]) == 32
        assert tables.get(PROFILES, row["id"])["email"] == "a@example.com"

    def test_insert_activity_defaults_created_at(self, tables) -> None:
        """Test that activity rows are timestamped."""
        row = tables.insert(ACTIVITY_LOG, {"user_id": "u1", "activity_type": "payment"})

        assert row["created_at"] is not None

    def test_duplicate_id(self, tables) -> None:
        """Test that ids are unique per table."""
        tables.insert(PROFILES, {"id": "u1"})

        with pytest.raises(BackendUnavailableError):
            tables.insert(PROFILES, {"id": "u1"})

    def test_select_filters_and_order(self, tables) -> None:
        """Test equality, membership, ordering and paging."""
        for i, status in enumerate(["pending", "active", "pending", "completed"]):
            tables.insert(
                LOANS,
                {"id": f"l{i}", "status": status, "application_date": NOW - timedelta(days=i)},
            )

        pending = tables.select(LOANS, filters={"status": "pending"})
        some = tables.select(
            LOANS,
            filters={"status": ["active", "completed"]},
            order_by="application_date",
        )
        page = tables.select(LOANS, order_by="application_date", descending=True, limit=2, offset=1)

        assert {r["id"] for r in pending} == {"l0", "l2"}
        assert [r["id"] for r in some] == ["l3", "l1"]
        assert [r["id"] for r in page] == ["l1", "l2"]

    def test_missing_values_sort_last(self, tables) -> None:
        """Test ordering rows that lack the sort column."""
        tables.insert(LOANS, {"id": "none"})
        tables.insert(LOANS, {"id": "dated", "application_date": NOW})

        assert [r["id"] for r in tables.select(LOANS, order_by="application_date")] == [
            "dated",
            "none",
        ]

    def test_reads_are_copies(self, tables) -> None:
        """Test that mutating a returned row does not change the table."""
        tables.insert(PROFILES, {"id": "u1", "email": "a@example.com"})

        tables.get(PROFILES, "u1")["email"] = "changed"

        assert tables.get(PROFILES, "u1")["email"] == "a@example.com"

    def test_conditional_update(self, tables) -> None:
        """Test that only rows matching every filter are updated."""
        tables.insert(LOANS, {"id": "l1", "status": "pending"})

        missed = tables.update(LOANS, {"status": "approved"}, {"id": "l1", "status": "active"})
        hit = tables.update(LOANS, {"status": "approved"}, {"id": "l1", "status": "pending"})

        assert missed == []
        assert [r["status"] for r in hit] == ["approved"]

    def test_update_requires_filters(self, tables) -> None:
        """Test that unfiltered updates are refused."""
        with pytest.raises(ValueError):
            tables.update(LOANS, {"status": "approved"}, {})

    def test_count_and_summary(self, tables) -> None:
        """Test row counts."""
        tables.insert(LOANS, {"id": "l1", "status": "pending"})
        tables.insert(LOANS, {"id": "l2", "status": "active"})

        assert tables.count(LOANS) == 2
        assert tables.count(LOANS, {"status": "active"}) == 1
        assert tables.summary() == {PROFILES: 0, LOANS: 2, ACTIVITY_LOG: 0}

    def test_unavailable_table(self, tables) -> None:
        """Test simulated outages."""
        tables.unavailable.add(LOANS)

        with pytest.raises(BackendUnavailableError):
            tables.select(LOANS)
        assert tables.select(PROFILES) == []

    def test_unknown_table(self, tables) -> None:
        """Test that unknown tables are reported as backend failures."""
        with pytest.raises(BackendUnavailableError):
            tables.count("payments")


class TestLocalObjectStorage:
    """Tests for LocalObjectStorage."""

    def test_upload_and_url(self, tmp_path) -> None:
        """Test storing a blob and building its public URL."""
        storage = LocalObjectStorage(tmp_path, "https://cdn.test/storage/")

        key = storage.upload("avatars", "u1.png", b"png", content_type="image/png")

        assert key == "u1.png"
        assert (tmp_path / "avatars" / "u1.png").read_bytes() == b"png"
        assert storage.exists("avatars", "u1.png")
        assert storage.public_url("avatars", "u1.png") == "https://cdn.test/storage/avatars/u1.png"

    @pytest.mark.parametrize("key", ["", "..", "a/b.png", "a\\b.png"])
    def test_invalid_keys(self, tmp_path, key) -> None:
        """Test that keys cannot escape the bucket."""
        storage = LocalObjectStorage(tmp_path, "https://cdn.test")

        with pytest.raises(ValueError):
            storage.upload("avatars", key, b"x")

    def test_write_failure(self, tmp_path) -> None:
        """Test that filesystem errors become backend failures."""
        blocker = tmp_path / "root"
        blocker.write_text("not a directory")
        storage = LocalObjectStorage(blocker, "https://cdn.test")

        with pytest.raises(BackendUnavailableError):
            storage.upload("avatars", "u1.png", b"x")


class TestInMemoryAuthClient:
    """Tests for InMemoryAuthClient."""

    def test_sign_in_and_out(self) -> None:
        """Test the session lifecycle and notifications."""
        auth = InMemoryAuthClient(clock=lambda: NOW)
        seen = []
        unsubscribe = auth.subscribe(seen.append)

        session = auth.sign_in("u1", "u1@example.com")
        auth.sign_out()

        assert session.user_id == "u1"
        assert session.issued_at == NOW
        assert auth.current_session() is None
        assert seen == [session, None]

        unsubscribe()
        auth.sign_in("u2", "u2@example.com")
        assert len(seen) == 2

    def test_sign_out_without_session(self) -> None:
        """Test that signing out twice notifies once."""
        auth = InMemoryAuthClient()
        seen = []
        auth.subscribe(seen.append)

        auth.sign_out()

        assert seen == []


class TestBuildBackend:
    """Tests for build_backend."""

    def test_memory_backend(self, tmp_path) -> None:
        """Test the default in-memory backend."""
        config = EcreditConfig(storage=StorageConfig(root_dir=tmp_path))

        backend = build_backend(config)

        assert isinstance(backend.tables, InMemoryTableClient)
        assert isinstance(backend.storage, LocalObjectStorage)
        assert backend.storage.root_dir == tmp_path
        assert isinstance(backend.auth, InMemoryAuthClient)

    def test_postgres_backend(self, tmp_path) -> None:
        """Test that the postgres backend uses the configured connection string."""
        from ecredit.store.postgres import PostgresTableClient

        config = EcreditConfig(backend="postgres", storage=StorageConfig(root_dir=tmp_path))

        backend = build_backend(config)

        assert isinstance(backend.tables, PostgresTableClient)
        assert backend.tables.conninfo == config.database.connection_string
