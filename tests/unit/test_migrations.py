"""Tests for the sync-column migrations."""
import pytest
from sqlalchemy import inspect, text
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from adsync.db.migrations import run_migrations
from adsync.models.project import Project

SYNC_COLUMNS = {"archived", "last_sync_at", "last_sync_status"}


def _memory_engine():
    return create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(name="legacy_engine")
def legacy_engine_fixture():
    """A project table as the dashboard created it, before the sync columns existed."""
    engine = _memory_engine()
    with engine.connect() as conn:
        conn.execute(text(
            "CREATE TABLE project ("
            "id INTEGER PRIMARY KEY, name VARCHAR NOT NULL, "
            "ad_account_id VARCHAR, created_at TIMESTAMP)"
        ))
        conn.execute(text(
            "INSERT INTO project (id, name, ad_account_id, created_at) "
            "VALUES (1, 'Legacy', 'act_9', '2025-12-01 00:00:00')"
        ))
        conn.commit()
    yield engine


def _columns(engine, table="project"):
    return {col["name"] for col in inspect(engine).get_columns(table)}


class TestRunMigrations:
    def test_fresh_schema_is_untouched(self, engine):
        before = _columns(engine)
        run_migrations(engine)
        assert _columns(engine) == before

    def test_adds_missing_sync_columns(self, legacy_engine):
        assert not SYNC_COLUMNS & _columns(legacy_engine)
        run_migrations(legacy_engine)
        assert SYNC_COLUMNS <= _columns(legacy_engine)

    def test_idempotent(self, legacy_engine):
        run_migrations(legacy_engine)
        run_migrations(legacy_engine)  # second call must be safe
        assert SYNC_COLUMNS <= _columns(legacy_engine)

    def test_existing_rows_default_to_active(self, legacy_engine):
        run_migrations(legacy_engine)
        with Session(legacy_engine) as s:
            project = s.exec(select(Project)).first()
        assert project.archived is False
        assert project.last_sync_status is None
