"""Shared test fixtures."""
import os
from datetime import datetime, timezone
from typing import Generator, Iterable, List, Optional, Tuple

# Keep the app's engine singleton off disk when adsync.api.main is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models so SQLModel.metadata knows about them
from adsync.models.project import Project
from adsync.models.sync import SyncLog  # noqa: F401
from adsync.sync.fetcher import WindowOutcome

RUN_AT = datetime(2026, 3, 15, 9, 30, tzinfo=timezone.utc)
WINDOW_KEYS = ["last_7d", "last_14d", "last_30d", "last_60d", "last_90d"]


class ScriptedFetcher:
    """Stand-in WindowFetcher: fails exactly the (project_id, window_key) pairs given."""

    def __init__(
        self,
        failures: Iterable[Tuple[int, str]] = (),
        fail_projects: Iterable[int] = (),
        raise_on: Iterable[Tuple[int, str]] = (),
    ):
        self.failures = set(failures)
        self.fail_projects = set(fail_projects)
        self.raise_on = set(raise_on)
        self.calls: List[Tuple[int, str]] = []

    async def fetch(self, project, window) -> WindowOutcome:
        key = (project.id, window.key)
        self.calls.append(key)
        if key in self.raise_on:
            raise RuntimeError("fetcher exploded")
        failed = key in self.failures or project.id in self.fail_projects
        return WindowOutcome(
            window_key=window.key,
            succeeded=not failed,
            error="scripted failure" if failed else None,
        )


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine. Tables recreated fresh for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="test_session")
def test_session_fixture(engine) -> Generator[Session, None, None]:
    """Provides a DB session connected to in-memory SQLite."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="make_project")
def make_project_fixture(engine):
    """Factory that persists a Project and returns it (detached)."""

    def _make(
        name: str,
        ad_account_id: Optional[str] = "act_1",
        archived: bool = False,
    ) -> Project:
        project = Project(name=name, ad_account_id=ad_account_id, archived=archived)
        with Session(engine) as s:
            s.add(project)
            s.commit()
            s.refresh(project)
        return project

    return _make


@pytest.fixture(name="scripted_fetcher")
def scripted_fetcher_fixture():
    """Returns the ScriptedFetcher class so tests can script failures."""
    return ScriptedFetcher


@pytest.fixture(name="run_at")
def run_at_fixture() -> datetime:
    """Fixed reference instant for window generation."""
    return RUN_AT
