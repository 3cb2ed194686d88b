"""
ScheduledSyncOrchestrator - one pass of the multi-project Meta Ads sync.

State machine per invocation:

  START --(credential missing)--------------> ABORTED
  START --(project query fails)-------------> ABORTED
  START --> RUNNING: for each project
                       run all windows  (ProjectSyncRunner)
                       write status     (StatusWriter)
                       inter-project delay (PacingController)
  RUNNING --(all projects done)-------------> COMPLETED

A project whose windows all fail is written as "error" and the loop moves
on. A status write that fails is logged and the loop also moves on.
Nothing is retried inside a run; the next scheduler tick is the retry.
"""
import enum
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from adsync.sync.errors import ConfigurationError, ProjectSourceError
from adsync.sync.fetcher import WindowFetcher
from adsync.sync.pacing import PacingController
from adsync.sync.projects import ProjectSource
from adsync.sync.runner import ProjectRunResult, ProjectSyncRunner
from adsync.sync.status import StatusWriter, derive_status
from adsync.sync.windows import DEFAULT_WINDOW_DAYS, build_windows

logger = logging.getLogger(__name__)


class RunState(str, enum.Enum):
    START = "start"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class RunReport:
    """What a single orchestrator invocation returns to its caller."""

    success: bool
    state: RunState
    results: List[ProjectRunResult] = field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[str] = None  # "configuration" or "project_source"
    elapsed_minutes: float = 0.0

    @property
    def total_synced(self) -> int:
        return sum(len(r.windows_succeeded) for r in self.results)

    @property
    def total_failed(self) -> int:
        return sum(len(r.windows_failed) for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "elapsed_minutes": self.elapsed_minutes,
            "total_synced": self.total_synced,
            "total_failed": self.total_failed,
            "results": [r.to_dict() for r in self.results],
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScheduledSyncOrchestrator:
    """Walks every eligible project through every catalog window, sequentially."""

    def __init__(
        self,
        source: ProjectSource,
        runner: ProjectSyncRunner,
        writer: StatusWriter,
        pacing: PacingController,
        access_token: str,
        window_days: Sequence[int] = DEFAULT_WINDOW_DAYS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.source = source
        self.runner = runner
        self.writer = writer
        self.pacing = pacing
        self.access_token = access_token
        self.window_days = tuple(window_days)
        self.clock = clock
        self.state = RunState.START

    async def run(self, project_ids: Optional[Sequence[int]] = None) -> RunReport:
        """
        Execute one full pass.

        Args:
            project_ids: Optional subset of project ids to sync.

        Returns:
            RunReport. On a fatal precondition (missing credential or failed
            project query) success is False and nothing has been written.
        """
        started = time.monotonic()
        self.state = RunState.START

        try:
            self._check_configuration()
            projects = self.source.eligible_projects(project_ids)
        except ConfigurationError as exc:
            return self._abort(exc, "configuration")
        except ProjectSourceError as exc:
            return self._abort(exc, "project_source")

        windows = build_windows(self.clock(), self.window_days)
        self.state = RunState.RUNNING
        logger.info(
            "[SCHEDULED SYNC] %d projects, windows: %s",
            len(projects), ", ".join(w.key for w in windows),
        )

        results: List[ProjectRunResult] = []
        for i, project in enumerate(projects):
            logger.info("[SCHEDULED SYNC] Project %s (%s)", project.name, project.id)
            result = await self.runner.run(project, windows)
            try:
                self.writer.write(result, now=self.clock())
            except SQLAlchemyError as exc:
                # Sync fields stay at their previous values; the next run rewrites them
                result.status = result.status or derive_status(result)
                logger.error(
                    "[SCHEDULED SYNC] Could not save status for project %s: %s",
                    project.id, exc,
                )
            logger.info(
                "[SCHEDULED SYNC] Project %s: %s (ok=%s failed=%s)",
                project.name, result.status,
                result.windows_succeeded, result.windows_failed,
            )
            results.append(result)

            if i < len(projects) - 1:
                await self.pacing.after_project()

        self.state = RunState.COMPLETED
        report = RunReport(
            success=True,
            state=self.state,
            results=results,
            elapsed_minutes=round((time.monotonic() - started) / 60, 1),
        )
        logger.info(
            "[SCHEDULED SYNC] Complete in %.1f minutes: %d windows synced, %d failed",
            report.elapsed_minutes, report.total_synced, report.total_failed,
        )
        return report

    def _check_configuration(self) -> None:
        if not self.access_token:
            raise ConfigurationError("META_ACCESS_TOKEN not configured")

    def _abort(self, exc: Exception, kind: str) -> RunReport:
        self.state = RunState.ABORTED
        logger.error("[SCHEDULED SYNC] Aborted: %s", exc)
        return RunReport(
            success=False, state=self.state, error=str(exc), error_kind=kind
        )


def build_orchestrator(engine, settings, client=None, paced: bool = True) -> ScheduledSyncOrchestrator:
    """
    Wire the orchestrator from settings.

    Args:
        engine: SQLAlchemy engine for the project query and status writes.
        settings: adsync.config.Settings.
        client: Optional shared httpx.AsyncClient for the fetcher.
        paced: False disables both delays (manual runs).
    """
    pacing = (
        PacingController.from_settings(settings)
        if paced
        else PacingController(window_delay=0, project_delay=0)
    )
    fetcher = WindowFetcher.from_settings(settings, client=client)
    return ScheduledSyncOrchestrator(
        source=ProjectSource(engine),
        runner=ProjectSyncRunner(fetcher, pacing),
        writer=StatusWriter(engine),
        pacing=pacing,
        access_token=settings.meta_access_token,
        window_days=settings.window_days,
    )
