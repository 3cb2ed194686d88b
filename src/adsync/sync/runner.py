"""ProjectSyncRunner - drives every catalog window for one project."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from adsync.sync.fetcher import WindowOutcome
from adsync.sync.pacing import PacingController
from adsync.sync.windows import Window

logger = logging.getLogger(__name__)


@dataclass
class ProjectRunResult:
    """Per-window outcomes of one project's run, bucketed by key."""

    project_id: int
    project_name: str
    windows_succeeded: List[str] = field(default_factory=list)
    windows_failed: List[str] = field(default_factory=list)
    status: Optional[str] = None  # set by StatusWriter once the run is written

    def record(self, outcome: WindowOutcome) -> None:
        if outcome.succeeded:
            self.windows_succeeded.append(outcome.window_key)
        else:
            self.windows_failed.append(outcome.window_key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "project_name": self.project_name,
            "windows_succeeded": list(self.windows_succeeded),
            "windows_failed": list(self.windows_failed),
            "status": self.status,
        }


class ProjectSyncRunner:
    """
    Attempts every window for a project, in catalog order.

    A failed window never stops the remaining ones; partial success inside
    a project is an expected result. run() does not raise.
    """

    def __init__(self, fetcher, pacing: PacingController):
        """
        Args:
            fetcher: Anything with `async fetch(project, window) -> WindowOutcome`.
            pacing: Applies the inter-window delay.
        """
        self.fetcher = fetcher
        self.pacing = pacing

    async def run(self, project, windows: Sequence[Window]) -> ProjectRunResult:
        result = ProjectRunResult(project_id=project.id, project_name=project.name)

        for i, window in enumerate(windows):
            logger.info(
                "[%s] Syncing %s (%s to %s)",
                project.name, window.key, window.since, window.until,
            )
            outcome = await self._attempt(project, window)
            result.record(outcome)
            logger.info(
                "[%s] %s: %s", project.name, window.key,
                "ok" if outcome.succeeded else "failed",
            )

            if i < len(windows) - 1:
                await self.pacing.after_window()

        return result

    async def _attempt(self, project, window: Window) -> WindowOutcome:
        try:
            return await self.fetcher.fetch(project, window)
        except Exception as exc:
            # Injected fetchers are not trusted to honour the no-raise contract
            logger.warning("[%s] %s raised: %s", project.name, window.key, exc)
            return WindowOutcome(window_key=window.key, succeeded=False, error=str(exc))
