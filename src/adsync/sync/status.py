"""Project status derivation and the once-per-project write."""
import json
import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session

from adsync.models.project import Project
from adsync.models.sync import SyncLog
from adsync.sync.runner import ProjectRunResult

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_PARTIAL = "partial"
STATUS_ERROR = "error"


def derive_status(result: ProjectRunResult) -> str:
    """
    success: no failures and at least one success.
    partial: both successes and failures.
    error:   no successes at all (includes a project with zero windows).
    """
    if not result.windows_succeeded:
        return STATUS_ERROR
    if result.windows_failed:
        return STATUS_PARTIAL
    return STATUS_SUCCESS


def build_log_message(result: ProjectRunResult) -> str:
    return json.dumps(
        {
            "type": "scheduled_sync",
            "synced": result.windows_succeeded,
            "failed": result.windows_failed,
        }
    )


class StatusWriter:
    """Persists a finished project run: project sync fields + one SyncLog row."""

    def __init__(self, engine):
        self.engine = engine

    def write(self, result: ProjectRunResult, now: datetime) -> Optional[SyncLog]:
        """
        Stamp the project with `now` and the derived status, and append the
        audit entry.

        Args:
            result: A completed ProjectRunResult. Its `status` is filled in.
            now: Timestamp written to last_sync_at and the log's created_at.

        Returns:
            The persisted SyncLog row, or None if the project no longer exists.
        """
        status = derive_status(result)
        result.status = status

        with Session(self.engine) as s:
            project: Optional[Project] = s.get(Project, result.project_id)
            if project is None:
                logger.warning(
                    "Project %s was deleted during the run; no sync log written",
                    result.project_id,
                )
                return None

            project.last_sync_at = now
            project.last_sync_status = status
            s.add(project)

            log = SyncLog(
                project_id=result.project_id,
                status=status,
                message=build_log_message(result),
                created_at=now,
            )
            s.add(log)
            s.commit()
            s.refresh(log)
        return log
