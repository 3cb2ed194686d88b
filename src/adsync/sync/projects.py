"""Read-only query for the projects a sync run should visit."""
import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from adsync.models.project import Project
from adsync.sync.errors import ProjectSourceError

logger = logging.getLogger(__name__)


class ProjectSource:
    """Resolves active projects that have an ad account attached."""

    def __init__(self, engine):
        self.engine = engine

    def eligible_projects(
        self, project_ids: Optional[Sequence[int]] = None
    ) -> List[Project]:
        """
        Return non-archived projects with an ad_account_id, ordered by id.

        Args:
            project_ids: If non-empty, restrict the result to these ids.

        Raises:
            ProjectSourceError: if the query fails for any reason.
        """
        query = (
            select(Project)
            .where(Project.archived == False)  # noqa: E712
            .where(Project.ad_account_id.is_not(None))
            .order_by(Project.id)
        )
        if project_ids:
            query = query.where(Project.id.in_(list(project_ids)))

        try:
            with Session(self.engine) as s:
                projects = list(s.exec(query).all())
                # Detach so callers can read attributes after the session closes
                s.expunge_all()
        except SQLAlchemyError as exc:
            logger.error("Eligible-project query failed: %s", exc)
            raise ProjectSourceError(f"Could not load projects: {exc}") from exc

        return projects
