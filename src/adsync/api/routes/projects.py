"""Project sync-health routes."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, select

from adsync.db.engine import get_session
from adsync.models.project import Project

router = APIRouter()


class ProjectSyncHealth(BaseModel):
    id: int
    name: str
    ad_account_id: Optional[str]
    archived: bool
    last_sync_at: Optional[datetime]
    last_sync_status: Optional[str]


@router.get("", response_model=List[ProjectSyncHealth])
def list_projects(
    include_archived: bool = False,
    session: Session = Depends(get_session),
):
    """List projects with their last sync time and status."""
    query = select(Project).order_by(Project.id)
    if not include_archived:
        query = query.where(Project.archived == False)  # noqa: E712
    return session.exec(query).all()


@router.get("/{project_id}", response_model=ProjectSyncHealth)
def get_project(project_id: int, session: Session = Depends(get_session)):
    """Return one project's sync fields."""
    project = session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project
