"""Sync audit log model."""
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class SyncLog(SQLModel, table=True):
    """Append-only record of one project's scheduled sync outcome."""

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    status: str  # "success", "partial", "error"
    message: Optional[str] = None  # JSON: {"type", "synced", "failed"}
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
