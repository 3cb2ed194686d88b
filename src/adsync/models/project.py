"""Project model: the ad account a sync run walks over."""
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class Project(SQLModel, table=True):
    """One row per dashboard project.

    Owned by the wider application. The sync job only reads the
    eligibility fields (ad_account_id, archived) and writes the two
    last_sync_* fields.
    """

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    ad_account_id: Optional[str] = Field(default=None, index=True)
    archived: bool = Field(default=False)
    last_sync_at: Optional[datetime] = None
    last_sync_status: Optional[str] = None  # "success", "partial", "error"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
