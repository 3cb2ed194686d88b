"""Sync trigger, history and status routes."""
import asyncio
import json
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlmodel import Session, select

from adsync.config import get_settings
from adsync.db.engine import get_engine, get_session
from adsync.models.sync import SyncLog
from adsync.sync.orchestrator import build_orchestrator

router = APIRouter()

# One run at a time per API process; overlapping runs would double the request rate
_run_lock = asyncio.Lock()

ALREADY_RUNNING = {"success": False, "error": "sync already running"}


class SyncRunRequest(BaseModel):
    project_ids: Optional[List[int]] = None  # If None, syncs every eligible project


class SyncLogResponse(BaseModel):
    id: int
    project_id: int
    status: str
    synced: List[str]
    failed: List[str]
    created_at: datetime


class SyncStatusResponse(BaseModel):
    status: str
    project_id: Optional[int]
    created_at: Optional[datetime]


async def _do_sync(project_ids: Optional[List[int]] = None) -> None:
    """Background task: one paced orchestrator pass."""
    orchestrator = build_orchestrator(get_engine(), get_settings())
    await orchestrator.run(project_ids)


async def _run_and_release(project_ids: Optional[List[int]] = None) -> None:
    """Background task wrapper: releases the run lock taken by trigger_sync."""
    try:
        await _do_sync(project_ids)
    finally:
        _run_lock.release()


@router.post("/run")
async def run_sync(request: Optional[SyncRunRequest] = None):
    """
    Run the sync synchronously and return the run summary.

    Pacing still applies, so this can take minutes per project.
    """
    if _run_lock.locked():
        return JSONResponse(status_code=409, content=ALREADY_RUNNING)

    project_ids = request.project_ids if request else None
    async with _run_lock:
        orchestrator = build_orchestrator(get_engine(), get_settings())
        report = await orchestrator.run(project_ids)

    if not report.success:
        status_code = 400 if report.error_kind == "configuration" else 500
        return JSONResponse(status_code=status_code, content=report.to_dict())
    return report.to_dict()


@router.post("/trigger")
async def trigger_sync(
    background_tasks: BackgroundTasks,
    request: Optional[SyncRunRequest] = None,
):
    """Start a sync in the background and return immediately."""
    if _run_lock.locked():
        return JSONResponse(status_code=409, content=ALREADY_RUNNING)

    project_ids = request.project_ids if request else None
    # Held until the background run finishes
    await _run_lock.acquire()
    background_tasks.add_task(_run_and_release, project_ids)
    return {"message": "Sync started", "project_ids": project_ids}


@router.get("/logs", response_model=List[SyncLogResponse])
def sync_logs(
    project_id: Optional[int] = None,
    limit: int = Query(default=50, ge=1, le=500),
    session: Session = Depends(get_session),
):
    """Recent sync log entries, newest first."""
    query = select(SyncLog).order_by(SyncLog.created_at.desc(), SyncLog.id.desc())
    if project_id is not None:
        query = query.where(SyncLog.project_id == project_id)
    logs = session.exec(query.limit(limit)).all()
    return [_log_response(log) for log in logs]


@router.get("/status", response_model=SyncStatusResponse)
def sync_status(session: Session = Depends(get_session)):
    """Return the status of the most recent project sync."""
    log = session.exec(
        select(SyncLog).order_by(SyncLog.created_at.desc(), SyncLog.id.desc())
    ).first()
    if not log:
        return SyncStatusResponse(status="never_run", project_id=None, created_at=None)
    return SyncStatusResponse(
        status=log.status, project_id=log.project_id, created_at=log.created_at
    )


def _log_response(log: SyncLog) -> SyncLogResponse:
    try:
        message = json.loads(log.message or "{}")
    except ValueError:
        message = {}
    return SyncLogResponse(
        id=log.id,
        project_id=log.project_id,
        status=log.status,
        synced=message.get("synced", []),
        failed=message.get("failed", []),
        created_at=log.created_at,
    )
