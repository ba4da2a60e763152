"""Routes exposing auditing data for transparency dashboards."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query

from supplier_rag import auditing


router = APIRouter()


@router.get("")
async def recent_audit_events(limit: int = Query(default=50, ge=1, le=200)) -> List[dict[str, object]]:
    """Return recent audit events as dictionaries for UI consumption."""

    return auditing.read_audit_log(limit=limit)
