"""
Log API Endpoints
Tail of recent log records, optionally narrowed to the projection engine
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query

from services.logging_service import get_ring_handler

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("/recent")
def get_recent_logs(
    limit: int = Query(500, ge=1, le=5000),
    component: Optional[str] = Query(None, description="Engine component, e.g. transform_cache"),
    engine_only: bool = Query(False, description="Only records from the projection engine"),
) -> Dict[str, Any]:
    records = get_ring_handler().get_recent(limit, component=component, engine_only=engine_only)
    return {"logs": records, "count": len(records)}
