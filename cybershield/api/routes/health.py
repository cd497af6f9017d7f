"""
Liveness and startup-state endpoints
"""

import time
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from cybershield.core.config import APP_VERSION
from cybershield.utils.startup import get_init_status

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
    timestamp: str


class StatusResponse(BaseModel):
    """Startup flag, rule table sizes and any startup error"""
    initialized: bool
    rule_tables: Dict[str, int]
    error: Optional[str]


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Always 200 while the process is serving"""
    started_at = getattr(request.app.state, "started_at", None) or time.time()

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        uptime_seconds=round(time.time() - started_at, 2),
        timestamp=datetime.now(timezone.utc).isoformat()
    )


@router.get("/status", response_model=StatusResponse)
async def system_status(request: Request) -> StatusResponse:
    return StatusResponse(**get_init_status(request.app))
