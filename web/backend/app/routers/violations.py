"""Violation collector router.

Prefix: ``/api/security``
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from functools import lru_cache
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from inputdefense.reporting.violation_log import ViolationLog
from web.backend.app.models.api import ViolationRecordResponse, ViolationReportRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/security", tags=["security"])

DATA_DIR_ENV_VAR = "INPUTDEFENSE_DATA_DIR"


@lru_cache(maxsize=1)
def get_violation_log() -> ViolationLog:
    data_dir = os.environ.get(DATA_DIR_ENV_VAR)
    return ViolationLog(Path(data_dir) / "violations" if data_dir else None)


@router.post("/csp-violation", status_code=status.HTTP_204_NO_CONTENT)
async def receive_violation(
    report: ViolationReportRequest,
    request: Request,
    log: ViolationLog = Depends(get_violation_log),
):
    """Store a forwarded violation report. No response body."""
    client_ip = request.client.host if request.client else ""
    log.record(
        blocked_uri=report.blocked_uri,
        violated_directive=report.violated_directive,
        timestamp=report.timestamp,
        user_agent=report.user_agent,
        client_ip=client_ip,
    )
    logger.info(f"Violation received: {report.violated_directive} blocked {report.blocked_uri}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/csp-violations", response_model=list[ViolationRecordResponse])
async def list_violations(
    directive: Optional[str] = Query(None),
    limit: int = Query(200, ge=1, le=1000),
    log: ViolationLog = Depends(get_violation_log),
):
    """List received violation reports, newest first."""
    return [ViolationRecordResponse(**asdict(r)) for r in log.get_events(directive=directive, limit=limit)]
