from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from fmw2.api.deps import get_log_service, require_auth
from fmw2.api.schemas import LogResponse
from fmw2.logs import GenerationLog, GenerationLogService

router = APIRouter(prefix="/api/logs", tags=["logs"])


@router.post("", response_model=LogResponse)
def submit_log(
    record: GenerationLog,
    request: Request,
    svc: GenerationLogService = Depends(get_log_service),
    _auth=Depends(require_auth),
):
    if record.user_agent is None:
        record.user_agent = request.headers.get("user-agent")
    log_id = svc.submit(record)
    return LogResponse(success=True, log_id=log_id)


@router.get("")
def recent_logs(
    limit: int = Query(50, ge=1, le=500),
    svc: GenerationLogService = Depends(get_log_service),
    _auth=Depends(require_auth),
):
    return {"rows": svc.recent(limit=limit)}
