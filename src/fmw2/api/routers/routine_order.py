from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request

from fmw2.api.deps import get_template_service, record_generation
from fmw2.api.schemas import GenerateResponse, ResizeRequest, ResizeResponse, RoutineOrderRequest
from fmw2.templates import RoutineOrderState, TemplateService

router = APIRouter(prefix="/routine-order", tags=["routine-order"])


@router.post("/entries", response_model=ResizeResponse)
def resize_entries(
    body: ResizeRequest,
    svc: TemplateService = Depends(get_template_service),
):
    try:
        state = svc.resize_routine_order(
            RoutineOrderState(entries=body.entries),
            span_days=body.span_days,
            today=body.today,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return ResizeResponse(span_days=state.span_days, entries=state.entries)


@router.post("/generate", response_model=GenerateResponse)
def generate_routine_order(
    body: RoutineOrderRequest,
    request: Request,
    background: BackgroundTasks,
    svc: TemplateService = Depends(get_template_service),
):
    result = svc.build_routine_order(body.to_state(), today=body.today)
    background.add_task(record_generation, result, request.headers.get("user-agent"))
    return GenerateResponse(template=result.template, template_type=result.template_type, text=result.text)
