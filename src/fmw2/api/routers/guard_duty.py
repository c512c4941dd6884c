from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from fmw2.api.deps import get_template_service, record_generation
from fmw2.api.schemas import GenerateResponse, GuardDutyRequest, PruneRequest, TextResponse
from fmw2.templates import TemplateService

router = APIRouter(prefix="/guard-duty", tags=["guard-duty"])


@router.post("/generate", response_model=GenerateResponse)
def generate_guard_duty(
    body: GuardDutyRequest,
    request: Request,
    background: BackgroundTasks,
    svc: TemplateService = Depends(get_template_service),
):
    result = svc.build_guard_duty(body.month, body.year, body.entries)
    background.add_task(record_generation, result, request.headers.get("user-agent"))
    return GenerateResponse(template=result.template, template_type=result.template_type, text=result.text)


@router.post("/prune", response_model=TextResponse)
def prune_guard_duty(
    body: PruneRequest,
    svc: TemplateService = Depends(get_template_service),
):
    return TextResponse(text=svc.prune_guard_duty(body.text, today=body.today))
