from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from fmw2.api.deps import get_template_service, record_generation
from fmw2.api.schemas import GenerateRequest, GenerateResponse, TemplateSchema, TemplateSummary
from fmw2.templates import TemplateService
from fmw2.templates.engine import defaults_for

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=list[TemplateSummary])
def list_templates(svc: TemplateService = Depends(get_template_service)):
    return [
        TemplateSummary(key=t.key, name=t.name, custom_ui=t.custom_ui)
        for t in svc.list_templates()
    ]


@router.get("/{template_id}", response_model=TemplateSchema)
def template_schema(template_id: str, svc: TemplateService = Depends(get_template_service)):
    template = svc.get(template_id)
    return TemplateSchema(
        key=template.key,
        name=template.name,
        custom_ui=template.custom_ui,
        fields=template.fields,
        defaults=defaults_for(template),
    )


@router.post("/{template_id}/generate", response_model=GenerateResponse)
def generate_template(
    template_id: str,
    body: GenerateRequest,
    request: Request,
    background: BackgroundTasks,
    svc: TemplateService = Depends(get_template_service),
):
    result = svc.render(template_id, body.values, today=body.today)
    background.add_task(record_generation, result, request.headers.get("user-agent"))
    return GenerateResponse(template=result.template, template_type=result.template_type, text=result.text)
