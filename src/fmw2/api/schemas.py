from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field

from fmw2.templates.models import GuardDutyEntry, RegimentalEntry, RoutineOrderState, TemplateField


class TemplateSummary(BaseModel):
    key: str
    name: str
    custom_ui: bool = False


class TemplateSchema(TemplateSummary):
    fields: list[TemplateField] = Field(default_factory=list)
    defaults: dict[str, str] = Field(default_factory=dict)


class GenerateRequest(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)
    today: Optional[date] = None


class GenerateResponse(BaseModel):
    template: str
    template_type: str
    text: str


class GuardDutyRequest(BaseModel):
    month: int = Field(ge=0, le=11)
    year: int = Field(ge=1900, le=9999)
    entries: list[GuardDutyEntry] = Field(default_factory=list)


class PruneRequest(BaseModel):
    text: str = ""
    today: Optional[date] = None


class TextResponse(BaseModel):
    text: str


class ResizeRequest(BaseModel):
    span_days: Optional[int] = Field(default=None, ge=1, le=4)
    entries: list[RegimentalEntry] = Field(default_factory=list)
    today: Optional[date] = None


class ResizeResponse(BaseModel):
    span_days: int
    entries: list[RegimentalEntry]


class RoutineOrderRequest(RoutineOrderState):
    today: Optional[date] = None

    def to_state(self) -> RoutineOrderState:
        return RoutineOrderState(**self.model_dump(exclude={"today"}))


class LogResponse(BaseModel):
    success: bool = True
    log_id: Optional[str] = None
