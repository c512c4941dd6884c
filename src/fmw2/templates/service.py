from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic import BaseModel, Field

from fmw2.exceptions import FMW2Error, GenerationFailed, UnknownTemplate
from fmw2.templates import engine
from fmw2.templates.dates import local_today
from fmw2.templates.guard_duty import build_guard_duty_list, prune_guard_duty_list
from fmw2.templates.models import GuardDutyEntry, RoutineOrderState, TemplateDefinition
from fmw2.templates.registry import TEMPLATES
from fmw2.templates.routine_order import compose_routine_order, resize_routine_order

logger = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    template: str
    template_type: str
    text: str
    fields: dict[str, Any] = Field(default_factory=dict)


class TemplateService:
    """
    Entry point for every generation path. Validation outcomes propagate as-is;
    anything else raised while rendering becomes GenerationFailed.
    """

    def __init__(
        self,
        templates: Optional[Mapping[str, TemplateDefinition]] = None,
        clock: Callable[[], date] = local_today,
    ):
        self.templates = templates if templates is not None else TEMPLATES
        self.clock = clock

    def list_templates(self) -> list[TemplateDefinition]:
        return list(self.templates.values())

    def get(self, template_id: str) -> TemplateDefinition:
        template = self.templates.get(template_id)
        if template is None:
            raise UnknownTemplate(template_id)
        return template

    def _guarded(self, template_id: str, render: Callable[[], str]) -> str:
        try:
            return render()
        except FMW2Error:
            raise
        except Exception as exc:
            logger.exception("generation failed", extra={"template": template_id})
            raise GenerationFailed() from exc

    def render(self, template_id: str, values: Mapping[str, Any], today: Optional[date] = None) -> GenerationResult:
        template = self.get(template_id)
        day = today or self.clock()
        text = self._guarded(template_id, lambda: engine.generate(template, values, day))
        return GenerationResult(
            template=template.key,
            template_type=template.name,
            text=text,
            fields=engine.normalize_values(template, {k: values.get(k) for k in template.field_keys}),
        )

    def build_guard_duty(self, month: int, year: int, entries: Iterable[GuardDutyEntry]) -> GenerationResult:
        template = self.get("guardDuty")
        entries = list(entries)
        text = self._guarded(template.key, lambda: build_guard_duty_list(month, year, entries))
        return GenerationResult(
            template=template.key,
            template_type=template.name,
            text=text,
            fields={
                "month": month,
                "year": year,
                "entries": [e.model_dump(mode="json") for e in entries],
            },
        )

    def prune_guard_duty(self, text: str, today: Optional[date] = None) -> str:
        day = today or self.clock()
        return self._guarded("guardDuty", lambda: prune_guard_duty_list(text, day))

    def resize_routine_order(
        self,
        state: RoutineOrderState,
        span_days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> RoutineOrderState:
        return resize_routine_order(state, today or self.clock(), span_days)

    def build_routine_order(self, state: RoutineOrderState, today: Optional[date] = None) -> GenerationResult:
        template = self.get("routineOrder")
        day = today or self.clock()
        text = self._guarded(template.key, lambda: compose_routine_order(state, day))
        return GenerationResult(
            template=template.key,
            template_type=template.name,
            text=text,
            fields={
                "span_days": state.span_days,
                "days": [e.date.isoformat() for e in state.entries],
                "has_safety_message": bool(state.safety_message.strip()),
                "has_events": bool(state.event_update.strip()),
                "has_guard_duty": bool(state.guard_duty_text.strip()),
            },
        )
