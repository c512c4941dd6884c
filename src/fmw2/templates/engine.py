from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from fmw2.exceptions import (
    DateRangeError,
    InvalidDate,
    InvalidFormat,
    MissingField,
    UnsupportedTemplate,
)
from fmw2.templates.dates import local_today, parse_date
from fmw2.templates.models import FieldType, TemplateDefinition, TemplateField

_TRUTHY = {"true", "1", "yes", "on"}


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_values(template: TemplateDefinition, values: Mapping[str, Any]) -> dict[str, str]:
    """
    Coerces submitted values to strings. Boolean fields always carry "true"/"false";
    an unticked (absent) checkbox reads as "false".
    """
    clean: dict[str, str] = {}
    for key, value in (values or {}).items():
        text = _as_text(value)
        if text is not None:
            clean[str(key)] = text
    for f in template.fields:
        if f.type == FieldType.BOOLEAN:
            raw = clean.get(f.key, "").strip().lower()
            clean[f.key] = "true" if raw in _TRUTHY else "false"
    return clean


def active_fields(template: TemplateDefinition, values: Mapping[str, str]) -> list[TemplateField]:
    return [f for f in template.fields if f.is_visible(values)]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def _single_date_field(template: TemplateDefinition, token: str) -> Optional[TemplateField]:
    candidates = [f for f in template.fields if f.type == FieldType.DATE and token in f.key.lower()]
    return candidates[0] if len(candidates) == 1 else None


def validate(template: TemplateDefinition, values: Mapping[str, Any]) -> dict[str, str]:
    """
    Runs the visibility / required / pattern / date checks in order and returns
    the reduced value map (declared keys only, missing keys as "").
    Raises the first failure found.
    """
    clean = normalize_values(template, values)
    active = active_fields(template, clean)

    for f in active:
        if f.required and _is_blank(clean.get(f.key)):
            raise MissingField(f.label)

    for f in active:
        value = clean.get(f.key)
        if f.pattern and value and not f.matches(value):
            raise InvalidFormat(f.label, f.error_message)

    for f in active:
        if f.type != FieldType.DATE:
            continue
        value = clean.get(f.key)
        if _is_blank(value):
            if f.required:
                raise InvalidDate(f.label)
            continue
        if parse_date(value) is None:
            raise InvalidDate(f.label)

    start_field = _single_date_field(template, "start")
    end_field = _single_date_field(template, "end")
    if start_field and end_field:
        start = parse_date(clean.get(start_field.key))
        end = parse_date(clean.get(end_field.key))
        if start and end and end < start:
            raise DateRangeError()

    return {key: clean.get(key, "") for key in template.field_keys}


def generate(
    template: TemplateDefinition,
    values: Mapping[str, Any],
    today: Optional[date] = None,
) -> str:
    if template.custom_ui or template.generate is None:
        raise UnsupportedTemplate(template.key)
    reduced = validate(template, values)
    return template.generate(reduced, today or local_today())


def defaults_for(template: TemplateDefinition) -> dict[str, str]:
    return template.defaults()
