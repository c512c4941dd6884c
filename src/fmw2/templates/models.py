from __future__ import annotations

import datetime as dt
import re
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fmw2.config import settings
from fmw2.templates.dates import parse_date

Generator = Callable[[Mapping[str, str], dt.date], str]


class FieldType(str, Enum):
    TEXT = "text"
    MULTILINE = "multiline"
    SELECT = "select"
    DATE = "date"
    BOOLEAN = "boolean"


class ShowIf(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    equals: str


class TemplateField(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    label: str
    type: FieldType = FieldType.TEXT
    placeholder: Optional[str] = None
    options: list[str] = Field(default_factory=list)
    required: bool = True
    pattern: Optional[str] = None
    error_message: Optional[str] = None
    default: Optional[str] = None
    show_if: Optional[ShowIf] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "TemplateField":
        if self.type == FieldType.SELECT and not self.options:
            raise ValueError(f"select field '{self.key}' must declare options")
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as exc:
                raise ValueError(f"field '{self.key}' has an invalid pattern: {exc}") from exc
        return self

    def is_visible(self, values: Mapping[str, str]) -> bool:
        if self.show_if is None:
            return True
        return values.get(self.show_if.key) == self.show_if.equals

    def matches(self, value: str) -> bool:
        if not self.pattern:
            return True
        return re.fullmatch(self.pattern, value) is not None


class TemplateDefinition(BaseModel):
    """
    One report type: display name, ordered fields and the generation function.
    Custom-UI templates (guard duty, routine order) carry no fields and no generator;
    their input is collected by dedicated builders.
    """
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    fields: list[TemplateField] = Field(default_factory=list)
    generate: Optional[Generator] = Field(default=None, exclude=True, repr=False)
    custom_ui: bool = False

    @model_validator(mode="after")
    def _check_fields(self) -> "TemplateDefinition":
        keys = [f.key for f in self.fields]
        if len(keys) != len(set(keys)):
            raise ValueError(f"template '{self.key}' declares duplicate field keys")
        by_key = {f.key: f for f in self.fields}
        for f in self.fields:
            if f.show_if is None:
                continue
            if f.show_if.key == f.key or f.show_if.key not in by_key:
                raise ValueError(
                    f"field '{f.key}' in template '{self.key}' depends on unknown field '{f.show_if.key}'"
                )
        for f in self.fields:
            seen = {f.key}
            current = f
            while current.show_if is not None:
                current = by_key[current.show_if.key]
                if current.key in seen:
                    raise ValueError(f"template '{self.key}' has a showIf cycle through '{f.key}'")
                seen.add(current.key)
        if not self.custom_ui and self.generate is None:
            raise ValueError(f"template '{self.key}' needs a generator")
        return self

    @property
    def field_keys(self) -> list[str]:
        return [f.key for f in self.fields]

    def field(self, key: str) -> Optional[TemplateField]:
        for f in self.fields:
            if f.key == key:
                return f
        return None

    def defaults(self) -> dict[str, str]:
        return {f.key: f.default for f in self.fields if f.default is not None}


class ICType(str, Enum):
    IC2 = "2IC"
    IC3 = "3IC"
    IC4 = "4IC"


IC_ORDER: list[ICType] = [ICType.IC2, ICType.IC3, ICType.IC4]


def _coerce_day(value: Any) -> Any:
    if isinstance(value, (dt.date, str)) or value is None:
        parsed = parse_date(value)
        if parsed is None:
            raise ValueError(f"invalid date: {value!r}")
        return parsed
    return value


class GuardDutyEntry(BaseModel):
    date: dt.date
    ic_types: list[ICType] = Field(default_factory=list)
    num_guards: int = Field(default_factory=lambda: settings.unit.default_num_guards, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: Any) -> Any:
        return _coerce_day(value)

    @field_validator("ic_types")
    @classmethod
    def _order_ic_types(cls, value: list[ICType]) -> list[ICType]:
        selected = set(value)
        return [ic for ic in IC_ORDER if ic in selected]


class RecoveryDuty(BaseModel):
    cmdr: str = ""
    ic2: str = ""
    crew: str = ""  # one name per line


class VehicleRecoveryDuty(BaseModel):
    cmdr: str = ""
    driver: str = ""
    mechanic: str = ""


class RegimentalEntry(BaseModel):
    date: dt.date
    dfo: str = ""
    udo: str = ""
    duty_clerk: str = ""
    rcv: RecoveryDuty = Field(default_factory=RecoveryDuty)
    arv: VehicleRecoveryDuty = Field(default_factory=VehicleRecoveryDuty)
    hrv: VehicleRecoveryDuty = Field(default_factory=VehicleRecoveryDuty)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: Any) -> Any:
        return _coerce_day(value)

    @classmethod
    def blank(cls, day: dt.date) -> "RegimentalEntry":
        return cls(date=day)


class RoutineOrderState(BaseModel):
    safety_message: str = ""
    event_update: str = ""
    span_days: Optional[int] = Field(default=None, ge=1, le=4)
    entries: list[RegimentalEntry] = Field(default_factory=list)
    guard_duty_text: str = ""
