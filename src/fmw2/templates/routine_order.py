from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from fmw2.config import settings
from fmw2.templates.dates import add_days, day_name, default_span_days, format_dd_mm_yy, format_dd_mm_yyyy
from fmw2.templates.guard_duty import prune_guard_duty_list
from fmw2.templates.models import RegimentalEntry, RoutineOrderState

UNSET = "[]"
ALLOWED_SPANS = (1, 2, 3, 4)

CO_SAFETY_TAG = "**⚠️—CO SAFETY MESSAGE—⚠️**"
SAFETY_TAG = "**—SAFETY MESSAGE OF THE DAY—**"
EVENTS_TAG = "*—UPCOMING EVENTS/NOTICE—*"
REGIMENTAL_TAG = "**🪖—REGIMENTAL DUTIES—🪖**"
GUARD_DUTY_TAG = "**🧙🏻‍♂️—GUARD DUTY—🧙🏻‍♂️**"

CO_SAFETY_LINES = [
    "1. Zero Fatal Injuries",
    "2. Zero Major Injuries",
    "3. Zero Heat Stroke",
    "4. Zero Negligent Discharge of Live Ammunition",
    "5. Zero Severe Vehicle Incidents",
    "6. Zero Severe Workplace Incidents",
]


def _or_unset(value: str) -> str:
    return value or UNSET


def format_regimental_entry(entry: RegimentalEntry) -> str:
    marker = f"-<{day_name(entry.date)} {format_dd_mm_yy(entry.date)}>-"
    crew = [line.strip() for line in (entry.rcv.crew or "").split("\n") if line.strip()]
    crew_text = "".join(f"\n- {name}" for name in crew) if crew else f" {UNSET}"

    return f"""{marker}
DFO- {_or_unset(entry.dfo)}
UDO- {_or_unset(entry.udo)}
DUTY CLERK- {_or_unset(entry.duty_clerk)}

RCV Recovery Duty
CMDR- {_or_unset(entry.rcv.cmdr)}
2IC- {_or_unset(entry.rcv.ic2)}
CREW-{crew_text}

ARV Recover duty
CMDR- {_or_unset(entry.arv.cmdr)}
DRIVER- {_or_unset(entry.arv.driver)}
MECHANIC- {_or_unset(entry.arv.mechanic)}

HRV Recover duty
CMDR- {_or_unset(entry.hrv.cmdr)}
DRIVER- {_or_unset(entry.hrv.driver)}
MECHANIC- {_or_unset(entry.hrv.mechanic)}

{marker}"""


def format_regimental(entries: Iterable[RegimentalEntry]) -> str:
    return "\n\n".join(format_regimental_entry(e) for e in sorted(entries, key=lambda e: e.date))


def resize_regimental_entries(
    entries: Iterable[RegimentalEntry],
    span_days: int,
    today: date,
) -> list[RegimentalEntry]:
    """
    Re-derives the contiguous run of days starting today. Existing entries are
    matched by date and kept; new days get blank entries; days out of range drop.
    """
    if span_days not in ALLOWED_SPANS:
        raise ValueError(f"span_days must be one of {ALLOWED_SPANS}, got {span_days}")
    by_day = {e.date: e for e in entries}
    wanted = [add_days(today, offset) for offset in range(span_days)]
    return [by_day[day].model_copy(deep=True) if day in by_day else RegimentalEntry.blank(day) for day in wanted]


def resize_routine_order(
    state: RoutineOrderState,
    today: date,
    span_days: Optional[int] = None,
) -> RoutineOrderState:
    span = span_days or state.span_days or default_span_days(today)
    return state.model_copy(
        update={
            "span_days": span,
            "entries": resize_regimental_entries(state.entries, span, today),
        }
    )


def _wrapped(tag: str, body: str) -> str:
    return f"{tag}\n{body}\n{tag}" if body else f"{tag}\n{tag}"


def build_routine_order(
    safety_message: str,
    event_update: str,
    regimental_duties_text: str,
    guard_duty_text: str,
    today: date,
) -> str:
    title = f"**{settings.unit.unit_name} DRO {day_name(today)} {format_dd_mm_yyyy(today)}**"
    sections = [
        "\n".join([title, CO_SAFETY_TAG, *CO_SAFETY_LINES, CO_SAFETY_TAG]),
        f"{SAFETY_TAG}\n{(safety_message or '').upper()}\n{SAFETY_TAG}",
        _wrapped(EVENTS_TAG, event_update),
        _wrapped(REGIMENTAL_TAG, regimental_duties_text),
        _wrapped(GUARD_DUTY_TAG, guard_duty_text),
    ]
    return "\n\n".join(sections) + "\n"


def compose_routine_order(state: RoutineOrderState, today: date) -> str:
    """Formats the regimental roster, prunes past guard duty and assembles the bulletin."""
    entries = state.entries
    if not entries:
        entries = resize_regimental_entries([], state.span_days or default_span_days(today), today)
    return build_routine_order(
        safety_message=state.safety_message,
        event_update=state.event_update,
        regimental_duties_text=format_regimental(entries),
        guard_duty_text=prune_guard_duty_list(state.guard_duty_text, today),
        today=today,
    )
