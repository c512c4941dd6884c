from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from pydantic import BaseModel, Field, field_validator

from fmw2.exceptions import DuplicateDate, NoEntries
from fmw2.templates.dates import MONTHS, calendar_date, day_name, month_name_to_index, parse_date, start_of_day
from fmw2.templates.models import GuardDutyEntry, ICType, IC_ORDER

BLOCK_SEPARATOR = "=" * 10
PRUNED_SEPARATOR = "\n\n" + "=" * 14 + "\n\n"

HEADER_RE = re.compile(
    r"^GUARD DUTY[^\S\n]+([A-Za-z]+)[^\S\n]+(\d{4})[^\S\n]*$",
    re.MULTILINE | re.IGNORECASE,
)
# "16/2 (PM) (MONDAY)" and similar decorated date lines start a block.
DATE_LINE_RE = re.compile(r"^[^\S\n]*(\d{1,2})/(\d{1,2})\b.*$", re.MULTILINE)
SEPARATOR_LINE_RE = re.compile(r"^\s*=+\s*$")


def _stanza(label: str) -> str:
    return f"{label}: \nNUMBER: \n\n"


def _check_unique(entries: Iterable[GuardDutyEntry]) -> list[GuardDutyEntry]:
    seen: set[date] = set()
    ordered = sorted(entries, key=lambda e: e.date)
    for entry in ordered:
        if entry.date in seen:
            raise DuplicateDate(entry.date)
        seen.add(entry.date)
    return ordered


def build_guard_duty_list(month: int, year: int, entries: Iterable[GuardDutyEntry]) -> str:
    """
    Renders the blank roster: a header, then one block per duty date with the
    selected IC stanzas followed by the guard stanzas. Blocks are separated
    (not terminated) by a line of ten '='.
    """
    if not 0 <= month <= 11:
        raise ValueError(f"month index out of range: {month}")
    ordered = _check_unique(entries)
    if not ordered:
        raise NoEntries()

    result = f"GUARD DUTY {MONTHS[month].upper()} {year}\n"
    for idx, entry in enumerate(ordered):
        day = entry.date
        result += f"{day.day}/{day.month} ({day_name(day)})\n"
        for ic in IC_ORDER:
            if ic in entry.ic_types:
                result += _stanza(ic.value)
        for _ in range(entry.num_guards):
            result += _stanza("G")
        if idx < len(ordered) - 1:
            result += f"{BLOCK_SEPARATOR}\n"
    return result.rstrip()


class GuardDutyRoster(BaseModel):
    """Editable set of duty dates for one roster, kept sorted by date."""

    month: int = Field(ge=0, le=11)
    year: int
    entries: list[GuardDutyEntry] = Field(default_factory=list)

    @field_validator("entries")
    @classmethod
    def _sort_entries(cls, value: list[GuardDutyEntry]) -> list[GuardDutyEntry]:
        return sorted(value, key=lambda e: e.date)

    @classmethod
    def for_month_of(cls, today: date) -> "GuardDutyRoster":
        return cls(month=today.month - 1, year=today.year)

    def _find(self, day: date) -> Optional[GuardDutyEntry]:
        key = start_of_day(day)
        for entry in self.entries:
            if entry.date == key:
                return entry
        return None

    def _require(self, day: date) -> GuardDutyEntry:
        entry = self._find(day)
        if entry is None:
            raise KeyError(f"no guard duty entry for {day.isoformat()}")
        return entry

    def add_date(self, day: date, num_guards: Optional[int] = None) -> GuardDutyEntry:
        if self._find(day) is not None:
            raise DuplicateDate(start_of_day(day))
        entry = GuardDutyEntry(date=day) if num_guards is None else GuardDutyEntry(date=day, num_guards=num_guards)
        self.entries = sorted([*self.entries, entry], key=lambda e: e.date)
        return entry

    def remove_date(self, day: date) -> bool:
        key = start_of_day(day)
        remaining = [e for e in self.entries if e.date != key]
        removed = len(remaining) != len(self.entries)
        self.entries = remaining
        return removed

    def toggle_ic(self, day: date, ic: ICType) -> list[ICType]:
        entry = self._require(day)
        ic = ICType(ic)
        selected = set(entry.ic_types)
        selected.symmetric_difference_update({ic})
        entry.ic_types = [role for role in IC_ORDER if role in selected]
        return entry.ic_types

    def set_num_guards(self, day: date, num_guards: int) -> None:
        if num_guards < 0:
            raise ValueError("number of guards cannot be negative")
        self._require(day).num_guards = num_guards

    def build(self) -> str:
        return build_guard_duty_list(self.month, self.year, self.entries)


@dataclass(slots=True)
class GuardDutyHeader:
    line: str
    month_index: Optional[int]
    year: int


@dataclass(slots=True)
class GuardDutyBlock:
    date: Optional[date]  # None when the calendar cannot place it
    text: str

    def is_current(self, today: date) -> bool:
        return self.date is None or self.date >= today


def match_header(text: str) -> Optional[GuardDutyHeader]:
    match = HEADER_RE.search(text)
    if not match:
        return None
    return GuardDutyHeader(
        line=match.group(0).strip(),
        month_index=month_name_to_index(match.group(1)),
        year=int(match.group(2)),
    )


def find_date_lines(body: str) -> list[re.Match[str]]:
    return list(DATE_LINE_RE.finditer(body))


def split_blocks(body: str, year: int, fallback_month: Optional[int]) -> list[GuardDutyBlock]:
    """
    Cuts the body at each date line. A line whose month numeral is out of
    range takes the header month instead; a date outside the calendar range
    (year 0, past year 9999) leaves the block undated.
    """
    matches = find_date_lines(body)
    blocks: list[GuardDutyBlock] = []
    for idx, match in enumerate(matches):
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(body)
        day = int(match.group(1))
        month_index = int(match.group(2)) - 1
        if not 0 <= month_index <= 11:
            month_index = fallback_month if fallback_month is not None else 0
        try:
            day_date: Optional[date] = calendar_date(year, month_index, day)
        except (ValueError, OverflowError):
            day_date = None
        blocks.append(GuardDutyBlock(date=day_date, text=body[match.start():end]))
    return blocks


def strip_block(text: str) -> str:
    """Drops trailing whitespace and any trailing '=' separator lines."""
    lines = text.rstrip().split("\n")
    while len(lines) > 1 and SEPARATOR_LINE_RE.match(lines[-1]):
        lines.pop()
        while len(lines) > 1 and not lines[-1].strip():
            lines.pop()
    return "\n".join(lines).rstrip()


def prune_guard_duty_list(raw_text: str, today: date | str) -> str:
    """
    Keeps only the dated blocks on or after `today` and rebuilds the list with
    canonical separators. Text without any date line is returned as-is.
    """
    text = (raw_text or "").replace("\r\n", "\n").strip()
    if not text:
        return ""

    today0 = parse_date(today) if isinstance(today, str) else start_of_day(today)
    if today0 is None:
        raise ValueError(f"invalid date: {today!r}")

    header = match_header(text)
    body = text.replace(header.line, "", 1).lstrip() if header else text
    if not find_date_lines(body):
        return text

    year = header.year if header else today0.year
    blocks = split_blocks(body, year, header.month_index if header else None)
    kept = [strip_block(block.text) for block in blocks if block.is_current(today0)]

    if not kept:
        return header.line if header else ""

    rebuilt = PRUNED_SEPARATOR.join(kept)
    return f"{header.line}\n\n{rebuilt}" if header else rebuilt
