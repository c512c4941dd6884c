from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from fmw2.config import settings
from fmw2.templates.dates import format_dd_mm_yyyy, local_today

# Categories folded into STAYOUT and zeroed in the adjusted roster.
FOLDED_LABELS = ("OS", "OTHERS", "RSO", "RSI")
LABELS = ("STAYIN", "STAYOUT", *FOLDED_LABELS)

_PATTERNS: dict[str, re.Pattern[str]] = {}


def line_pattern(label: str) -> re.Pattern[str]:
    """`LABEL: <int>` alone on its line, optional blanks around (newlines excluded)."""
    if label not in _PATTERNS:
        _PATTERNS[label] = re.compile(
            rf"^[^\S\n]*{re.escape(label)}:[^\S\n]*(\d+)[^\S\n]*$",
            re.MULTILINE,
        )
    return _PATTERNS[label]


def read_count(text: str, label: str) -> int:
    match = line_pattern(label).search(text or "")
    return int(match.group(1)) if match else 0


def rewrite_count(text: str, label: str, value: int) -> str:
    return line_pattern(label).sub(f"{label}: {value}", text, count=1)


@dataclass(slots=True)
class NightStrengthTally:
    stay_in: int = 0
    stay_out: int = 0
    outstation: int = 0
    others: int = 0
    rso: int = 0
    rsi: int = 0

    @classmethod
    def from_text(cls, text: str) -> "NightStrengthTally":
        return cls(
            stay_in=read_count(text, "STAYIN"),
            stay_out=read_count(text, "STAYOUT"),
            outstation=read_count(text, "OS"),
            others=read_count(text, "OTHERS"),
            rso=read_count(text, "RSO"),
            rsi=read_count(text, "RSI"),
        )

    @property
    def moved_out(self) -> int:
        return self.outstation + self.others + self.rso + self.rsi

    @property
    def new_stay_out(self) -> int:
        return self.stay_out + self.moved_out

    def blk420(self, blk210: int) -> int:
        # May go negative when BLK210 exceeds STAYIN; passed through as-is.
        return self.stay_in - blk210


def adjust_roster(text: str) -> str:
    tally = NightStrengthTally.from_text(text)
    adjusted = text
    for label in FOLDED_LABELS:
        adjusted = rewrite_count(adjusted, label, 0)
    return rewrite_count(adjusted, "STAYOUT", tally.new_stay_out)


def adjust_night_strength(
    raw_roster_text: str,
    blk210: int,
    *,
    rank: str = "",
    name: str = "",
    today: Optional[date] = None,
) -> str:
    text = raw_roster_text or ""
    tally = NightStrengthTally.from_text(text)
    reporter = " ".join(part for part in (rank, (name or "").upper()) if part)
    day = today or local_today()

    return f"""{settings.unit.unit_name} NIGHT STRENGTH {format_dd_mm_yyyy(day)} BY {reporter}

{adjust_roster(text)}

STAYIN DETAILS
BLK210: {blk210}
BLK420: {tally.blk420(blk210)}"""
