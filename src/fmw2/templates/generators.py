"""
Pure text generators, one per flat-form template.

Every generator receives the reduced value map (declared keys only, missing
keys as "") and today's local date, and returns the text block verbatim.
Values have already been validated by the engine.
"""
from __future__ import annotations

from datetime import date
from typing import Mapping

from fmw2.config import settings
from fmw2.templates.dates import (
    add_days,
    format_compact,
    format_dd_mm_yy,
    format_long_range,
    parse_date,
)
from fmw2.templates.night_strength import adjust_night_strength

BULLET = "•"


def _date_window(values: Mapping[str, str]) -> str:
    start = parse_date(values["startDate"])
    end = parse_date(values["endDate"])
    return format_long_range(start, end)


def off_awarded(values: Mapping[str, str], today: date) -> str:
    lines = [
        f"{BULLET} Rank/Name: {values['rank']} {values['name'].upper()}",
        f"{BULLET} Reason for Accumulation: {values['offAwardReason']}",
        f"{BULLET} Dates Accumulated: {_date_window(values)}",
        f"{BULLET} Balance (After Accumulation): {values['balance']}",
        f"{BULLET} Recommended By: {values['recommendedBy']}",
    ]
    return "\n".join(lines)


def off_application(values: Mapping[str, str], today: date) -> str:
    dates = _date_window(values)
    if values.get("isHalfDay") == "true" and values.get("timeOff"):
        dates = f"{dates} [{values['timeOff']}]"
    lines = [
        f"{BULLET} Rank/Name: {values['rank']} {values['name'].upper()}",
        f"{BULLET} Type: {values['typeOff']}",
        f"{BULLET} Dates: {dates}",
        f"{BULLET} Balance Left: {values['balance']}",
        f"{BULLET} Recommended By: {values['recommendedBy']}",
    ]
    return "\n".join(lines)


def report_sick(values: Mapping[str, str], today: date) -> str:
    status = values["newStatus"]
    incident = parse_date(values["dateIncident"])
    stamp = format_compact(incident)
    start_time = values["startTimeIncident"]
    location = values["location"]
    short_location = settings.unit.location_abbreviations.get(location, location)

    details = (
        f"At {stamp} around {start_time}hrs, serviceman went to {values['typeSick']} "
        f"at {short_location} for {values['reasonSick'].upper()}."
    )
    if status == "UPDATED":
        days = int(values["dayStatus"])
        until = add_days(incident, days - 1)
        details += (
            f"\nAt around {values['endTimeIncident']}hrs, serviceman was given "
            f"{values['dayStatus']} day {values['sickStatus']} from {stamp} to {format_compact(until)}."
        )
        if values.get("mcRefNo"):
            details += f" Ref No.: {values['mcRefNo']}"

    return f"""*{status}*

RSI/RSO/MA Reporting Template
(Serviceman do not need to fill out SN 10 and 11)

1. Type of Incident:
Non-Training Related

2. Date & Time of Incident:
{stamp}/ {start_time}hrs

3. Serviceman/Woman Involved: Rank/Name: {values['rank']} {values['name'].upper()}

4. Serviceman/woman Unit/ Company Unit:
{settings.unit.unit_path}

5. Location: {location}

6. Details of Incident:
{details}

7. Injury/ Damages: NIL

8. Follow-up Updates: NIL

9. NOK informed: Yes

10. Date/ Time Verbal Report to IHQ & GSOC:

11. Date/ Time of ESIS to GSOC:

12. Reporting Person: {values['recommendedBy']}"""


def _with_unit(value: str, unit: str, placeholder: str) -> str:
    return f"{value}{unit}" if value else placeholder


def hull_bos(values: Mapping[str, str], today: date) -> str:
    present = values.get("vehiclePresent") == "true"
    header = f"MID {values['mid']}✅" if present else f"MID {values['mid']}⏳ ({values['vehicleStatus']})"

    if not present:
        return "\n".join(
            [
                header,
                f"📍 {values['vehicleLocation']}",
                "📅 [Date] 🕚 [Time]",
                "ODO: [xx] | EH: [xx]",
                "🔋 AUX: [%] [V] | STARTER: [%] [V]",
                "⛽️ FUEL: [%] [L]",
                "🔥 AFES EXPIRY: [MM/YYYY]",
                "🛠️ Faults:",
                f"{BULLET} [Fault Description]",
            ]
        )

    bos_date = parse_date(values.get("bosDate"))
    faults = [line.strip() for line in values.get("faults", "").split("\n") if line.strip()]
    fault_text = "\n" + "\n".join(f"{BULLET} {fault}" for fault in faults) if faults else " NIL"

    return "\n".join(
        [
            header,
            f"📍 {values['vehicleLocation']}",
            f"📅 {format_dd_mm_yy(bos_date) if bos_date else '[Date]'} 🕚 {_with_unit(values['bosTime'], 'hrs', '[Time]')}",
            f"ODO: {_with_unit(values['odo'], 'km', '[xx]')} | EH: {_with_unit(values['eh'], 'hrs', '[xx]')}",
            (
                f"🔋 AUX: {_with_unit(values['auxPercent'], '%', '[%]')} {_with_unit(values['auxVolt'], 'V', '[V]')}"
                f" | STARTER: {_with_unit(values['starterPercent'], '%', '[%]')} {_with_unit(values['starterVolt'], 'V', '[V]')}"
            ),
            f"⛽️ FUEL: {_with_unit(values['fuelPercent'], '%', '[%]')} {_with_unit(values['fuelLitre'], 'L', '[L]')}",
            f"🔥 AFES EXPIRY: {values['afesExpiry'] or '[MM/YYYY]'}",
            f"🛠️ Faults:{fault_text}",
        ]
    )


def night_strength(values: Mapping[str, str], today: date) -> str:
    return adjust_night_strength(
        values["psNightStrength"],
        int(values["blk210"]),
        rank=values["rank"],
        name=values["name"],
        today=today,
    )


GENERATORS = {
    "offAwarded": off_awarded,
    "offTemplate": off_application,
    "reportSick": report_sick,
    "hullBOS": hull_bos,
    "nightStrength": night_strength,
}
