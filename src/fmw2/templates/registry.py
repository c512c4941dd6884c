from __future__ import annotations

from fmw2.config import settings
from fmw2.exceptions import UnknownTemplate
from fmw2.templates import generators
from fmw2.templates.models import FieldType, ShowIf, TemplateDefinition, TemplateField

TIME_24H = r"^([01][0-9]|2[0-3])[0-5][0-9]$"
TIME_24H_MESSAGE = "Time must be in 24hr format (e.g. 1320)"
DECIMAL = r"^\d+(\.\d+)?$"
INTEGER = r"^\d+$"

VEHICLE_PRESENT = ShowIf(key="vehiclePresent", equals="true")
VEHICLE_ABSENT = ShowIf(key="vehiclePresent", equals="false")
SICK_UPDATED = ShowIf(key="newStatus", equals="UPDATED")


def _rank() -> TemplateField:
    return TemplateField(key="rank", label="Rank", type=FieldType.SELECT, options=list(settings.unit.ranks))


def _name() -> TemplateField:
    return TemplateField(key="name", label="Name", placeholder="Your Name")


def _recommended_by() -> TemplateField:
    return TemplateField(
        key="recommendedBy",
        label="Recommended By",
        placeholder="Rank/Name of AMTT/MTT",
        default=settings.unit.recommended_by_default,
    )


def _balance() -> TemplateField:
    return TemplateField(key="balance", label="Balance Left", placeholder="Balance Left", pattern=DECIMAL)


def _vehicle_reading(key: str, label: str, pattern: str, placeholder: str | None = None) -> TemplateField:
    return TemplateField(
        key=key,
        label=label,
        placeholder=placeholder or label,
        pattern=pattern,
        show_if=VEHICLE_PRESENT,
    )


def build_registry() -> dict[str, TemplateDefinition]:
    templates = [
        TemplateDefinition(
            key="offAwarded",
            name="Off Awarded",
            fields=[
                _rank(),
                _name(),
                TemplateField(
                    key="offAwardReason",
                    label="Reason for Off Awarded",
                    placeholder="e.g. Support for weekend tasking, holiday duty, etc.",
                ),
                TemplateField(key="startDate", label="Start Date", type=FieldType.DATE),
                TemplateField(key="endDate", label="End Date", type=FieldType.DATE),
                _balance(),
                _recommended_by(),
            ],
            generate=generators.off_awarded,
        ),
        TemplateDefinition(
            key="offTemplate",
            name="Leave/Off Application Template",
            fields=[
                _rank(),
                _name(),
                TemplateField(
                    key="typeOff",
                    label="Type",
                    placeholder="Leave / Off if OL, indicate country",
                    pattern=r"^(Off|Leave|OL - .+)$",
                    error_message='Must be "Off", "Leave", or "OL - [country]"',
                ),
                TemplateField(key="startDate", label="Start Date", type=FieldType.DATE),
                TemplateField(key="endDate", label="End Date", type=FieldType.DATE),
                TemplateField(key="isHalfDay", label="Is Half Day?", type=FieldType.BOOLEAN),
                TemplateField(
                    key="timeOff",
                    label="AM OFF/PM OFF",
                    type=FieldType.SELECT,
                    options=["AM", "PM"],
                    show_if=ShowIf(key="isHalfDay", equals="true"),
                ),
                _balance(),
                _recommended_by(),
            ],
            generate=generators.off_application,
        ),
        TemplateDefinition(
            key="reportSick",
            name="RSI/RSO/MA Reporting Template",
            fields=[
                TemplateField(key="newStatus", label="Status", type=FieldType.SELECT, options=["NEW", "UPDATED"]),
                _rank(),
                _name(),
                TemplateField(
                    key="location",
                    label="Location",
                    placeholder="Location of Medical Center",
                    default=settings.unit.medical_centre_default,
                ),
                TemplateField(
                    key="typeSick",
                    label="Status",
                    type=FieldType.SELECT,
                    options=["RSI", "RSO", "MA", "FFI", "ORD FFI"],
                ),
                TemplateField(key="dateIncident", label="Date of Incident", type=FieldType.DATE),
                TemplateField(
                    key="startTimeIncident",
                    label="Start Time of Incident",
                    placeholder="e.g. 1320",
                    pattern=TIME_24H,
                    error_message=TIME_24H_MESSAGE,
                ),
                TemplateField(key="reasonSick", label="Reason for Report", placeholder="e.g. fever, cough, etc."),
                TemplateField(
                    key="endTimeIncident",
                    label="End Time of Incident",
                    placeholder="e.g. 1320",
                    pattern=TIME_24H,
                    error_message=TIME_24H_MESSAGE,
                    show_if=SICK_UPDATED,
                ),
                TemplateField(
                    key="sickStatus",
                    label="Status Sick",
                    placeholder="e.g. LD, MC, Excuse Dust etc.",
                    show_if=SICK_UPDATED,
                ),
                TemplateField(key="dayStatus", label="Number of Days for Status", pattern=INTEGER, show_if=SICK_UPDATED),
                TemplateField(key="mcRefNo", label="MC Ref No", pattern=INTEGER, show_if=SICK_UPDATED, required=False),
                _recommended_by(),
            ],
            generate=generators.report_sick,
        ),
        TemplateDefinition(
            key="hullBOS",
            name="HULL BOS Template",
            fields=[
                TemplateField(key="mid", label="Vehicle MID", placeholder="MID Number", pattern=r"^\d{5}$"),
                TemplateField(key="vehiclePresent", label="Is Vehicle Present?", type=FieldType.BOOLEAN, default="true"),
                TemplateField(key="vehicleStatus", label="Vehicle Not Present Reason", show_if=VEHICLE_ABSENT),
                TemplateField(
                    key="vehicleLocation",
                    label="Vehicle Location",
                    placeholder="Vehicle Location",
                    default=settings.unit.vehicle_location_default,
                ),
                TemplateField(key="bosDate", label="Date of BOS", type=FieldType.DATE, show_if=VEHICLE_PRESENT),
                TemplateField(
                    key="bosTime",
                    label="Time of BOS",
                    placeholder="e.g. 1320",
                    pattern=TIME_24H,
                    error_message=TIME_24H_MESSAGE,
                    show_if=VEHICLE_PRESENT,
                ),
                _vehicle_reading("odo", "Odometer", DECIMAL, placeholder="Odo"),
                _vehicle_reading("eh", "Engine Hour", INTEGER),
                _vehicle_reading("auxPercent", "Auxiliary Battery Percent", INTEGER),
                _vehicle_reading("auxVolt", "Auxiliary Battery", DECIMAL, placeholder="Auxiliary Battery Voltage"),
                _vehicle_reading("starterPercent", "Starter Battery Percent", INTEGER),
                _vehicle_reading("starterVolt", "Starter Battery", DECIMAL, placeholder="Starter Battery Voltage"),
                _vehicle_reading("fuelPercent", "Fuel Percent", INTEGER),
                _vehicle_reading("fuelLitre", "Fuel Litre", INTEGER),
                _vehicle_reading(
                    "afesExpiry",
                    "AFES Expiry (Remember it is +5 years from the labelled AFES)",
                    r"^(0[1-9]|1[0-2])/20\d{2}$",
                    placeholder="AFES Expiry eg. 01/2025, 12/2030 etc.",
                ),
                TemplateField(
                    key="faults",
                    label="Faults",
                    type=FieldType.MULTILINE,
                    placeholder="One fault per line",
                    required=False,
                    show_if=VEHICLE_PRESENT,
                ),
            ],
            generate=generators.hull_bos,
        ),
        TemplateDefinition(
            key="nightStrength",
            name="Night Strength",
            fields=[
                _rank(),
                _name(),
                TemplateField(
                    key="psNightStrength",
                    label="PS Night Strength",
                    type=FieldType.MULTILINE,
                    placeholder="Paste the PS night strength text here...",
                ),
                TemplateField(key="blk210", label="Blk 210 Strength", placeholder="Blk 210 Strength", pattern=INTEGER),
            ],
            generate=generators.night_strength,
        ),
        TemplateDefinition(key="guardDuty", name="Guard Duty Template", custom_ui=True),
        TemplateDefinition(key="routineOrder", name="Routine Order Template", custom_ui=True),
    ]
    return {template.key: template for template in templates}


TEMPLATES: dict[str, TemplateDefinition] = build_registry()


def get_template(template_id: str) -> TemplateDefinition:
    template = TEMPLATES.get(template_id)
    if template is None:
        raise UnknownTemplate(template_id)
    return template
