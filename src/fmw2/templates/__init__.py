from fmw2.templates.models import (
    FieldType,
    GuardDutyEntry,
    ICType,
    RecoveryDuty,
    RegimentalEntry,
    RoutineOrderState,
    ShowIf,
    TemplateDefinition,
    TemplateField,
    VehicleRecoveryDuty,
)
from fmw2.templates.guard_duty import GuardDutyRoster, build_guard_duty_list, prune_guard_duty_list
from fmw2.templates.night_strength import adjust_night_strength
from fmw2.templates.registry import TEMPLATES, get_template
from fmw2.templates.routine_order import build_routine_order, compose_routine_order, resize_regimental_entries
from fmw2.templates.service import GenerationResult, TemplateService

__all__ = [
    "FieldType",
    "GenerationResult",
    "GuardDutyEntry",
    "GuardDutyRoster",
    "ICType",
    "RecoveryDuty",
    "RegimentalEntry",
    "RoutineOrderState",
    "ShowIf",
    "TEMPLATES",
    "TemplateDefinition",
    "TemplateField",
    "TemplateService",
    "VehicleRecoveryDuty",
    "adjust_night_strength",
    "build_guard_duty_list",
    "build_routine_order",
    "compose_routine_order",
    "get_template",
    "prune_guard_duty_list",
    "resize_regimental_entries",
]
