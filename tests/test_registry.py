import pytest
from pydantic import ValidationError

from fmw2.templates import TEMPLATES, FieldType, ShowIf, TemplateDefinition, TemplateField, get_template
from fmw2.exceptions import UnknownTemplate


def _noop(values, today):
    return ""


def test_registry_ids_and_names():
    assert {key: t.name for key, t in TEMPLATES.items()} == {
        "offAwarded": "Off Awarded",
        "offTemplate": "Leave/Off Application Template",
        "reportSick": "RSI/RSO/MA Reporting Template",
        "hullBOS": "HULL BOS Template",
        "nightStrength": "Night Strength",
        "guardDuty": "Guard Duty Template",
        "routineOrder": "Routine Order Template",
    }
    assert [k for k, t in TEMPLATES.items() if t.custom_ui] == ["guardDuty", "routineOrder"]


def test_defaults():
    assert get_template("hullBOS").defaults() == {
        "vehiclePresent": "true",
        "vehicleLocation": "MSVS Level ",
    }
    assert get_template("offTemplate").defaults() == {"recommendedBy": "ME3 Alex"}


def test_unknown_template():
    with pytest.raises(UnknownTemplate):
        get_template("payslip")


def test_select_requires_options():
    with pytest.raises(ValidationError):
        TemplateField(key="rank", label="Rank", type=FieldType.SELECT)


def test_pattern_must_compile():
    with pytest.raises(ValidationError):
        TemplateField(key="mid", label="MID", pattern="([0-9")


def test_duplicate_keys_rejected():
    with pytest.raises(ValidationError):
        TemplateDefinition(
            key="t",
            name="T",
            fields=[TemplateField(key="a", label="A"), TemplateField(key="a", label="A again")],
            generate=_noop,
        )


@pytest.mark.parametrize("target", ["missing", "a"])
def test_show_if_must_name_another_field(target):
    with pytest.raises(ValidationError):
        TemplateDefinition(
            key="t",
            name="T",
            fields=[TemplateField(key="a", label="A", show_if=ShowIf(key=target, equals="x"))],
            generate=_noop,
        )


def test_show_if_cycles_rejected():
    with pytest.raises(ValidationError):
        TemplateDefinition(
            key="t",
            name="T",
            fields=[
                TemplateField(key="a", label="A", show_if=ShowIf(key="b", equals="x")),
                TemplateField(key="b", label="B", show_if=ShowIf(key="a", equals="y")),
            ],
            generate=_noop,
        )


def test_flat_form_needs_generator():
    with pytest.raises(ValidationError):
        TemplateDefinition(key="t", name="T", fields=[TemplateField(key="a", label="A")])
