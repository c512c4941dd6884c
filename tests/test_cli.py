from typer.testing import CliRunner

from fmw2.main import cli

runner = CliRunner()


def test_templates_lists_registry():
    result = runner.invoke(cli, ["templates"])
    assert result.exit_code == 0
    assert "offTemplate\tLeave/Off Application Template" in result.output
    assert "guardDuty\tGuard Duty Template (custom)" in result.output


def test_generate_from_fields():
    result = runner.invoke(
        cli,
        [
            "generate",
            "nightStrength",
            "--today",
            "2025-06-03",
            "-f",
            "rank=CPL",
            "-f",
            "name=tan",
            "-f",
            "psNightStrength=STAYIN: 40\\nSTAYOUT: 5\\nOS: 2",
            "-f",
            "blk210=30",
        ],
    )
    assert result.exit_code == 0
    assert "11FMD NIGHT STRENGTH 03/06/2025 BY CPL TAN" in result.output
    assert "STAYOUT: 7\nOS: 0" in result.output


def test_generate_reports_validation_errors():
    result = runner.invoke(cli, ["generate", "offTemplate", "-f", "rank=CPL"])
    assert result.exit_code == 1


def test_prune_guard_duty_file(tmp_path):
    path = tmp_path / "guard.txt"
    path.write_text("GUARD DUTY JUNE 2025\n1/6 (SUNDAY)\nG: Tan\n==========\n3/6 (TUESDAY)\nG: Lim", encoding="utf-8")
    result = runner.invoke(cli, ["prune-guard-duty", str(path), "--today", "2025-06-02"])
    assert result.exit_code == 0
    assert result.output == "GUARD DUTY JUNE 2025\n\n3/6 (TUESDAY)\nG: Lim\n"


def test_bad_today_is_a_usage_error(tmp_path):
    result = runner.invoke(cli, ["generate", "offTemplate", "--today", "03/06/2025"])
    assert result.exit_code == 2

    path = tmp_path / "guard.txt"
    path.write_text("1/6\nG: Tan", encoding="utf-8")
    result = runner.invoke(cli, ["prune-guard-duty", str(path), "--today", "soon"])
    assert result.exit_code == 2


def test_malformed_field_pair_is_a_usage_error():
    result = runner.invoke(cli, ["generate", "offTemplate", "-f", "rank"])
    assert result.exit_code == 2
