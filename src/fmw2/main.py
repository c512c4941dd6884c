from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from fmw2.config import settings
from fmw2.exceptions import FMW2Error
from fmw2.templates import TEMPLATES, TemplateService

cli = typer.Typer(help="FMW2 report template generator")


def _parse_fields(pairs: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"expected key=value, got '{pair}'")
        values[key.strip()] = value.replace("\\n", "\n")
    return values


def _parse_today(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"expected YYYY-MM-DD, got '{value}'", param_hint="--today")


@cli.command()
def version() -> None:
    """Print runtime version."""
    typer.echo(f"{settings.app.name} {settings.app.version}")


@cli.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind"),
    port: int = typer.Option(8000, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload for local development"),
) -> None:
    """Run the API server."""
    uvicorn.run(
        "fmw2.api.main:app",
        host=host,
        port=port,
        reload=reload,
        app_dir="src",
    )


@cli.command()
def templates() -> None:
    """List the available templates."""
    for key, template in TEMPLATES.items():
        suffix = " (custom)" if template.custom_ui else ""
        typer.echo(f"{key}\t{template.name}{suffix}")


@cli.command()
def generate(
    template_id: str = typer.Argument(..., help="Template id, e.g. offTemplate"),
    field: list[str] = typer.Option([], "--field", "-f", help="key=value; repeatable"),
    defaults: bool = typer.Option(True, help="Pre-fill declared field defaults"),
    today: Optional[str] = typer.Option(None, help="Reference date (YYYY-MM-DD)"),
) -> None:
    """Render a flat-form template from key=value pairs."""
    svc = TemplateService()
    day = _parse_today(today)
    pairs = _parse_fields(field)
    try:
        template = svc.get(template_id)
        values = template.defaults() if defaults else {}
        values.update(pairs)
        result = svc.render(template_id, values, today=day)
    except FMW2Error as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(result.text)


@cli.command("prune-guard-duty")
def prune_guard_duty(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File holding a guard duty list"),
    today: Optional[str] = typer.Option(None, help="Reference date (YYYY-MM-DD)"),
) -> None:
    """Drop guard duty dates before today from a saved list."""
    svc = TemplateService()
    text = path.read_text(encoding="utf-8")
    typer.echo(svc.prune_guard_duty(text, today=_parse_today(today)))


if __name__ == "__main__":
    cli()
