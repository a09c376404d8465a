"""Typer CLI entrypoint for candidate assessment."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .logging import configure_logging
from .pipeline import AuditLogger
from .rules_store import write_starter_rules
from .schemas.config import load_config

app = typer.Typer(help="Recruiting eligibility and body composition CLI.")


def _load_settings(config: Path | None) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle)
    try:
        return load_config(loaded).to_settings()
    except (ValueError, ValidationError) as exc:
        raise typer.BadParameter(f"Invalid config file: {exc}", param_name="config") from exc


@app.command()
def assess(
    candidates: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidates JSONL path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    rules: Optional[Path] = typer.Option(None, dir_okay=False, help="Eligibility rules JSON path."),
    as_of: Optional[str] = typer.Option(None, help="Reference date (ISO) for activity aging."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    log_format: str = typer.Option("json", help="Log rendering: json or console."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Assess every candidate in a JSONL file."""
    settings = _load_settings(config)
    if rules is not None:
        settings.setdefault("eligibility", {})["rules_path"] = rules

    configure_logging(log_level, "console" if log_format == "console" else "json")

    container = create_container(settings=settings)
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    results = pipeline.run(
        candidates_path=candidates,
        output_path=output,
        as_of=as_of,
        audit_logger=audit_logger,
    )
    typer.echo(f"Assessed {len(results)} candidates. Results saved to {output}.")


@app.command("starter-rules")
def starter_rules(
    output: Path = typer.Argument(..., dir_okay=False, help="Destination for the starter rules JSON."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Write the starter eligibility rules so operators can edit them."""
    configure_logging(log_level)
    write_starter_rules(output)
    typer.echo(f"Starter rules written to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
