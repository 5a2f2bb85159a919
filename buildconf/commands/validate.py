"""buildconf validate command - check entity documents for missing properties."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from buildconf.commands._utils import entity_label, get_config, load_or_exit
from buildconf.logging import get_logger
from buildconf.validation import ValidationReport

console = Console()
logger = get_logger("validate")


@click.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def validate(ctx: click.Context, document: Path, json_output: bool) -> None:
    """Validate entity documents.

    Reports every required property that was never provided, with its
    dotted path. Exits with status 1 when any entity is invalid.

    Examples:

        buildconf validate features.yaml

        buildconf validate features.yaml --json
    """
    config = get_config(ctx)
    entities = load_or_exit(document, config, console)
    reports = [ValidationReport.for_entity(entity) for entity in entities]
    invalid = [r for r in reports if not r.is_valid]
    logger.info("Validated %d entities from %s, %d invalid", len(reports), document, len(invalid))

    if json_output:
        payload = [
            {
                "type": r.entity_type,
                "id": r.entity_id,
                "valid": r.is_valid,
                "errors": [{"path": e.path, "message": e.message} for e in r.errors],
            }
            for r in reports
        ]
        click.echo(json.dumps(payload, indent=2))
    else:
        table = Table(title=f"Validation of {escape(document.name)}")
        table.add_column("Entity", style="cyan")
        table.add_column("Type")
        table.add_column("Status")
        table.add_column("Problems")
        for entity, report in zip(entities, reports, strict=True):
            status = "[green]valid[/green]" if report.is_valid else f"[red]{len(report.errors)} error(s)[/red]"
            problems = "\n".join(escape(str(e)) for e in report.errors)
            table.add_row(escape(entity_label(entity)), escape(report.entity_type), status, problems)
        console.print(table)

    if invalid:
        raise SystemExit(1)
