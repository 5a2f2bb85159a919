"""buildconf types command - list registered entity types."""

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from buildconf.registry import default_registry

console = Console()


@click.command("types")
@click.option("--kind", type=click.Choice(["buildStep", "buildFeature", "projectFeature"]), help="Filter by kind")
def types_cmd(kind: str | None) -> None:
    """List registered entity types.

    Examples:

        buildconf types

        buildconf types --kind buildStep
    """
    table = Table(title="Entity types")
    table.add_column("Kind", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Class")
    table.add_column("Required")

    for entity_cls in default_registry().entity_classes():
        if kind and entity_cls.kind.value != kind:
            continue
        fixed = ", ".join(f"{k}={v}" for k, v in entity_cls.fixed_params().items())
        type_label = f"{entity_cls.type} ({fixed})" if fixed else entity_cls.type
        required = ", ".join(req.segment for req in entity_cls.requirements())
        table.add_row(entity_cls.kind.value, escape(type_label), entity_cls.__name__, required or "-")

    console.print(table)
