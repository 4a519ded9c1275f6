# src/quarry/ui.py

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.query.builder import QueryBuilder
from .core.query.schema import entity_name

console = Console()


def display_builder(builder: QueryBuilder) -> None:
    """Prints the fields a builder accepts and how each one is handled."""

    fields_table = Table(box=None, padding=(0, 1), show_header=False, show_edge=False)
    fields_table.add_column("Field", style="cyan", no_wrap=True, width=24)
    fields_table.add_column("Type", style="green", width=24)
    fields_table.add_column("Details", style="white")

    names = list(builder.columns)
    # Overrides may handle fields that are not columns.
    names += [name for name in builder.overrides if name not in builder.columns]

    for name in names:
        column = builder.columns.get(name)
        col_type = str(column.type) if column is not None else "-"

        details = []
        if name in builder.overrides:
            details.append("[bold blue]override[/bold blue]")
        if builder.whitelist is not None and name not in builder.whitelist:
            details.append("[dim]not whitelisted[/dim]")

        fields_table.add_row(name, col_type, " ".join(details))

    whitelist = ", ".join(builder.whitelist) if builder.whitelist is not None else "all fields"
    console.print(
        Panel(
            fields_table,
            title=f"[bold magenta]{builder.name}[/bold magenta] [dim]({entity_name(builder.model)})[/dim]",
            subtitle=f"[dim]whitelist: {whitelist}[/dim]",
            border_style="blue",
        )
    )
