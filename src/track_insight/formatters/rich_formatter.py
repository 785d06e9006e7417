"""Rich terminal formatter for Track Insight."""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..queries import QUERIES
from .base import BaseFormatter, is_undefined, tabulate

console = Console()


def _display(value: Any) -> str:
    if is_undefined(value):
        return "[dim]undefined[/dim]"
    if value is None:
        return "[dim]-[/dim]"
    if isinstance(value, float):
        if value.is_integer() and abs(value) >= 1000:
            return f"{int(value):,}"
        return f"{value:,.4f}"
    if isinstance(value, int):
        return f"{value:,}"
    return escape(str(value))


class RichFormatter(BaseFormatter):
    """Rich table per query, numbers right-aligned."""

    def render(self, name: str, result: Any) -> None:
        console.print(self.build_table(name, result))

    def format(self, name: str, result: Any) -> str:
        # Rich output goes directly to console; return empty string
        self.render(name, result)
        return ""

    def build_table(self, name: str, result: Any) -> Table:
        columns, rows = tabulate(name, result)
        spec = QUERIES.get(name)
        title = f"[bold cyan]{name}[/bold cyan]"
        if spec is not None:
            title += f" [dim]{spec.description}[/dim]"

        table = Table(title=title, show_header=True, title_justify="left")
        for i, col in enumerate(columns):
            values = [r[i] for r in rows if i < len(r)]
            numeric = bool(values) and all(isinstance(v, (int, float)) for v in values)
            table.add_column(col, justify="right" if numeric else "left")

        for row in rows:
            table.add_row(*(_display(v) for v in row))

        if not rows:
            table.caption = "[yellow]no rows[/yellow]"
        return table
