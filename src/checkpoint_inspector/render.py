"""Presentation sinks for report tables."""

from typing import Optional, Protocol

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import ReportTable


class TableSink(Protocol):
    """Anything that can display a report table."""

    def render(self, table: ReportTable) -> None: ...


class RichTableSink:
    """Render report tables to a terminal with rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def to_rich_table(self, table: ReportTable) -> Table:
        # Text keeps paths like "/srv/[blue]/data" from being read as markup
        rich_table = Table(show_header=True, header_style="bold", show_lines=True)
        for column in table.header:
            rich_table.add_column(Text(column), overflow="fold")
        for row in table.rows:
            rich_table.add_row(*(Text(cell) for cell in row))
        return rich_table

    def render(self, table: ReportTable) -> None:
        if table.title:
            self.console.print()
            self.console.print(table.title, markup=False, highlight=False)
        self.console.print(self.to_rich_table(table))


class RecordingSink:
    """Keep rendered tables in memory, in render order."""

    def __init__(self) -> None:
        self.tables: list[ReportTable] = []

    def render(self, table: ReportTable) -> None:
        self.tables.append(table)
