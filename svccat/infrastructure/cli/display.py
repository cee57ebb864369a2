import logging
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.box import ROUNDED

from svccat.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None, error_console: Optional[Console] = None):
        """Initializes the rich consoles (results on stdout, diagnostics on stderr)."""
        self._console = console or Console()
        self._error_console = error_console or Console(stderr=True)

    def display_output(self, output: str, **kwargs: Any) -> None:
        style = kwargs.get("style")
        self._console.print(str(output), style=style, highlight=False)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        self._error_console.print(f"[bold red]Error:[/bold red] {error_message}", highlight=False)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        self._error_console.print(f"[bold yellow]Warning:[/bold yellow] {warning_message}", highlight=False)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self._error_console.print(f"[cyan]{info_message}[/cyan]", highlight=False)

    def display_table(
        self,
        rows: List[Dict[str, Any]],
        columns: Sequence[str],
        title: Optional[str] = None,
    ) -> None:
        """Renders records as a rich table; missing keys show as blank cells."""
        table = Table(title=title, box=ROUNDED, show_lines=False)
        for column in columns:
            table.add_column(column, overflow="fold")
        for row in rows:
            table.add_row(*("" if row.get(column) is None else str(row.get(column)) for column in columns))
        logger.debug(f"Rendering table '{title}' with {len(rows)} row(s)")
        self._console.print(table)

    def display_json(self, data: Any) -> None:
        # default=str covers the datetimes boto3 puts in responses
        self._console.print_json(data=data, default=str)
