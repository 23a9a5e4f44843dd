import json
import logging
from typing import Any, Mapping

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tagcache.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self):
        """Initializes the rich Console."""
        self._console = Console()

    @property
    def console(self):
        """Get the Rich console instance for direct operations."""
        return self._console

    @console.setter
    def console(self, console):
        self._console = console

    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Prints a value; non-string values are shown as JSON."""
        # markup=False: cached strings may contain square brackets
        self.console.print(_render(output), markup=False, highlight=False)

    def display_mapping(self, title: str, data: Mapping[str, Any]) -> None:
        """Prints key/value pairs as a table."""
        table = Table(title=title, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Key", style="bold cyan")
        table.add_column("Value", style="white")
        for key, value in data.items():
            table.add_row(key, _render(value))
        logger.debug(f"Displaying {len(data)} rows for '{title}'")
        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)
