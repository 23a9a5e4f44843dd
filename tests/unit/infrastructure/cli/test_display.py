import pytest
from unittest.mock import MagicMock

from rich.panel import Panel
from rich.table import Table

from tagcache.infrastructure.cli.display import ConsoleDisplay


@pytest.fixture
def mock_console():
    """Fixture to create a mock rich Console object."""
    return MagicMock()


@pytest.fixture
def console_display(mock_console: MagicMock):
    """Fixture to create a ConsoleDisplay instance with a mocked console."""
    display = ConsoleDisplay()
    display.console = mock_console # Inject the mock
    return display


def test_display_output_string(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_output("[raw] text")
    mock_console.print.assert_called_once_with("[raw] text", markup=False, highlight=False)


def test_display_output_renders_json(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_output({"a": [1, True, None]})
    mock_console.print.assert_called_once_with('{"a": [1, true, null]}', markup=False, highlight=False)


def test_display_mapping_prints_table(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_mapping("Tag: g", {"a": 1, "b": "two"})
    mock_console.print.assert_called_once()
    table = mock_console.print.call_args.args[0]
    assert isinstance(table, Table)
    assert table.title == "Tag: g"
    assert table.row_count == 2


@pytest.mark.parametrize("method, title", [
    ("display_error", "[bold red]Error[/bold red]"),
    ("display_warning", "[bold yellow]Warning[/bold yellow]"),
    ("display_info", "[bold blue]Info[/bold blue]"),
])
def test_messages_are_printed_in_panels(console_display: ConsoleDisplay, mock_console: MagicMock, method, title):
    getattr(console_display, method)("Something happened")
    mock_console.print.assert_called_once()
    panel = mock_console.print.call_args.args[0]
    assert isinstance(panel, Panel)
    assert panel.title == title
    assert panel.renderable.plain == "Something happened"
