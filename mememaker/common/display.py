from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

CREAM = "#FFF8DC"
CHARCOAL = "#36454F"


_impact_theme = Theme(
    {
        "primary": CREAM,
        "accent": CHARCOAL,
        "success": "green bold",
        "error": "red bold",
        "warning": "yellow bold",
        "info": "blue bold",
    }
)


_console: Console | None = None


def get_theme() -> Theme:
    return _impact_theme


def get_console(force_terminal: bool | None = None) -> Console:
    global _console

    if _console is None or force_terminal is not None:
        _console = Console(
            theme=_impact_theme,
            force_terminal=force_terminal,
            legacy_windows=False,
        )

    return _console


def create_render_table(path: Path, width: int, height: int, size_bytes: int) -> Table:
    table = Table(show_header=False, border_style=CHARCOAL, padding=(0, 1))

    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("File", str(path))
    table.add_row("Size", f"{width}x{height} px")
    table.add_row("Bytes", f"{size_bytes:,}")

    return table
