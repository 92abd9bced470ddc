"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

if TYPE_CHECKING:
    from pkgbridge.models.package import Package

THEME = Theme(
    {
        "text": "#ffffff",
        "muted": "#b2bec3",
        "header": "#69B9A1",
        "bold_header": "bold #69B9A1",
        "border": "#29526d",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "bold #f53263",
        "info": "#0ec1c8",
        "package_installed": "bold #69B9A1",
        "package_available": "#226666",
    }
)


def _detect_color_system() -> str | None:
    """Return "truecolor" for interactive terminals, None to let Rich decide."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


console = Console(theme=THEME, color_system=_detect_color_system())
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def create_package_table(title: str = "Packages") -> Table:
    """Create a pre-configured table for displaying packages.

    Args:
        title: Table title.

    Returns:
        Rich Table with status, name, version and description columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Version", style="muted")
    table.add_column("Description", style="text", overflow="ellipsis")
    return table


def format_package_row(pkg: Package) -> tuple[str, str, str, str]:
    """Format a package as a table row.

    Installed packages get a filled circle, the rest an empty one.
    Package text is escaped so brackets in descriptions are not read as markup.

    Returns:
        Tuple of (icon, name, version, description) with Rich markup.
    """
    if pkg.installed:
        icon = "[package_installed]●[/]"
        name = f"[package_installed]{escape(pkg.name)}[/]"
    else:
        icon = "[package_available]○[/]"
        name = f"[package_available]{escape(pkg.name)}[/]"

    version = escape(pkg.version) or "-"
    desc = escape(pkg.description) or "-"
    return (icon, name, version, desc)


def print_text(text: str) -> None:
    """Print raw command output without markup interpretation."""
    console.print(text, markup=False, highlight=False, end="" if text.endswith("\n") else "\n")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
