"""
Funciones que imprimen directamente a la consola.
"""

from rich.panel import Panel
from rich.text import Text
from rich import box

from hidrocanal.cli.theme.palette import get_console, get_palette
from hidrocanal.cli.theme.styled import (
    styled_header, styled_label, styled_success, styled_warning,
    styled_error, styled_info,
)


def format_number(value: float, decimals: int = 3) -> str:
    """Formatea un número con precisión especificada."""
    if abs(value) >= 1000:
        return f"{value:,.{decimals}f}"
    return f"{value:.{decimals}f}"


def print_header(text: str, subtitle: str = None) -> None:
    """Imprime un encabezado."""
    console = get_console()
    console.print(styled_header(text, subtitle))


def print_field(label: str, value, unit: str = None, indent: int = 2) -> None:
    """Imprime un campo con valor."""
    console = get_console()
    prefix = " " * indent
    console.print(prefix, styled_label(label, value, unit))


def print_success(text: str) -> None:
    """Imprime mensaje de éxito."""
    get_console().print(styled_success(text))


def print_warning(text: str) -> None:
    """Imprime advertencia."""
    get_console().print(styled_warning(text))


def print_error(text: str) -> None:
    """Imprime error."""
    get_console().print(styled_error(text))


def print_info(text: str) -> None:
    """Imprime información."""
    get_console().print(styled_info(text))


def print_section(title: str) -> None:
    """Imprime título de sección."""
    console = get_console()
    p = get_palette()
    console.print()
    console.print(f"-- {title} --", style=f"bold {p.secondary}")


def print_summary_box(title: str, items: list[tuple[str, str, str]]) -> None:
    """Imprime un cuadro de resumen.

    Args:
        title: Título del cuadro
        items: Lista de tuplas (label, value, unit)
    """
    console = get_console()
    p = get_palette()

    lines = []
    for label, value, unit in items:
        line = Text()
        line.append(f"{label}: ", style=p.label)
        line.append(str(value), style=f"bold {p.number}")
        if unit:
            line.append(f" {unit}", style=p.unit)
        lines.append(line)

    panel = Panel(
        Text("\n").join(lines),
        title=title,
        title_align="left",
        border_style=p.border,
        box=box.ROUNDED,
        padding=(0, 1),
    )
    console.print(panel)
