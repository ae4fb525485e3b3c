"""
Definicion de paletas de colores y gestion de temas.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum

from rich.console import Console
from rich.theme import Theme


class ThemeName(str, Enum):
    """Temas disponibles."""
    DEFAULT = "default"
    MINIMAL = "minimal"


@dataclass
class ColorPalette:
    """Paleta de colores para un tema."""
    # Colores principales
    primary: str      # Títulos
    secondary: str    # Subtítulos y encabezados de sección
    accent: str       # Valores destacados

    # Colores semánticos
    success: str
    warning: str      # Advertencias (estrangulamiento, no convergencia)
    error: str
    info: str
    muted: str

    # Colores para datos
    number: str
    unit: str
    label: str

    # Bordes y tablas
    border: str
    table_header: str
    table_highlight: str  # Filas del resalto hidráulico


# Tema por defecto - colores pasteles
THEME_DEFAULT = ColorPalette(
    primary="#5f87af",
    secondary="#87afaf",
    accent="#af87af",
    success="#87af87",
    warning="#d7af5f",
    error="#d75f5f",
    info="#5f87af",
    muted="#808080",
    number="#d7af5f",
    unit="#87af87",
    label="#afafaf",
    border="#5f5f5f",
    table_header="#5f87af",
    table_highlight="#d7af5f",
)

# Tema Minimal - grises y un acento
THEME_MINIMAL = ColorPalette(
    primary="#ffffff",
    secondary="#b0b0b0",
    accent="#5fafff",
    success="#87d787",
    warning="#ffd787",
    error="#ff8787",
    info="#5fafff",
    muted="#606060",
    number="#ffffff",
    unit="#909090",
    label="#909090",
    border="#404040",
    table_header="#5fafff",
    table_highlight="#5fafff",
)

THEMES = {
    ThemeName.DEFAULT: THEME_DEFAULT,
    ThemeName.MINIMAL: THEME_MINIMAL,
}


class CLITheme:
    """Gestor de tema para la CLI."""

    _palette: ColorPalette = THEME_DEFAULT
    _console: Optional[Console] = None

    @classmethod
    def set_theme(cls, theme: ThemeName) -> None:
        """Establece el tema activo."""
        cls._palette = THEMES.get(ThemeName(theme), THEME_DEFAULT)
        cls._console = None

    @classmethod
    def get_palette(cls) -> ColorPalette:
        return cls._palette

    @classmethod
    def get_console(cls) -> Console:
        """Obtiene la consola Rich con el tema aplicado."""
        if cls._console is None:
            p = cls._palette
            custom_theme = Theme({
                "primary": p.primary,
                "secondary": p.secondary,
                "accent": p.accent,
                "success": p.success,
                "warning": p.warning,
                "error": p.error,
                "info": p.info,
                "muted": p.muted,
                "number": p.number,
                "unit": p.unit,
                "label": p.label,
                "title": f"bold {p.primary}",
                "value": f"bold {p.number}",
                "table.header": f"bold {p.table_header}",
                "table.highlight": f"bold {p.table_highlight}",
            })
            cls._console = Console(theme=custom_theme)
        return cls._console


def set_theme(theme: ThemeName) -> None:
    """Cambia el tema activo."""
    CLITheme.set_theme(theme)


def get_console() -> Console:
    """Obtiene la consola Rich con tema aplicado."""
    return CLITheme.get_console()


def get_palette() -> ColorPalette:
    """Obtiene la paleta de colores actual."""
    return CLITheme.get_palette()
