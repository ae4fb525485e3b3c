"""
Sistema de temas para la interfaz CLI de HidroCanal.

El paquete esta organizado en modulos:
- palette: Definicion de paletas y gestion de temas (CLITheme, ColorPalette)
- styled: Funciones que retornan objetos Text estilizados
- printing: Funciones que imprimen directamente a consola
- tables: Funciones para crear e imprimir tablas Rich
"""

from hidrocanal.cli.theme.palette import (
    ThemeName,
    ColorPalette,
    THEME_DEFAULT,
    THEME_MINIMAL,
    THEMES,
    CLITheme,
    set_theme,
    get_console,
    get_palette,
)

from hidrocanal.cli.theme.styled import (
    styled_header,
    styled_label,
    styled_success,
    styled_warning,
    styled_error,
    styled_info,
)

from hidrocanal.cli.theme.printing import (
    format_number,
    print_header,
    print_field,
    print_success,
    print_warning,
    print_error,
    print_info,
    print_section,
    print_summary_box,
)

from hidrocanal.cli.theme.tables import (
    REGIME_LABELS,
    create_results_table,
    create_profile_table,
    print_profile_table,
)

__all__ = [
    # Palette
    "ThemeName",
    "ColorPalette",
    "THEME_DEFAULT",
    "THEME_MINIMAL",
    "THEMES",
    "CLITheme",
    "set_theme",
    "get_console",
    "get_palette",
    # Styled
    "styled_header",
    "styled_label",
    "styled_success",
    "styled_warning",
    "styled_error",
    "styled_info",
    # Printing
    "format_number",
    "print_header",
    "print_field",
    "print_success",
    "print_warning",
    "print_error",
    "print_info",
    "print_section",
    "print_summary_box",
    # Tables
    "REGIME_LABELS",
    "create_results_table",
    "create_profile_table",
    "print_profile_table",
]
