"""
CLI de HidroCanal - Perfiles de flujo gradualmente variado.

Comandos:
- profile: Perfil de superficie libre por paso estándar
- depths: Tirante crítico, tirante normal y clase de pendiente
- jump: Resalto hidráulico para un tirante supercrítico
"""

import logging
from typing import Annotated

import typer

from hidrocanal.cli.depths import depths_command, jump_command
from hidrocanal.cli.profile import profile_command
from hidrocanal.cli.theme import ThemeName, set_theme

# Crear aplicación principal
app = typer.Typer(
    name="hidrocanal",
    help="Cálculo de perfiles de superficie libre en canales abiertos.",
    no_args_is_help=True,
)

app.command("profile")(profile_command)
app.command("depths")(depths_command)
app.command("jump")(jump_command)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Mostrar mensajes de depuración")] = False,
    theme: Annotated[ThemeName, typer.Option("--theme", help="Tema de colores")] = ThemeName.DEFAULT,
):
    """
    HidroCanal - Flujo gradualmente variado en canales.

    Método de paso estándar con secciones rectangular, trapezoidal,
    triangular y circular.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )
    set_theme(theme)
