"""
Validadores centralizados para entradas CLI.

Arman el canal a partir de las opciones de línea de comandos y muestran
los errores de validación con mensajes consistentes.
"""

from typing import Optional

import typer

from hidrocanal.cli.theme import print_error, print_warning
from hidrocanal.config import ChannelShape
from hidrocanal.engine import as_channel
from hidrocanal.exceptions import InvalidParameterError


# Campos geométricos que usa cada forma de sección
SHAPE_FIELDS = {
    ChannelShape.RECTANGULAR: ("bottom_width",),
    ChannelShape.TRAPEZOIDAL: ("bottom_width", "side_slope"),
    ChannelShape.TRIANGULAR: ("side_slope",),
    ChannelShape.CIRCULAR: ("diameter",),
}

GEOMETRY_OPTIONS = {
    "bottom_width": "--width",
    "side_slope": "--side-slope",
    "diameter": "--diameter",
}


def channel_data(
    shape: ChannelShape,
    geometry: dict[str, Optional[float]],
    **flow,
) -> dict:
    """
    Arma el diccionario de parámetros del canal.

    Solo se incluyen los campos geométricos de la forma elegida; los
    demás se ignoran con una advertencia. Los valores None se omiten.

    Args:
        shape: Forma de la sección
        geometry: Valores de bottom_width, side_slope y diameter
        **flow: Caudal, rugosidad, pendiente, longitud, unidades y tirantes

    Returns:
        Diccionario listo para validar
    """
    shape = ChannelShape(shape)
    fields = SHAPE_FIELDS[shape]
    data = {"shape": shape.value}

    for name, value in geometry.items():
        if value is None:
            continue
        if name in fields:
            data[name] = value
        else:
            print_warning(f"{GEOMETRY_OPTIONS[name]} no aplica a sección {shape.value}; se ignora")

    for name, value in flow.items():
        if value is not None:
            data[name] = value.value if hasattr(value, "value") else value
    return data


def validate_channel(data: dict, exit_on_error: bool = True):
    """
    Valida los parámetros del canal.

    Args:
        data: Diccionario de parámetros
        exit_on_error: Si True, termina el programa con error

    Returns:
        Modelo de canal, o None si no es válido y exit_on_error es False
    """
    try:
        return as_channel(data)
    except InvalidParameterError as exc:
        for message in exc.errors or (str(exc),):
            print_error(message)
        if exit_on_error:
            raise typer.Exit(1)
        return None


def validate_depth(value: float, name: str = "Tirante", exit_on_error: bool = True) -> bool:
    """
    Valida que un tirante sea positivo.

    Args:
        value: Tirante a validar
        name: Nombre para el mensaje
        exit_on_error: Si True, termina el programa con error

    Returns:
        True si es válido, False si no
    """
    if value <= 0:
        print_error(f"{name} debe ser positivo (recibido: {value})")
        if exit_on_error:
            raise typer.Exit(1)
        return False
    return True


def length_unit(channel) -> str:
    """Unidad de longitud del canal."""
    return "ft" if channel.units.value == "imperial" else "m"
