"""
Opciones comunes de los comandos CLI.

Los comandos que describen un canal comparten las mismas opciones de
geometría y flujo; se definen una vez como tipos Annotated.
"""

from typing import Annotated, Optional

import typer

from hidrocanal.cli.validators import channel_data, validate_channel
from hidrocanal.config import ChannelShape, UnitSystem

ShapeOption = Annotated[ChannelShape, typer.Option("--shape", "-s", help="Forma de la sección")]
DischargeOption = Annotated[float, typer.Option("--discharge", "-q", help="Caudal (m³/s o ft³/s)")]
ManningOption = Annotated[float, typer.Option("--manning", "-n", help="Coeficiente de Manning")]
SlopeOption = Annotated[float, typer.Option("--slope", help="Pendiente longitudinal (m/m)")]
LengthOption = Annotated[float, typer.Option("--length", "-l", help="Longitud del tramo")]
WidthOption = Annotated[Optional[float], typer.Option("--width", "-b", help="Ancho de fondo")]
SideSlopeOption = Annotated[Optional[float], typer.Option("--side-slope", "-z", help="Talud z:1")]
DiameterOption = Annotated[Optional[float], typer.Option("--diameter", "-d", help="Diámetro")]
UnitsOption = Annotated[UnitSystem, typer.Option("--units", "-u", help="Sistema de unidades")]
UpstreamOption = Annotated[
    Optional[float], typer.Option("--upstream-depth", help="Tirante impuesto aguas arriba")
]
DownstreamOption = Annotated[
    Optional[float], typer.Option("--downstream-depth", help="Tirante impuesto aguas abajo")
]


def build_channel(
    shape: ChannelShape,
    discharge: float,
    manning_n: float,
    slope: float,
    length: float,
    width: Optional[float] = None,
    side_slope: Optional[float] = None,
    diameter: Optional[float] = None,
    units: UnitSystem = UnitSystem.METRIC,
    upstream_depth: Optional[float] = None,
    downstream_depth: Optional[float] = None,
):
    """Construye y valida el canal a partir de las opciones (termina con código 1 si falla)."""
    data = channel_data(
        shape,
        {"bottom_width": width, "side_slope": side_slope, "diameter": diameter},
        discharge=discharge,
        manning_n=manning_n,
        slope=slope,
        length=length,
        units=units,
        upstream_depth=upstream_depth,
        downstream_depth=downstream_depth,
    )
    return validate_channel(data)
