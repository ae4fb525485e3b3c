"""
Comandos CLI para tirantes de referencia y resalto hidráulico.
"""

import warnings
from typing import Annotated

import typer

from hidrocanal.cli.common import (
    DiameterOption,
    DischargeOption,
    LengthOption,
    ManningOption,
    ShapeOption,
    SideSlopeOption,
    SlopeOption,
    UnitsOption,
    WidthOption,
    build_channel,
)
from hidrocanal.cli.profile import SLOPE_LABELS, print_jump
from hidrocanal.cli.theme import (
    REGIME_LABELS,
    format_number,
    print_field,
    print_error,
    print_header,
    print_info,
    print_section,
    print_warning,
)
from hidrocanal.cli.validators import length_unit, validate_depth
from hidrocanal.config import NormalDepthMethod, UnitSystem
from hidrocanal.core.critical import critical_energy, critical_velocity
from hidrocanal.core.flow import flow_regime, froude_number
from hidrocanal.core.geometry import max_depth
from hidrocanal.core.jump import hydraulic_jump
from hidrocanal.core.normal import classify_slope, normal_froude_number, normal_velocity
from hidrocanal.engine import compute_critical_depth, compute_normal_depth
from hidrocanal.exceptions import ConvergenceWarning


def depths_command(
    shape: ShapeOption,
    discharge: DischargeOption,
    manning_n: ManningOption,
    slope: SlopeOption,
    width: WidthOption = None,
    side_slope: SideSlopeOption = None,
    diameter: DiameterOption = None,
    units: UnitsOption = UnitSystem.METRIC,
    length: LengthOption = 100.0,
    method: Annotated[
        NormalDepthMethod, typer.Option("--method", help="Método para el tirante normal")
    ] = NormalDepthMethod.BISECTION,
):
    """
    Calcula tirante crítico, tirante normal y clase de pendiente.

    Ejemplo:
        hc depths -s rectangular -b 5 -q 10 -n 0.013 --slope 0.001
        hc depths -s circular -d 1.2 -q 0.8 -n 0.013 --slope 0.002 --method secant
    """
    channel = build_channel(
        shape, discharge, manning_n, slope, length, width, side_slope, diameter, units,
    )

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ConvergenceWarning)
        yc = compute_critical_depth(channel)
        yn = compute_normal_depth(channel, method)

    unit = length_unit(channel)
    print_header("TIRANTES DE REFERENCIA", f"Sección {channel.shape} | Q = {channel.discharge}")
    for warning in caught:
        print_warning(str(warning.message))

    print_section("FLUJO CRÍTICO")
    print_field("Tirante crítico yc", format_number(yc, 4), unit)
    print_field("Velocidad crítica Vc", format_number(critical_velocity(channel, yc), 3), f"{unit}/s")
    print_field("Energía crítica Ec", format_number(critical_energy(channel, yc), 4), unit)

    fr_n = normal_froude_number(channel, yn)
    print_section("FLUJO UNIFORME")
    print_field("Tirante normal yn", format_number(yn, 4), unit)
    print_field("Velocidad normal Vn", format_number(normal_velocity(channel, yn), 3), f"{unit}/s")
    print_field("Froude", format_number(fr_n, 3))
    print_field("Régimen", REGIME_LABELS[flow_regime(fr_n).value])
    print_field("Método", method.value)

    print_section("PENDIENTE")
    print_field("Clase", SLOPE_LABELS[classify_slope(yn, yc).value])


def jump_command(
    upstream_depth: Annotated[float, typer.Argument(help="Tirante aguas arriba del resalto")],
    shape: ShapeOption,
    discharge: DischargeOption,
    width: WidthOption = None,
    side_slope: SideSlopeOption = None,
    diameter: DiameterOption = None,
    units: UnitsOption = UnitSystem.METRIC,
    station: Annotated[float, typer.Option("--station", help="Progresiva del resalto")] = 0.0,
):
    """
    Calcula el resalto hidráulico para un tirante supercrítico.

    Ejemplo:
        hc jump 0.3 -s rectangular -b 5 -q 10
        hc jump 0.25 -s trapezoidal -b 2 -z 1 -q 6
    """
    validate_depth(upstream_depth, "Tirante aguas arriba")
    # Rugosidad, pendiente y longitud no intervienen en el resalto
    channel = build_channel(
        shape, discharge, 0.013, 0.001, 1.0, width, side_slope, diameter, units,
    )

    unit = length_unit(channel)
    if upstream_depth >= max_depth(channel):
        print_error(f"Tirante aguas arriba debe ser menor que el diámetro ({channel.diameter})")
        raise typer.Exit(1)

    yc = compute_critical_depth(channel)
    jump = hydraulic_jump(upstream_depth, station, channel, yc)

    print_header("RESALTO HIDRÁULICO", f"Sección {channel.shape} | Q = {channel.discharge}")
    print_field("Tirante crítico yc", format_number(yc, 4), unit)

    if not jump.occurs:
        fr = froude_number(upstream_depth, channel)
        print_info(
            f"Sin resalto: el flujo aguas arriba no es supercrítico (Fr = {fr:.3f})"
        )
        return

    print_jump(jump, unit)
