"""
Comando CLI para el cálculo del perfil de superficie libre.
"""

import warnings
from typing import Annotated

import typer
from rich.progress import BarColumn, Progress, TextColumn

from hidrocanal.cli.common import (
    DiameterOption,
    DischargeOption,
    DownstreamOption,
    LengthOption,
    ManningOption,
    ShapeOption,
    SideSlopeOption,
    SlopeOption,
    UnitsOption,
    UpstreamOption,
    WidthOption,
    build_channel,
)
from hidrocanal.cli.theme import (
    format_number,
    get_console,
    print_error,
    print_field,
    print_header,
    print_info,
    print_profile_table,
    print_section,
    print_success,
    print_summary_box,
    print_warning,
)
from hidrocanal.cli.validators import length_unit
from hidrocanal.config import ProfileOptions, UnitSystem
from hidrocanal.core.analysis import flow_transitions, profile_description, profile_statistics
from hidrocanal.core.profile import optimal_step_count
from hidrocanal.engine import compute_profile
from hidrocanal.exceptions import ConvergenceWarning

SLOPE_LABELS = {
    "mild": "Suave",
    "critical": "Crítica",
    "steep": "Fuerte",
}

JUMP_LABELS = {
    "undular": "Ondular",
    "weak": "Débil",
    "oscillating": "Oscilante",
    "steady": "Estable",
    "strong": "Fuerte",
}


def _run_with_progress(channel, options: ProfileOptions, show: bool):
    """Ejecuta el cálculo mostrando una barra de avance."""
    if not show:
        return compute_profile(channel, options)

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=get_console(),
        transient=True,
    ) as progress:
        task = progress.add_task("Calculando perfil...", total=100)
        return compute_profile(
            channel,
            options,
            progress=lambda value: progress.update(task, completed=value),
        )


def print_jump(jump, unit: str) -> None:
    """Imprime las características del resalto hidráulico."""
    print_section("RESALTO HIDRÁULICO")
    print_field("Progresiva", format_number(jump.station, 2), unit)
    print_field("Tirante inicial y1", format_number(jump.upstream_depth, 4), unit)
    print_field("Tirante conjugado y2", format_number(jump.downstream_depth, 4), unit)
    print_field("Froude Fr1", format_number(jump.froude_number_1, 3))
    print_field("Tipo", JUMP_LABELS[jump.jump_type.value])
    print_field("Pérdida de energía", format_number(jump.energy_loss, 4), unit)
    print_field("Longitud aproximada", format_number(jump.length, 2), unit)
    print_field("Eficiencia", f"{jump.efficiency * 100:.1f}", "%")


def profile_command(
    shape: ShapeOption,
    discharge: DischargeOption,
    manning_n: ManningOption,
    slope: SlopeOption,
    length: LengthOption,
    width: WidthOption = None,
    side_slope: SideSlopeOption = None,
    diameter: DiameterOption = None,
    units: UnitsOption = UnitSystem.METRIC,
    upstream_depth: UpstreamOption = None,
    downstream_depth: DownstreamOption = None,
    steps: Annotated[int, typer.Option("--steps", help="Número de pasos")] = 100,
    auto_steps: Annotated[bool, typer.Option("--auto-steps", help="Pasos según la longitud")] = False,
    bidirectional: Annotated[bool, typer.Option("--bidirectional", help="Cálculo en ambos sentidos")] = False,
    no_jumps: Annotated[bool, typer.Option("--no-jumps", help="No detectar resalto")] = False,
    high_resolution: Annotated[bool, typer.Option("--high-resolution", help="Paso fino")] = False,
    adaptive: Annotated[bool, typer.Option("--adaptive", help="Paso fino en tramos de cambio rápido")] = False,
    every: Annotated[int, typer.Option("--every", help="Mostrar uno de cada N puntos")] = 1,
    show_progress: Annotated[bool, typer.Option("--progress/--no-progress", help="Barra de avance")] = False,
):
    """
    Calcula el perfil de superficie libre por paso estándar.

    Ejemplo:
        hc profile -s rectangular -b 5 -q 10 -n 0.013 --slope 0.001 -l 1000
        hc profile -s trapezoidal -b 3 -z 1.5 -q 8 -n 0.015 --slope 0.0005 -l 800 --downstream-depth 1.6
        hc profile -s rectangular -b 5 -q 10 -n 0.013 --slope 0.001 -l 1000 --adaptive
    """
    channel = build_channel(
        shape, discharge, manning_n, slope, length,
        width, side_slope, diameter, units, upstream_depth, downstream_depth,
    )
    if every < 1:
        print_error(f"--every debe ser >= 1 (recibido: {every})")
        raise typer.Exit(1)

    if auto_steps:
        steps = optimal_step_count(channel.length)
    try:
        options = ProfileOptions(
            resolution=steps,
            bidirectional=bidirectional,
            detect_jumps=not no_jumps,
            high_resolution=high_resolution,
            adaptive=adaptive,
        )
    except ValueError:
        print_error(f"--steps debe estar entre 2 y 10000 (recibido: {steps})")
        raise typer.Exit(1)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ConvergenceWarning)
        result = _run_with_progress(channel, options, show_progress)

    unit = length_unit(channel)
    print_header(
        "PERFIL DE SUPERFICIE LIBRE",
        f"Sección {channel.shape} | Q = {channel.discharge} | L = {channel.length} {unit}",
    )
    for warning in caught:
        print_warning(str(warning.message))

    print_field("Tirante crítico yc", format_number(result.critical_depth, 4), unit)
    print_field("Tirante normal yn", format_number(result.normal_depth, 4), unit)
    print_field("Pendiente", SLOPE_LABELS[result.slope_class.value])
    print_field("Tipo de perfil", result.profile_type.value)
    if result.points:
        print_field("Descripción", profile_description(result.points, unit).description)
    print_field("Pasos", options.num_steps)

    if result.is_choking:
        print_warning(
            f"Estrangulamiento: el cálculo se detuvo tras {len(result.points)} puntos"
        )

    if result.has_jump:
        print_jump(result.hydraulic_jump, unit)
    elif options.detect_jumps:
        print_info("Sin resalto hidráulico en el tramo")

    if result.points:
        jump_station = result.hydraulic_jump.station if result.has_jump else None
        get_console().print()
        print_profile_table(result.points, unit, every, jump_station)

        stats = profile_statistics(result.points)
        print_summary_box("ESTADÍSTICAS", [
            ("Puntos", stats.num_points, ""),
            ("Tirante mín / máx", f"{stats.min_depth:.4f} / {stats.max_depth:.4f}", unit),
            ("Velocidad máx", f"{stats.max_velocity:.3f}", f"{unit}/s"),
            ("Froude mín / máx", f"{stats.min_froude:.3f} / {stats.max_froude:.3f}", ""),
            ("Transiciones de régimen", len(flow_transitions(result.points)), ""),
        ])

    if not result.is_choking:
        print_success("Perfil completo")
