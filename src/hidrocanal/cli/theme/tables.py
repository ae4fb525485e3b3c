"""
Funciones para crear e imprimir tablas Rich.
"""

from typing import Sequence

from rich.table import Table
from rich import box

from hidrocanal.cli.theme.palette import get_console, get_palette
from hidrocanal.core.flow import flow_regime
from hidrocanal.models import FlowDepthPoint

REGIME_LABELS = {
    "subcritical": "Subcrítico",
    "critical": "Crítico",
    "supercritical": "Supercrítico",
}


def create_results_table(
    title: str = None,
    columns: list[tuple[str, str]] = None,  # [(nombre, justify), ...]
) -> Table:
    """Crea una tabla estilizada para resultados."""
    p = get_palette()

    table = Table(
        title=title,
        title_style=f"bold {p.primary}",
        border_style=p.border,
        header_style=f"bold {p.table_header}",
        box=box.ROUNDED,
        show_header=True,
        padding=(0, 1),
    )

    if columns:
        for name, justify in columns:
            table.add_column(name, justify=justify)

    return table


def _thin(points: Sequence[FlowDepthPoint], every: int, keep: set[int]) -> list[int]:
    """Índices a mostrar: cada `every` puntos, los extremos y los marcados."""
    last = len(points) - 1
    return [
        i for i in range(len(points))
        if i % every == 0 or i == last or i in keep
    ]


def create_profile_table(
    points: Sequence[FlowDepthPoint],
    length_unit: str = "m",
    every: int = 1,
    jump_station: float = None,
) -> Table:
    """
    Crea la tabla de puntos del perfil.

    Args:
        points: Puntos ordenados por progresiva
        length_unit: Unidad de longitud para los encabezados
        every: Mostrar uno de cada `every` puntos
        jump_station: Progresiva del resalto (sus filas se destacan)
    """
    p = get_palette()
    u = length_unit
    table = create_results_table(
        title="PERFIL",
        columns=[
            (f"x ({u})", "right"),
            (f"y ({u})", "right"),
            (f"V ({u}/s)", "right"),
            ("Fr", "right"),
            (f"E ({u})", "right"),
            ("Régimen", "left"),
        ],
    )

    keep = set()
    if jump_station is not None:
        keep = {i for i, pt in enumerate(points) if pt.station == jump_station}

    for i in _thin(points, max(every, 1), keep):
        pt = points[i]
        regime = flow_regime(pt.froude_number).value
        table.add_row(
            f"{pt.station:.2f}",
            f"{pt.depth:.4f}",
            f"{pt.velocity:.3f}",
            f"{pt.froude_number:.3f}",
            f"{pt.specific_energy:.4f}",
            REGIME_LABELS[regime],
            style=f"bold {p.table_highlight}" if i in keep else None,
        )
    return table


def print_profile_table(
    points: Sequence[FlowDepthPoint],
    length_unit: str = "m",
    every: int = 1,
    jump_station: float = None,
) -> None:
    """Imprime la tabla de puntos del perfil."""
    get_console().print(create_profile_table(points, length_unit, every, jump_station))
