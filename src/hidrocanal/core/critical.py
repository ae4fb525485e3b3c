"""
Tirante crítico.

Métodos:
- Rectangular: forma cerrada yc = (q²/g)^(1/3), con q = Q/b
- Triangular: forma cerrada yc = (2Q²/(g·z²))^(1/5)
- Trapezoidal y circular: bisección sobre F(y) = Q²·T/(g·A³) - 1

Referencias:
    Chow, V.T. (1959). Open-Channel Hydraulics. Cap. 4.
"""

import math
from typing import Optional

from hidrocanal.config import (
    CircularChannel,
    RectangularChannel,
    TrapezoidalChannel,
    TriangularChannel,
)
from hidrocanal.core.flow import froude_number, gravity, velocity
from hidrocanal.core.geometry import area, top_width
from hidrocanal.core.solvers import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    RootResult,
    bisect,
)
from hidrocanal.exceptions import UnsupportedShapeError

# Límite inferior del intervalo de búsqueda
MIN_DEPTH = 0.001

# Duplicaciones máximas del límite superior en secciones abiertas
MAX_BRACKET_EXPANSIONS = 30

# Tolerancia |Fr - 1| para considerar el flujo crítico
CRITICAL_FROUDE_TOLERANCE = 0.05


def critical_flow_function(depth: float, channel) -> float:
    """
    Función de flujo crítico F(y) = Q²·T/(g·A³) - 1.

    Se anula en el tirante crítico (Fr = 1).
    """
    a = area(depth, channel)
    if a <= 0:
        return math.inf
    t = top_width(depth, channel)
    return channel.discharge**2 * t / (gravity(channel) * a**3) - 1


def _upper_bound(channel, func) -> float:
    if isinstance(channel, CircularChannel):
        return channel.diameter

    upper = 2.0 * channel.discharge**0.4
    for _ in range(MAX_BRACKET_EXPANSIONS):
        if func(upper) < 0:
            break
        upper *= 2
    return upper


def _lower_bound(func) -> float:
    lower = MIN_DEPTH
    for _ in range(10):
        if func(lower) > 0:
            break
        lower /= 10
    return lower


def solve_critical_depth(
    channel,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> RootResult:
    """
    Calcula el tirante crítico con indicador de convergencia.

    Args:
        channel: Modelo de canal
        tolerance: Tolerancia de la bisección
        max_iterations: Iteraciones máximas de la bisección

    Returns:
        RootResult; en secciones con forma cerrada converged es siempre True
    """
    g = gravity(channel)
    q_total = channel.discharge

    if isinstance(channel, RectangularChannel):
        q = q_total / channel.bottom_width
        return RootResult((q**2 / g) ** (1 / 3), 0, True, "closed_form")

    if isinstance(channel, TriangularChannel):
        yc = (2 * q_total**2 / (g * channel.side_slope**2)) ** 0.2
        return RootResult(yc, 0, True, "closed_form")

    if isinstance(channel, (TrapezoidalChannel, CircularChannel)):
        def func(y: float) -> float:
            return critical_flow_function(y, channel)

        lower = _lower_bound(func)
        upper = _upper_bound(channel, func)
        return bisect(func, lower, upper, tolerance, max_iterations)

    raise UnsupportedShapeError(f"Sección no soportada: {type(channel).__name__}")


def critical_depth(channel) -> float:
    """
    Calcula el tirante crítico.

    Args:
        channel: Modelo de canal

    Returns:
        Tirante crítico (m o ft)
    """
    return solve_critical_depth(channel).value


def critical_velocity(channel, yc: Optional[float] = None) -> float:
    """Velocidad en condición crítica."""
    if yc is None:
        yc = critical_depth(channel)
    return velocity(yc, channel)


def critical_energy(channel, yc: Optional[float] = None) -> float:
    """
    Energía específica mínima.

    Para sección rectangular Ec = 1.5·yc; en otras secciones
    Ec = yc + Vc²/(2g).
    """
    if yc is None:
        yc = critical_depth(channel)
    if isinstance(channel, RectangularChannel):
        return 1.5 * yc
    vc = velocity(yc, channel)
    return yc + vc**2 / (2 * gravity(channel))


def is_flow_critical(depth: float, channel) -> bool:
    """Indica si |Fr - 1| < 0.05 para el tirante dado."""
    return abs(froude_number(depth, channel) - 1) < CRITICAL_FROUDE_TOLERANCE
