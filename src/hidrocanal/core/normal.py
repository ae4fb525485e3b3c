"""
Tirante normal y clasificación de pendiente.

El tirante normal satisface la ecuación de Manning:
    Q = (k/n) × A × R^(2/3) × S^(1/2)

Se resuelve por bisección (método por defecto) o por secante.
"""

import math
from typing import Optional, Union

from hidrocanal.config import CircularChannel, NormalDepthMethod, SlopeClass
from hidrocanal.core.flow import froude_number, manning_k, velocity
from hidrocanal.core.geometry import area, hydraulic_radius
from hidrocanal.core.solvers import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    RootResult,
    bisect,
    secant,
)

MIN_DEPTH = 0.001
MAX_BRACKET_EXPANSIONS = 30

# Relación y/D de capacidad máxima en conductos circulares
CIRCULAR_MAX_CAPACITY_RATIO = 0.938

# Estimaciones iniciales del método de la secante
SECANT_GUESSES = (0.1, 1.0)

# Estimaciones de la secante en conductos circulares, como fracción de D
CIRCULAR_SECANT_RATIOS = (0.1, 0.9)

UNIFORM_FLOW_TOLERANCE = 0.02


def manning_discharge(depth: float, channel) -> float:
    """Caudal de Manning para un tirante dado."""
    a = area(depth, channel)
    r = hydraulic_radius(depth, channel)
    if a <= 0 or r <= 0:
        return 0.0
    return manning_k(channel) / channel.manning_n * a * r ** (2 / 3) * math.sqrt(channel.slope)


def manning_function(depth: float, channel) -> float:
    """F(y) = Q - Q_manning(y); se anula en el tirante normal."""
    return channel.discharge - manning_discharge(depth, channel)


def _upper_bound(channel, func) -> float:
    if isinstance(channel, CircularChannel):
        if func(channel.diameter) > 0:
            return CIRCULAR_MAX_CAPACITY_RATIO * channel.diameter
        return channel.diameter

    upper = 1.5 * channel.discharge**0.4 / channel.slope**0.2
    for _ in range(MAX_BRACKET_EXPANSIONS):
        if func(upper) < 0:
            break
        upper *= 2
    return upper


def _secant_guesses(channel) -> tuple[float, float]:
    """Estimaciones iniciales dentro de la sección (fijas en secciones abiertas)."""
    if isinstance(channel, CircularChannel):
        low, high = CIRCULAR_SECANT_RATIOS
        return low * channel.diameter, high * channel.diameter
    return SECANT_GUESSES


def solve_normal_depth(
    channel,
    method: Union[NormalDepthMethod, str] = NormalDepthMethod.BISECTION,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> RootResult:
    """
    Calcula el tirante normal con indicador de convergencia.

    Args:
        channel: Modelo de canal
        method: "bisection" o "secant"
        tolerance: Tolerancia sobre el caudal
        max_iterations: Iteraciones máximas

    Returns:
        RootResult; si no converge, value es la mejor estimación

    Raises:
        ValueError: Si el método no existe
    """
    try:
        method = NormalDepthMethod(method)
    except ValueError:
        raise ValueError(f"Método desconocido: {method}") from None

    def func(y: float) -> float:
        return manning_function(y, channel)

    if method == NormalDepthMethod.SECANT:
        x0, x1 = _secant_guesses(channel)
        upper_limit = channel.diameter if isinstance(channel, CircularChannel) else math.inf
        return secant(func, x0, x1, tolerance, max_iterations, upper_limit=upper_limit)

    return bisect(func, MIN_DEPTH, _upper_bound(channel, func), tolerance, max_iterations)


def normal_depth(channel, method: Union[NormalDepthMethod, str] = NormalDepthMethod.BISECTION) -> float:
    """
    Calcula el tirante normal.

    Args:
        channel: Modelo de canal
        method: Método de solución

    Returns:
        Tirante normal (m o ft)
    """
    return solve_normal_depth(channel, method).value


def normal_velocity(channel, yn: Optional[float] = None) -> float:
    """Velocidad en flujo uniforme."""
    if yn is None:
        yn = normal_depth(channel)
    return velocity(yn, channel)


def normal_froude_number(channel, yn: Optional[float] = None) -> float:
    """Número de Froude en flujo uniforme."""
    if yn is None:
        yn = normal_depth(channel)
    return froude_number(yn, channel)


def is_flow_uniform(
    depth: float,
    channel,
    tolerance: float = UNIFORM_FLOW_TOLERANCE,
    yn: Optional[float] = None,
) -> bool:
    """Indica si el tirante difiere del normal menos que la tolerancia relativa."""
    if yn is None:
        yn = normal_depth(channel)
    if yn <= 0:
        return False
    return abs(depth - yn) / yn < tolerance


def classify_slope(normal: float, critical: float, tolerance: float = 0.0) -> SlopeClass:
    """
    Clasifica la pendiente del canal.

    Args:
        normal: Tirante normal
        critical: Tirante crítico
        tolerance: Tolerancia relativa para considerar yn = yc
            (0 compara en forma exacta)

    Returns:
        SlopeClass.MILD si yn > yc, STEEP si yn < yc, CRITICAL si son iguales
    """
    if tolerance < 0:
        raise ValueError("Tolerancia debe ser >= 0")
    if abs(normal - critical) <= tolerance * critical:
        return SlopeClass.CRITICAL
    if normal > critical:
        return SlopeClass.MILD
    return SlopeClass.STEEP
