"""
Propiedades geométricas de secciones transversales.

Secciones soportadas:
- Rectangular: ancho de fondo b
- Trapezoidal: ancho de fondo b y talud z (H:V)
- Triangular: talud z (H:V)
- Circular: diámetro D, formulación por ángulo subtendido
  θ = 2·acos(1 - 2y/D)

Convenciones:
- Tirante y ≤ 0 devuelve área, perímetro y ancho superficial nulos.
- En la sección circular un tirante y ≥ D se satura a la sección llena
  (ancho superficial 0).
- Las divisiones por perímetro o ancho superficial nulos devuelven 0.
"""

import math
from dataclasses import dataclass

from hidrocanal.config import (
    CHANNEL_MODELS,
    CircularChannel,
    RectangularChannel,
    TrapezoidalChannel,
    TriangularChannel,
)
from hidrocanal.exceptions import UnsupportedShapeError


@dataclass(frozen=True)
class SectionProperties:
    """Propiedades de la sección para un tirante dado."""
    depth: float
    area: float
    wetted_perimeter: float
    top_width: float
    hydraulic_radius: float
    hydraulic_depth: float


def _unsupported(channel) -> UnsupportedShapeError:
    return UnsupportedShapeError(
        f"Sección no soportada: {type(channel).__name__}"
    )


def _circular_angle(depth: float, diameter: float) -> float:
    """Ángulo subtendido por la superficie libre (radianes)."""
    ratio = 1.0 - 2.0 * depth / diameter
    return 2.0 * math.acos(max(-1.0, min(1.0, ratio)))


def area(depth: float, channel) -> float:
    """
    Calcula el área mojada.

    Args:
        depth: Tirante
        channel: Modelo de canal

    Returns:
        Área mojada
    """
    if not isinstance(channel, CHANNEL_MODELS):
        raise _unsupported(channel)
    if depth <= 0:
        return 0.0

    if isinstance(channel, RectangularChannel):
        return channel.bottom_width * depth
    if isinstance(channel, TrapezoidalChannel):
        return (channel.bottom_width + channel.side_slope * depth) * depth
    if isinstance(channel, TriangularChannel):
        return channel.side_slope * depth**2

    r = channel.diameter / 2
    if depth >= channel.diameter:
        return math.pi * r**2
    theta = _circular_angle(depth, channel.diameter)
    return r**2 * (theta - math.sin(theta)) / 2


def wetted_perimeter(depth: float, channel) -> float:
    """Calcula el perímetro mojado."""
    if isinstance(channel, CircularChannel):
        if depth <= 0:
            return 0.0
        if depth >= channel.diameter:
            return math.pi * channel.diameter
        theta = _circular_angle(depth, channel.diameter)
        return channel.diameter / 2 * theta

    if isinstance(channel, RectangularChannel):
        return channel.bottom_width + 2 * depth if depth > 0 else 0.0
    if isinstance(channel, TrapezoidalChannel):
        if depth <= 0:
            return 0.0
        return channel.bottom_width + 2 * depth * math.sqrt(1 + channel.side_slope**2)
    if isinstance(channel, TriangularChannel):
        if depth <= 0:
            return 0.0
        return 2 * depth * math.sqrt(1 + channel.side_slope**2)
    raise _unsupported(channel)


def top_width(depth: float, channel) -> float:
    """Calcula el ancho superficial."""
    if isinstance(channel, CircularChannel):
        if depth <= 0 or depth >= channel.diameter:
            return 0.0
        theta = _circular_angle(depth, channel.diameter)
        return channel.diameter * math.sin(theta / 2)

    if isinstance(channel, RectangularChannel):
        return channel.bottom_width if depth > 0 else 0.0
    if isinstance(channel, TrapezoidalChannel):
        return channel.bottom_width + 2 * channel.side_slope * depth if depth > 0 else 0.0
    if isinstance(channel, TriangularChannel):
        return 2 * channel.side_slope * depth if depth > 0 else 0.0
    raise _unsupported(channel)


def hydraulic_radius(depth: float, channel) -> float:
    """Radio hidráulico R = A/P (0 si P = 0)."""
    perimeter = wetted_perimeter(depth, channel)
    if perimeter <= 0:
        return 0.0
    return area(depth, channel) / perimeter


def hydraulic_depth(depth: float, channel) -> float:
    """Tirante hidráulico D = A/T (0 si T = 0)."""
    width = top_width(depth, channel)
    if width <= 0:
        return 0.0
    return area(depth, channel) / width


def max_depth(channel) -> float:
    """Tirante máximo admisible: el diámetro en conductos, infinito en canales abiertos."""
    if isinstance(channel, CircularChannel):
        return channel.diameter
    if isinstance(channel, (RectangularChannel, TrapezoidalChannel, TriangularChannel)):
        return math.inf
    raise _unsupported(channel)


def centroid_depth(depth: float, channel) -> float:
    """
    Profundidad del centroide del área mojada bajo la superficie libre.

    Se usa en la función momentum M = A·ȳ + Q²/(gA).

    Args:
        depth: Tirante
        channel: Modelo de canal

    Returns:
        Distancia vertical entre la superficie libre y el centroide
    """
    a = area(depth, channel)
    if a <= 0:
        return 0.0

    if isinstance(channel, RectangularChannel):
        return depth / 2
    if isinstance(channel, TriangularChannel):
        return depth / 3
    if isinstance(channel, TrapezoidalChannel):
        moment = channel.bottom_width * depth**2 / 2 + channel.side_slope * depth**3 / 3
        return moment / a
    if isinstance(channel, CircularChannel):
        r = channel.diameter / 2
        y = min(depth, channel.diameter)
        theta = _circular_angle(y, channel.diameter)
        segment = theta - math.sin(theta)
        # Distancia del centro del círculo al centroide del segmento
        offset = 4 * r * math.sin(theta / 2) ** 3 / (3 * segment) if segment > 0 else 0.0
        return (y - r) + offset
    raise _unsupported(channel)


def section_properties(depth: float, channel) -> SectionProperties:
    """
    Calcula todas las propiedades geométricas para un tirante.

    Args:
        depth: Tirante
        channel: Modelo de canal

    Returns:
        SectionProperties con área, perímetro, ancho superficial,
        radio hidráulico y tirante hidráulico
    """
    a = area(depth, channel)
    p = wetted_perimeter(depth, channel)
    t = top_width(depth, channel)
    return SectionProperties(
        depth=depth,
        area=a,
        wetted_perimeter=p,
        top_width=t,
        hydraulic_radius=a / p if p > 0 else 0.0,
        hydraulic_depth=a / t if t > 0 else 0.0,
    )
