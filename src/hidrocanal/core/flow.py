"""
Parámetros de flujo para un tirante dado.

Incluye:
- Constantes según sistema de unidades (g, k de Manning, peso específico)
- Velocidad, número de Froude, energía específica
- Pendiente de fricción (Manning), tensión de corte, fuerza específica
- Clasificación de régimen con banda de tolerancia alrededor de Fr = 1
"""

import math

from hidrocanal.config import FlowRegime, UnitSystem
from hidrocanal.core.geometry import area, centroid_depth, hydraulic_depth, hydraulic_radius
from hidrocanal.models import FlowDepthPoint

GRAVITY = {
    UnitSystem.METRIC: 9.81,     # m/s²
    UnitSystem.IMPERIAL: 32.2,   # ft/s²
}

MANNING_K = {
    UnitSystem.METRIC: 1.0,
    UnitSystem.IMPERIAL: 1.49,
}

SPECIFIC_WEIGHT = {
    UnitSystem.METRIC: 9810.0,   # N/m³
    UnitSystem.IMPERIAL: 62.4,   # lb/ft³
}

# Banda de Froude considerada crítica
SUBCRITICAL_LIMIT = 0.95
SUPERCRITICAL_LIMIT = 1.05


def gravity(channel) -> float:
    """Aceleración de la gravedad según el sistema de unidades del canal."""
    return GRAVITY[UnitSystem(channel.units)]


def manning_k(channel) -> float:
    """Factor de conversión de la ecuación de Manning (1.0 SI, 1.49 US)."""
    return MANNING_K[UnitSystem(channel.units)]


def specific_weight(channel) -> float:
    """Peso específico del agua según el sistema de unidades."""
    return SPECIFIC_WEIGHT[UnitSystem(channel.units)]


def velocity(depth: float, channel) -> float:
    """Velocidad media V = Q/A (0 si A = 0)."""
    a = area(depth, channel)
    if a <= 0:
        return 0.0
    return channel.discharge / a


def froude_number(depth: float, channel) -> float:
    """
    Calcula el número de Froude.

    Fr = V / sqrt(g × D), con D = A/T el tirante hidráulico.

    Args:
        depth: Tirante
        channel: Modelo de canal

    Returns:
        Número de Froude (0 si el tirante hidráulico es nulo)
    """
    d = hydraulic_depth(depth, channel)
    if d <= 0:
        return 0.0
    return velocity(depth, channel) / math.sqrt(gravity(channel) * d)


def specific_energy(depth: float, channel) -> float:
    """Energía específica E = y + V²/(2g)."""
    v = velocity(depth, channel)
    return depth + v**2 / (2 * gravity(channel))


def friction_slope(depth: float, channel) -> float:
    """
    Calcula la pendiente de fricción por Manning.

    Sf = (n × V / (k × R^(2/3)))²

    Args:
        depth: Tirante
        channel: Modelo de canal

    Returns:
        Pendiente de fricción (m/m), 0 si el radio hidráulico es nulo
    """
    r = hydraulic_radius(depth, channel)
    if r <= 0:
        return 0.0
    v = velocity(depth, channel)
    return (channel.manning_n * v / (manning_k(channel) * r ** (2 / 3))) ** 2


def shear_stress(depth: float, channel) -> float:
    """Tensión de corte media en el fondo τ = γ × R × S0."""
    return specific_weight(channel) * hydraulic_radius(depth, channel) * channel.slope


def specific_force(depth: float, channel) -> float:
    """
    Fuerza específica (función momentum) por unidad de peso.

    M = A × ȳ + Q²/(g × A)

    Args:
        depth: Tirante
        channel: Modelo de canal

    Returns:
        Fuerza específica (m³ o ft³), 0 si el área es nula
    """
    a = area(depth, channel)
    if a <= 0:
        return 0.0
    return a * centroid_depth(depth, channel) + channel.discharge**2 / (gravity(channel) * a)


def flow_regime(froude: float) -> FlowRegime:
    """
    Clasifica el régimen de flujo.

    Fr < 0.95 subcrítico, Fr > 1.05 supercrítico, crítico en la banda
    intermedia.
    """
    if froude < SUBCRITICAL_LIMIT:
        return FlowRegime.SUBCRITICAL
    if froude > SUPERCRITICAL_LIMIT:
        return FlowRegime.SUPERCRITICAL
    return FlowRegime.CRITICAL


def flow_depth_point(
    station: float,
    depth: float,
    channel,
    critical_depth: float,
    normal_depth: float,
) -> FlowDepthPoint:
    """
    Construye un punto del perfil con todas sus variables hidráulicas.

    Args:
        station: Progresiva
        depth: Tirante en la progresiva
        channel: Modelo de canal
        critical_depth: Tirante crítico del tramo
        normal_depth: Tirante normal del tramo

    Returns:
        FlowDepthPoint con velocidad, Froude y energía específica
    """
    return FlowDepthPoint(
        station=station,
        depth=depth,
        velocity=velocity(depth, channel),
        froude_number=froude_number(depth, channel),
        specific_energy=specific_energy(depth, channel),
        critical_depth=critical_depth,
        normal_depth=normal_depth,
    )
