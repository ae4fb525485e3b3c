"""
Resalto hidráulico.

Incluye:
- Tirante conjugado: forma cerrada de Bélanger en sección rectangular,
  igualdad de la función momentum M(y) = A·ȳ + Q²/(gA) en otras secciones
- Pérdida de energía, longitud y clasificación por Froude aguas arriba
- Detección de resaltos en una serie de puntos del perfil

Clasificación (Chow, 1959):
    1.0 - 1.7  ondular
    1.7 - 2.5  débil
    2.5 - 4.5  oscilante
    4.5 - 9.0  estable
    > 9.0      fuerte
"""

import math
from typing import Optional, Sequence

from hidrocanal.config import CircularChannel, JumpType, RectangularChannel
from hidrocanal.core.critical import critical_depth as solve_yc
from hidrocanal.core.flow import flow_depth_point, froude_number, specific_energy, specific_force
from hidrocanal.core.solvers import bisect
from hidrocanal.models import FlowDepthPoint, HydraulicJump, JumpResult, NoJump

# Límites de clasificación por número de Froude aguas arriba
JUMP_TYPE_LIMITS = (
    (1.7, JumpType.UNDULAR),
    (2.5, JumpType.WEAK),
    (4.5, JumpType.OSCILLATING),
    (9.0, JumpType.STEADY),
)

# Multiplicador de y2 para la longitud del resalto
JUMP_LENGTH_FACTORS = (
    (1.7, 5.0),
    (4.5, 6.0),
)
JUMP_LENGTH_FACTOR_MAX = 7.0

SEQUENT_TOLERANCE = 1e-6
SEQUENT_MAX_ITERATIONS = 60
MAX_BRACKET_EXPANSIONS = 40


def momentum_function(depth: float, channel) -> float:
    """Función momentum M(y) = A·ȳ + Q²/(gA)."""
    return specific_force(depth, channel)


def sequent_depth(depth: float, channel, critical_depth: Optional[float] = None) -> float:
    """
    Calcula el tirante conjugado.

    Args:
        depth: Tirante conocido (supercrítico o subcrítico)
        channel: Modelo de canal
        critical_depth: Tirante crítico, si ya fue calculado

    Returns:
        Tirante conjugado en la rama opuesta

    Raises:
        ValueError: Si el tirante no es positivo
    """
    if depth <= 0:
        raise ValueError("Tirante debe ser > 0")

    if isinstance(channel, RectangularChannel):
        fr = froude_number(depth, channel)
        return depth / 2 * (math.sqrt(1 + 8 * fr**2) - 1)

    yc = critical_depth if critical_depth is not None else solve_yc(channel)
    if math.isclose(depth, yc):
        return depth

    m1 = momentum_function(depth, channel)

    def func(y: float) -> float:
        return (momentum_function(y, channel) - m1) / m1

    if depth > yc:
        lower = yc / 2
        for _ in range(MAX_BRACKET_EXPANSIONS):
            if func(lower) > 0:
                break
            lower /= 2
        return bisect(func, lower, yc, SEQUENT_TOLERANCE, SEQUENT_MAX_ITERATIONS).value

    upper = 2 * yc
    limit = channel.diameter if isinstance(channel, CircularChannel) else math.inf
    for _ in range(MAX_BRACKET_EXPANSIONS):
        if upper >= limit:
            upper = limit
            if func(upper) < 0:
                return upper
            break
        if func(upper) > 0:
            break
        upper *= 2
    return bisect(func, yc, upper, SEQUENT_TOLERANCE, SEQUENT_MAX_ITERATIONS).value


def energy_loss(upstream_depth: float, downstream_depth: float) -> float:
    """
    Pérdida de energía en el resalto.

    ΔE = (y2 - y1)³ / (4·y1·y2)
    """
    if upstream_depth <= 0 or downstream_depth <= 0:
        raise ValueError("Tirantes deben ser > 0")
    return (downstream_depth - upstream_depth) ** 3 / (4 * upstream_depth * downstream_depth)


def jump_length(downstream_depth: float, froude_1: float) -> float:
    """Longitud aproximada del resalto como múltiplo de y2 según Froude."""
    for limit, factor in JUMP_LENGTH_FACTORS:
        if froude_1 < limit:
            return factor * downstream_depth
    return JUMP_LENGTH_FACTOR_MAX * downstream_depth


def classify_jump(froude_1: float) -> Optional[JumpType]:
    """
    Clasifica el resalto por el Froude aguas arriba.

    Returns:
        JumpType, o None si Fr1 <= 1 (no hay resalto)
    """
    if froude_1 <= 1:
        return None
    for limit, jump_type in JUMP_TYPE_LIMITS:
        if froude_1 < limit:
            return jump_type
    return JumpType.STRONG


def is_jump_possible(depth: float, channel) -> bool:
    """Un resalto solo puede formarse desde flujo supercrítico."""
    return depth > 0 and froude_number(depth, channel) > 1


def hydraulic_jump(
    upstream_depth: float,
    station: float,
    channel,
    critical_depth: Optional[float] = None,
) -> JumpResult:
    """
    Calcula las características del resalto a partir del tirante supercrítico.

    Args:
        upstream_depth: Tirante antes del resalto
        station: Progresiva del resalto
        channel: Modelo de canal
        critical_depth: Tirante crítico, si ya fue calculado

    Returns:
        HydraulicJump, o NoJump si el flujo no es supercrítico
    """
    if not is_jump_possible(upstream_depth, channel):
        return NoJump()

    fr1 = froude_number(upstream_depth, channel)
    y2 = sequent_depth(upstream_depth, channel, critical_depth)
    loss = energy_loss(upstream_depth, y2)
    e1 = specific_energy(upstream_depth, channel)

    return HydraulicJump(
        station=station,
        upstream_depth=upstream_depth,
        downstream_depth=y2,
        energy_loss=loss,
        froude_number_1=fr1,
        length=jump_length(y2, fr1),
        jump_type=classify_jump(fr1),
        upstream_energy=e1,
        sequent_depth_ratio=y2 / upstream_depth,
        efficiency=1 - loss / e1 if e1 > 0 else 0.0,
    )


def is_jump_between(upstream: FlowDepthPoint, downstream: FlowDepthPoint) -> bool:
    """Indica si entre dos puntos el Froude pasa de > 1 a < 1."""
    return upstream.froude_number > 1 and downstream.froude_number < 1


def refine_jump_location(upstream: FlowDepthPoint, downstream: FlowDepthPoint) -> float:
    """
    Progresiva del cruce Fr = 1 por interpolación lineal.

    Args:
        upstream: Punto supercrítico
        downstream: Punto subcrítico

    Returns:
        Progresiva estimada del resalto
    """
    span = upstream.froude_number - downstream.froude_number
    if span <= 0:
        return (upstream.station + downstream.station) / 2
    t = (upstream.froude_number - 1) / span
    return upstream.station + t * (downstream.station - upstream.station)


def _jump_intervals(points: Sequence[FlowDepthPoint]):
    ordered = sorted(points, key=lambda p: p.station)
    for upstream, downstream in zip(ordered, ordered[1:]):
        if is_jump_between(upstream, downstream):
            yield upstream, downstream


def _jump_for_interval(upstream, downstream, channel, critical_depth, refine) -> JumpResult:
    if refine:
        station = refine_jump_location(upstream, downstream)
    else:
        station = (upstream.station + downstream.station) / 2
    return hydraulic_jump(upstream.depth, station, channel, critical_depth)


def detect_hydraulic_jump(
    points: Sequence[FlowDepthPoint],
    channel,
    critical_depth: Optional[float] = None,
    refine: bool = True,
) -> JumpResult:
    """
    Busca el primer resalto en una serie de puntos.

    Args:
        points: Puntos del perfil (en cualquier orden)
        channel: Modelo de canal
        critical_depth: Tirante crítico, si ya fue calculado
        refine: Si True interpola el cruce Fr = 1, si no usa el punto medio

    Returns:
        HydraulicJump del primer intervalo factible, o NoJump
    """
    for upstream, downstream in _jump_intervals(points):
        jump = _jump_for_interval(upstream, downstream, channel, critical_depth, refine)
        if jump.occurs:
            return jump
    return NoJump()


def detect_hydraulic_jumps(
    points: Sequence[FlowDepthPoint],
    channel,
    critical_depth: Optional[float] = None,
    refine: bool = True,
) -> list[HydraulicJump]:
    """Busca todos los resaltos de la serie."""
    jumps = []
    for upstream, downstream in _jump_intervals(points):
        jump = _jump_for_interval(upstream, downstream, channel, critical_depth, refine)
        if jump.occurs:
            jumps.append(jump)
    return jumps


def jump_points(
    jump: HydraulicJump,
    channel,
    critical_depth: float,
    normal_depth: float,
) -> tuple[FlowDepthPoint, FlowDepthPoint]:
    """Puntos antes y después del resalto, ambos en la progresiva del resalto."""
    before = flow_depth_point(jump.station, jump.upstream_depth, channel, critical_depth, normal_depth)
    after = flow_depth_point(jump.station, jump.downstream_depth, channel, critical_depth, normal_depth)
    return before, after


def incorporate_jumps(
    points: Sequence[FlowDepthPoint],
    jumps: Sequence[HydraulicJump],
    channel,
) -> list[FlowDepthPoint]:
    """
    Inserta los puntos de cada resalto en el perfil, ordenado por progresiva.

    Args:
        points: Puntos del perfil
        jumps: Resaltos a insertar
        channel: Modelo de canal

    Returns:
        Nueva lista de puntos con el salto de tirante en cada resalto
    """
    result = list(points)
    if not result:
        return result
    yc = result[0].critical_depth
    yn = result[0].normal_depth
    for jump in jumps:
        result.extend(jump_points(jump, channel, yc, yn))
    return sorted(result, key=lambda p: p.station)
