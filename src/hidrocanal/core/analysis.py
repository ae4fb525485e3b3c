"""
Análisis de perfiles calculados.

Incluye:
- Transiciones de régimen a lo largo del perfil
- Estadísticas (mínimo, máximo, medio) de tirante, velocidad, Froude y energía
- Interpolación en progresivas arbitrarias y remuestreo uniforme
- Ubicación de tirante crítico y normal
- Simplificación y remuestreo por error, extracción de tramos
- Descripción del perfil y líneas de referencia yc e yn
"""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from hidrocanal.config import FlowRegime, ProfileType, SlopeClass
from hidrocanal.core.critical import solve_critical_depth
from hidrocanal.core.flow import flow_depth_point, flow_regime
from hidrocanal.core.normal import classify_slope, solve_normal_depth
from hidrocanal.core.profile import DEPTH_MATCH_TOLERANCE, determine_profile_type
from hidrocanal.models import FlowDepthPoint


@dataclass(frozen=True)
class FlowTransition:
    """Cambio de régimen entre dos puntos consecutivos."""
    station: float
    from_regime: FlowRegime
    to_regime: FlowRegime
    depth: float
    froude_number: float


@dataclass(frozen=True)
class ProfileStatistics:
    """Estadísticas de un perfil."""
    num_points: int
    length: float
    min_depth: float
    max_depth: float
    mean_depth: float
    min_velocity: float
    max_velocity: float
    mean_velocity: float
    min_froude: float
    max_froude: float
    mean_froude: float
    min_energy: float
    max_energy: float
    mean_energy: float
    predominant_regime: FlowRegime


def _sorted(points: Sequence[FlowDepthPoint]) -> list[FlowDepthPoint]:
    return sorted(points, key=lambda p: p.station)


def flow_transitions(points: Sequence[FlowDepthPoint]) -> list[FlowTransition]:
    """
    Identifica los cambios de régimen a lo largo del perfil.

    Args:
        points: Puntos del perfil

    Returns:
        Lista de transiciones ordenadas por progresiva
    """
    ordered = _sorted(points)
    transitions = []
    for before, after in zip(ordered, ordered[1:]):
        regime_before = flow_regime(before.froude_number)
        regime_after = flow_regime(after.froude_number)
        if regime_before != regime_after:
            transitions.append(FlowTransition(
                station=after.station,
                from_regime=regime_before,
                to_regime=regime_after,
                depth=after.depth,
                froude_number=after.froude_number,
            ))
    return transitions


def profile_statistics(points: Sequence[FlowDepthPoint]) -> ProfileStatistics:
    """
    Calcula estadísticas del perfil.

    Args:
        points: Puntos del perfil

    Returns:
        ProfileStatistics

    Raises:
        ValueError: Si no hay puntos
    """
    if not points:
        raise ValueError("El perfil no tiene puntos")

    stations = np.array([p.station for p in points])
    depths = np.array([p.depth for p in points])
    velocities = np.array([p.velocity for p in points])
    froude = np.array([p.froude_number for p in points])
    energy = np.array([p.specific_energy for p in points])

    regimes = Counter(flow_regime(fr) for fr in froude)
    predominant = regimes.most_common(1)[0][0]

    return ProfileStatistics(
        num_points=len(points),
        length=float(stations.max() - stations.min()),
        min_depth=float(depths.min()),
        max_depth=float(depths.max()),
        mean_depth=float(depths.mean()),
        min_velocity=float(velocities.min()),
        max_velocity=float(velocities.max()),
        mean_velocity=float(velocities.mean()),
        min_froude=float(froude.min()),
        max_froude=float(froude.max()),
        mean_froude=float(froude.mean()),
        min_energy=float(energy.min()),
        max_energy=float(energy.max()),
        mean_energy=float(energy.mean()),
        predominant_regime=predominant,
    )


def interpolate_profile(
    points: Sequence[FlowDepthPoint],
    stations: Sequence[float],
    channel,
) -> list[FlowDepthPoint]:
    """
    Interpola el tirante en progresivas arbitrarias.

    Las progresivas fuera del rango del perfil toman el tirante del extremo
    más cercano. Velocidad, Froude y energía se recalculan para el tirante
    interpolado.

    Args:
        points: Puntos del perfil
        stations: Progresivas de salida
        channel: Modelo de canal

    Returns:
        Lista de FlowDepthPoint en las progresivas pedidas
    """
    if not points:
        raise ValueError("El perfil no tiene puntos")

    ordered = _sorted(points)
    xp = np.array([p.station for p in ordered])
    fp = np.array([p.depth for p in ordered])
    depths = np.interp(np.asarray(stations, dtype=float), xp, fp)

    yc = ordered[0].critical_depth
    yn = ordered[0].normal_depth
    return [
        flow_depth_point(float(x), float(y), channel, yc, yn)
        for x, y in zip(stations, depths)
    ]


def uniform_profile(
    points: Sequence[FlowDepthPoint],
    channel,
    num_points: int = 50,
) -> list[FlowDepthPoint]:
    """Remuestrea el perfil en progresivas equiespaciadas."""
    if num_points < 2:
        raise ValueError("Número de puntos debe ser >= 2")
    stations = [p.station for p in points]
    grid = np.linspace(min(stations), max(stations), num_points)
    return interpolate_profile(points, grid.tolist(), channel)


def critical_depth_location(
    points: Sequence[FlowDepthPoint],
    tolerance: float = 0.05,
) -> Optional[float]:
    """Primera progresiva donde |Fr - 1| < tolerancia, o None."""
    for point in _sorted(points):
        if abs(point.froude_number - 1) < tolerance:
            return point.station
    return None


def normal_depth_location(
    points: Sequence[FlowDepthPoint],
    tolerance: float = 0.02,
) -> Optional[float]:
    """Primera progresiva donde el tirante difiere del normal menos que la tolerancia."""
    for point in _sorted(points):
        if point.normal_depth > 0 and abs(point.depth - point.normal_depth) / point.normal_depth < tolerance:
            return point.station
    return None


def classify_by_transitions(
    points: Sequence[FlowDepthPoint],
    slope_class: SlopeClass,
) -> ProfileType:
    """
    Clasifica el perfil a partir de sus transiciones de régimen.

    Un paso de supercrítico a subcrítico (o viceversa) da un perfil mixto;
    en otro caso se clasifica con el tirante medio.
    """
    if not points:
        return ProfileType.UNKNOWN

    regimes = {flow_regime(p.froude_number) for p in points}
    if {FlowRegime.SUBCRITICAL, FlowRegime.SUPERCRITICAL} <= regimes:
        return ProfileType.MIXED

    mean_depth = float(np.mean([p.depth for p in points]))
    return determine_profile_type(
        slope_class,
        mean_depth,
        points[0].normal_depth,
        points[0].critical_depth,
        tolerance=DEPTH_MATCH_TOLERANCE,
    )


def simplify_profile(
    points: Sequence[FlowDepthPoint],
    max_points: int = 100,
) -> list[FlowDepthPoint]:
    """
    Reduce el número de puntos conservando los cambios de régimen.

    Se toma un punto cada cierto número de puntos (siempre el primero y el
    último) y se agregan los dos puntos de cada cambio de régimen, por lo
    que el resultado puede superar max_points en esos puntos.

    Args:
        points: Puntos del perfil
        max_points: Cantidad de puntos del submuestreo regular

    Returns:
        Lista de puntos ordenada por progresiva
    """
    if max_points < 2:
        raise ValueError("Número de puntos debe ser >= 2")

    ordered = _sorted(points)
    if len(ordered) <= max_points:
        return ordered

    last = len(ordered) - 1
    step = math.ceil(last / (max_points - 1))
    keep = set(range(0, last, step))
    keep.add(last)

    regimes = [flow_regime(p.froude_number) for p in ordered]
    for index in range(1, len(ordered)):
        if regimes[index] != regimes[index - 1]:
            keep.update((index - 1, index))

    return [ordered[i] for i in sorted(keep)]


def resample_profile(
    points: Sequence[FlowDepthPoint],
    max_points: int = 50,
) -> list[FlowDepthPoint]:
    """
    Reduce el perfil a max_points descartando los puntos que menos aportan.

    El error de cada punto interior es la diferencia entre su tirante y la
    interpolación lineal entre sus vecinos; se descartan los de menor
    error. Los extremos se conservan siempre.

    Args:
        points: Puntos del perfil
        max_points: Cantidad de puntos del resultado

    Returns:
        Lista de puntos ordenada por progresiva
    """
    if max_points < 2:
        raise ValueError("Número de puntos debe ser >= 2")

    ordered = _sorted(points)
    if len(ordered) <= max_points:
        return ordered

    x = np.array([p.station for p in ordered])
    y = np.array([p.depth for p in ordered])
    span = x[2:] - x[:-2]
    t = np.divide(x[1:-1] - x[:-2], span, out=np.zeros_like(span), where=span > 0)
    error = np.abs(y[1:-1] - (y[:-2] + t * (y[2:] - y[:-2])))

    order = np.argsort(error, kind="stable")
    dropped = set((order[: len(ordered) - max_points] + 1).tolist())
    return [p for i, p in enumerate(ordered) if i not in dropped]


def extract_profile_segment(
    points: Sequence[FlowDepthPoint],
    start_station: float,
    end_station: float,
    channel,
) -> list[FlowDepthPoint]:
    """
    Extrae el tramo del perfil entre dos progresivas.

    Si el tramo no contiene puntos en sus extremos se agregan puntos
    interpolados en start_station y end_station.

    Args:
        points: Puntos del perfil
        start_station: Progresiva inicial
        end_station: Progresiva final
        channel: Modelo de canal

    Returns:
        Lista de puntos ordenada por progresiva
    """
    if end_station < start_station:
        raise ValueError("La progresiva final debe ser >= la inicial")

    ordered = _sorted(points)
    segment = [p for p in ordered if start_station <= p.station <= end_station]
    if not segment:
        return interpolate_profile(ordered, [start_station, end_station], channel)

    if segment[0].station > start_station:
        segment.insert(0, interpolate_profile(ordered, [start_station], channel)[0])
    if segment[-1].station < end_station:
        segment.append(interpolate_profile(ordered, [end_station], channel)[0])
    return segment


@dataclass(frozen=True)
class ProfileDescription:
    """Clasificación y descripción legible de un perfil."""
    classification: str
    description: str
    details: str


PROFILE_DESCRIPTIONS = {
    ProfileType.M1: (
        "M1 - Curva de remanso (pendiente suave)",
        "El tirante supera al normal y tiende a él hacia aguas arriba",
    ),
    ProfileType.M2: (
        "M2 - Curva de descenso (pendiente suave)",
        "El tirante está entre el crítico y el normal y desciende hacia el crítico",
    ),
    ProfileType.M3: (
        "M3 - Flujo supercrítico (pendiente suave)",
        "El tirante es menor que el crítico y aumenta hacia aguas abajo",
    ),
    ProfileType.S1: (
        "S1 - Curva de remanso (pendiente fuerte)",
        "El tirante supera al crítico; flujo subcrítico sobre pendiente fuerte",
    ),
    ProfileType.S2: (
        "S2 - Curva de descenso (pendiente fuerte)",
        "El tirante está entre el normal y el crítico y tiende al normal hacia aguas abajo",
    ),
    ProfileType.S3: (
        "S3 - Flujo supercrítico (pendiente fuerte)",
        "El tirante es menor que el normal y aumenta hacia él aguas abajo",
    ),
    ProfileType.C1: (
        "C1 - Curva de remanso (pendiente crítica)",
        "El tirante supera al crítico",
    ),
    ProfileType.C2: (
        "C2 - Flujo crítico uniforme",
        "El tirante coincide con el crítico y el normal",
    ),
    ProfileType.C3: (
        "C3 - Flujo supercrítico (pendiente crítica)",
        "El tirante es menor que el crítico",
    ),
    ProfileType.UNKNOWN: (
        "Perfil sin curva de remanso",
        "El tirante se mantiene en el normal o fuera de las zonas clasificables",
    ),
}

_MIXED_DESCRIPTION = ("Perfil mixto", "Perfil con características de flujo mixtas")


def profile_description(
    points: Sequence[FlowDepthPoint],
    length_unit: str = "m",
) -> ProfileDescription:
    """
    Describe el perfil a partir de sus cambios de régimen y estadísticas.

    Los cambios que entran o salen de la banda crítica no cuentan como
    transición. Un paso directo de supercrítico a subcrítico es un resalto.

    Args:
        points: Puntos del perfil
        length_unit: Unidad de longitud para el texto ("m" o "ft")

    Returns:
        ProfileDescription
    """
    if not points:
        raise ValueError("El perfil no tiene puntos")

    ordered = _sorted(points)
    changes = [
        t for t in flow_transitions(ordered)
        if FlowRegime.CRITICAL not in (t.from_regime, t.to_regime)
    ]
    jumps = [t for t in changes if t.from_regime == FlowRegime.SUPERCRITICAL]

    if jumps:
        classification = "hydraulic_jump"
        description = "Perfil con resalto hidráulico"
        details = (
            f"Paso de supercrítico a subcrítico en progresiva "
            f"{jumps[0].station:.2f} {length_unit}"
        )
    elif changes:
        classification = "transition"
        description = "Perfil con cambio de régimen"
        details = f"Transición en progresiva {changes[0].station:.2f} {length_unit}"
    else:
        first = ordered[0]
        slope_class = classify_slope(first.normal_depth, first.critical_depth)
        profile_type = classify_by_transitions(ordered, slope_class)
        classification = profile_type.value
        description, details = PROFILE_DESCRIPTIONS.get(profile_type, _MIXED_DESCRIPTION)

    stats = profile_statistics(ordered)
    details += (
        f"\nTirante: {stats.min_depth:.3f} - {stats.max_depth:.3f} {length_unit}"
        f"\nVelocidad: {stats.min_velocity:.3f} - {stats.max_velocity:.3f} {length_unit}/s"
        f"\nFroude: {stats.min_froude:.3f} - {stats.max_froude:.3f}"
    )
    return ProfileDescription(classification, description, details)


@dataclass(frozen=True)
class ReferenceProfiles:
    """Líneas de tirante crítico y normal a lo largo del tramo."""
    critical: list[FlowDepthPoint]
    normal: list[FlowDepthPoint]


def reference_profiles(
    channel,
    num_points: int = 100,
    critical_depth: Optional[float] = None,
    normal_depth: Optional[float] = None,
) -> ReferenceProfiles:
    """
    Construye las líneas de referencia yc e yn en progresivas equiespaciadas.

    Args:
        channel: Modelo de canal
        num_points: Puntos de cada línea
        critical_depth: Tirante crítico ya calculado
        normal_depth: Tirante normal ya calculado

    Returns:
        ReferenceProfiles
    """
    if num_points < 2:
        raise ValueError("Número de puntos debe ser >= 2")

    yc = critical_depth if critical_depth is not None else solve_critical_depth(channel).value
    yn = normal_depth if normal_depth is not None else solve_normal_depth(channel).value
    stations = np.linspace(0.0, channel.length, num_points).tolist()
    return ReferenceProfiles(
        critical=[flow_depth_point(x, yc, channel, yc, yn) for x in stations],
        normal=[flow_depth_point(x, yn, channel, yc, yn) for x in stations],
    )
