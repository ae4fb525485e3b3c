"""
Perfil de flujo gradualmente variado por el método del paso estándar.

El cálculo es una máquina de estados:

    INITIALIZING -> MARCHING -> (JUMP_DETECTED -> RESUME_MARCHING)* -> COMPLETE | CHOKED

- INITIALIZING: tirantes crítico y normal, clase de pendiente y condición
  de borde.
- MARCHING: avance sección a sección con solve_step. Tras un resalto los
  primeros pasos usan un cuarto del paso base.
- JUMP_DETECTED: se inserta el resalto y se continúa desde el tirante
  conjugado, en la rama subcrítica.
- CHOKED: el paso no tiene solución física; el perfil queda incompleto y
  se informa con is_choking.

Variantes:
- high_resolution_profile: mismo cálculo con paso más fino
- adaptive_resolution_profile: paso fino solo en los tramos de cambio rápido
- bidirectional_profile: dos cálculos en sentidos opuestos unidos en el
  resalto
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import numpy as np

from hidrocanal.config import (
    HIGH_RESOLUTION_STEPS,
    Direction,
    ProfileType,
    SlopeClass,
    parse_channel,
)
from hidrocanal.core.critical import solve_critical_depth
from hidrocanal.core.flow import flow_depth_point
from hidrocanal.core.jump import detect_hydraulic_jump, hydraulic_jump, jump_points, sequent_depth
from hidrocanal.core.normal import classify_slope, solve_normal_depth
from hidrocanal.core.solvers import RootResult
from hidrocanal.core.step import solve_step
from hidrocanal.models import FlowDepthPoint, HydraulicJump, JumpResult, NoJump, ProfileResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

DEFAULT_STEPS = 100

# Pasos base entre verificaciones de resalto
JUMP_CHECK_INTERVAL = 5

# Pasos refinados (dx/4) después de un resalto
REFINED_STEPS = 4
REFINEMENT_FACTOR = 4

# Tolerancia relativa para considerar un tirante igual a yc o yn
DEPTH_MATCH_TOLERANCE = 1e-3

# Límites de optimal_step_count
MIN_STEP_LENGTH = 0.1
MIN_STEP_COUNT = 20
MAX_STEP_COUNT = 500

# Refinamiento adaptativo: percentil de gradientes y pasos por tramo
ADAPTIVE_PERCENTILE = 80
ADAPTIVE_SEGMENT_STEPS = 50


class MarchState(str, Enum):
    """Estados del cálculo de perfil."""
    INITIALIZING = "initializing"
    MARCHING = "marching"
    JUMP_DETECTED = "jump_detected"
    RESUME_MARCHING = "resume_marching"
    COMPLETE = "complete"
    CHOKED = "choked"


TERMINAL_STATES = (MarchState.COMPLETE, MarchState.CHOKED)


@dataclass
class InitialConditions:
    """Condición de borde y parámetros del tramo."""
    depth: float
    station: float
    direction: Direction
    critical_depth: float
    normal_depth: float
    slope_class: SlopeClass
    num_steps: int
    control_depth: Optional[float] = None
    critical_converged: bool = True
    normal_converged: bool = True


def optimal_step_count(length: float, min_step: float = MIN_STEP_LENGTH) -> int:
    """
    Número de pasos recomendado para un tramo.

    Args:
        length: Longitud del tramo
        min_step: Paso mínimo

    Returns:
        ceil(L / paso mínimo) acotado entre 20 y 500
    """
    if length <= 0 or min_step <= 0:
        raise ValueError("Longitud y paso mínimo deben ser > 0")
    return int(min(max(math.ceil(length / min_step), MIN_STEP_COUNT), MAX_STEP_COUNT))


def setup_initial_conditions(
    channel,
    num_steps: int = DEFAULT_STEPS,
    critical: Optional[RootResult] = None,
    normal: Optional[RootResult] = None,
) -> InitialConditions:
    """
    Determina la condición de borde del cálculo.

    Prioridad:
    1. Tirantes en ambos extremos con flujo supercrítico aguas arriba:
       se parte aguas arriba y el tirante aguas abajo controla el resalto.
    2. Tirante aguas abajo: cálculo hacia aguas arriba.
    3. Tirante aguas arriba: cálculo hacia aguas abajo.
    4. Pendiente suave: yc en el extremo aguas abajo, hacia aguas arriba.
       Otras pendientes: yn en el extremo aguas arriba, hacia aguas abajo.

    Args:
        channel: Modelo de canal
        num_steps: Número de pasos base
        critical: Tirante crítico ya resuelto
        normal: Tirante normal ya resuelto

    Returns:
        InitialConditions
    """
    if num_steps < 1:
        raise ValueError("Número de pasos debe ser >= 1")

    critical = critical or solve_critical_depth(channel)
    normal = normal or solve_normal_depth(channel)
    yc, yn = critical.value, normal.value
    slope_class = classify_slope(yn, yc)

    upstream, downstream = channel.upstream_depth, channel.downstream_depth
    control = None

    if upstream is not None and downstream is not None and upstream < yc:
        depth, station, direction = upstream, 0.0, Direction.DOWNSTREAM
        control = downstream if downstream > yc else None
    elif downstream is not None:
        depth, station, direction = downstream, channel.length, Direction.UPSTREAM
    elif upstream is not None:
        depth, station, direction = upstream, 0.0, Direction.DOWNSTREAM
    elif slope_class == SlopeClass.MILD:
        depth, station, direction = yc, channel.length, Direction.UPSTREAM
    else:
        depth, station, direction = yn, 0.0, Direction.DOWNSTREAM

    # Flujo supercrítico en pendiente suave: el tirante normal controla aguas abajo
    if (
        control is None
        and direction == Direction.DOWNSTREAM
        and slope_class == SlopeClass.MILD
        and depth < yc
    ):
        control = yn

    return InitialConditions(
        depth=depth,
        station=station,
        direction=direction,
        critical_depth=yc,
        normal_depth=yn,
        slope_class=slope_class,
        num_steps=num_steps,
        control_depth=control,
        critical_converged=critical.converged,
        normal_converged=normal.converged,
    )


def _compare(depth: float, reference: float, tolerance: float) -> int:
    if abs(depth - reference) <= tolerance * reference:
        return 0
    return 1 if depth > reference else -1


def determine_profile_type(
    slope_class: SlopeClass,
    depth: float,
    normal_depth: float,
    critical_depth: float,
    tolerance: float = 0.0,
) -> ProfileType:
    """
    Clasifica el perfil según la zona del tirante.

    Args:
        slope_class: Clase de pendiente
        depth: Tirante representativo
        normal_depth: Tirante normal
        critical_depth: Tirante crítico
        tolerance: Tolerancia relativa para considerar tirantes iguales

    Returns:
        ProfileType (M1-M3, S1-S3, C1-C3 o UNKNOWN)
    """
    vs_normal = _compare(depth, normal_depth, tolerance)
    vs_critical = _compare(depth, critical_depth, tolerance)

    if slope_class == SlopeClass.MILD:
        if vs_normal > 0:
            return ProfileType.M1
        if vs_critical < 0:
            return ProfileType.M3
        if vs_critical > 0 and vs_normal < 0:
            return ProfileType.M2
    elif slope_class == SlopeClass.STEEP:
        if vs_critical > 0:
            return ProfileType.S1
        if vs_normal < 0:
            return ProfileType.S3
        if vs_normal > 0 and vs_critical < 0:
            return ProfileType.S2
    elif slope_class == SlopeClass.CRITICAL:
        if vs_critical > 0:
            return ProfileType.C1
        if vs_critical < 0:
            return ProfileType.C3
        return ProfileType.C2
    return ProfileType.UNKNOWN


class ProfileMarch:
    """
    Cálculo por paso estándar desde una condición de borde.

    Uso:
        march = ProfileMarch(channel, conditions).run()
        march.points, march.state, march.jump
    """

    def __init__(
        self,
        channel,
        conditions: InitialConditions,
        detect_jumps: bool = True,
        progress: Optional[ProgressCallback] = None,
        check_interval: int = JUMP_CHECK_INTERVAL,
    ):
        self.channel = channel
        self.conditions = conditions
        self.detect_jumps = detect_jumps
        self.progress = progress
        self.check_interval = check_interval

        self.state = MarchState.INITIALIZING
        self.points: list[FlowDepthPoint] = []
        self.jump: Optional[HydraulicJump] = None
        self.iterations = 0
        self.bisection_steps = 0

        self._station = conditions.station
        self._depth = conditions.depth
        self._subcritical = True
        self._refined_steps = 0
        self._steps_since_check = 0
        self._checked = 0
        self._pending_jump: Optional[tuple[int, float, float]] = None
        self._last_progress = 0.0
        self._base_step = channel.length / conditions.num_steps
        self._eps = 1e-9 * channel.length
        self._max_iterations = 2 * conditions.num_steps + 4 * REFINED_STEPS + 10

    @property
    def sign(self) -> int:
        return 1 if self.conditions.direction == Direction.DOWNSTREAM else -1

    @property
    def end_station(self) -> float:
        if self.conditions.direction == Direction.DOWNSTREAM:
            return self.channel.length
        return 0.0

    @property
    def tracking_jump(self) -> bool:
        """Verificación de resalto activa: avance supercrítico hacia un control subcrítico."""
        return (
            self.detect_jumps
            and self.jump is None
            and self.conditions.direction == Direction.DOWNSTREAM
            and self.conditions.control_depth is not None
            and not self._subcritical
        )

    def run(self) -> "ProfileMarch":
        """Ejecuta la máquina de estados hasta un estado terminal."""
        handlers = {
            MarchState.INITIALIZING: self._initialize,
            MarchState.MARCHING: self._march,
            MarchState.JUMP_DETECTED: self._apply_jump,
            MarchState.RESUME_MARCHING: self._resume,
        }
        while self.state not in TERMINAL_STATES:
            self.state = handlers[self.state]()

        logger.info(
            "Perfil %s: %d puntos, %d pasos por bisección",
            self.state.value, len(self.points), self.bisection_steps,
        )
        return self

    # ------------------------------------------------------------------
    # Estados
    # ------------------------------------------------------------------

    def _initialize(self) -> MarchState:
        c = self.conditions
        if self._depth == c.critical_depth:
            self._subcritical = c.direction == Direction.UPSTREAM
        else:
            self._subcritical = self._depth > c.critical_depth

        self._append(self._station, self._depth)
        self._report(0.0)

        if self.tracking_jump and self._find_jump():
            return MarchState.JUMP_DETECTED
        return MarchState.MARCHING

    def _march(self) -> MarchState:
        remaining = abs(self.end_station - self._station)
        if remaining <= self._eps:
            if self.tracking_jump and self._find_jump():
                return MarchState.JUMP_DETECTED
            return MarchState.COMPLETE

        self.iterations += 1
        if self.iterations > self._max_iterations:
            logger.warning("Iteraciones máximas alcanzadas en progresiva %.2f", self._station)
            return MarchState.CHOKED

        dx = self._base_step
        if self._refined_steps > 0:
            dx /= REFINEMENT_FACTOR
        last_step = remaining - dx <= self._eps
        if last_step:
            dx = remaining

        c = self.conditions
        result = solve_step(
            self._depth, dx, self.channel, c.direction,
            c.critical_depth, c.normal_depth, subcritical=self._subcritical,
        )

        if not result.converged or result.depth <= 0:
            logger.debug(
                "Paso sin solución en progresiva %.2f (y=%.4f, residuo=%.2e)",
                self._station, self._depth, result.residual,
            )
            if self.tracking_jump:
                if not self._find_jump():
                    last = self.points[-1]
                    self._pending_jump = (len(self.points) - 1, last.station, last.depth)
                return MarchState.JUMP_DETECTED
            logger.info("Estrangulamiento en progresiva %.2f", self._station)
            return MarchState.CHOKED

        if result.method == "bisection":
            self.bisection_steps += 1
            logger.debug("Paso resuelto por bisección en progresiva %.2f", self._station)

        self._station = self.end_station if last_step else self._station + self.sign * dx
        self._depth = result.depth
        self._append(self._station, self._depth)
        # El 100 lo informa quien completa el resultado
        if not last_step:
            self._report(100.0 * (1 - abs(self.end_station - self._station) / self.channel.length))

        if self._refined_steps > 0:
            self._refined_steps -= 1
        self._steps_since_check += 1

        if self.tracking_jump and self._steps_since_check >= self.check_interval:
            self._steps_since_check = 0
            if self._find_jump():
                return MarchState.JUMP_DETECTED
        return MarchState.MARCHING

    def _apply_jump(self) -> MarchState:
        keep, station, depth = self._pending_jump
        self._pending_jump = None
        c = self.conditions

        jump = hydraulic_jump(depth, station, self.channel, c.critical_depth)
        if not jump.occurs:
            logger.info("Resalto no factible en progresiva %.2f (y=%.4f)", station, depth)
            return MarchState.CHOKED

        del self.points[keep:]
        self.points.extend(jump_points(jump, self.channel, c.critical_depth, c.normal_depth))
        self.jump = jump
        self._station = station
        self._depth = jump.downstream_depth
        self._subcritical = True
        self._checked = len(self.points)

        logger.info(
            "Resalto hidráulico en progresiva %.2f: y1=%.4f, y2=%.4f, Fr1=%.2f",
            station, jump.upstream_depth, jump.downstream_depth, jump.froude_number_1,
        )
        return MarchState.RESUME_MARCHING

    def _resume(self) -> MarchState:
        self._refined_steps = REFINED_STEPS
        self._steps_since_check = 0
        return MarchState.MARCHING

    # ------------------------------------------------------------------
    # Auxiliares
    # ------------------------------------------------------------------

    def _append(self, station: float, depth: float) -> None:
        c = self.conditions
        self.points.append(
            flow_depth_point(station, depth, self.channel, c.critical_depth, c.normal_depth)
        )

    def _report(self, value: float) -> None:
        self._last_progress = max(self._last_progress, min(100.0, value))
        if self.progress is not None:
            self.progress(self._last_progress)

    def _sequent_excess(self, depth: float) -> float:
        c = self.conditions
        return sequent_depth(depth, self.channel, c.critical_depth) - c.control_depth

    def _find_jump(self) -> bool:
        """
        Busca la primera sección donde el conjugado alcanza el control aguas abajo.

        Aguas abajo de esa sección el flujo supercrítico ya no puede
        sostenerse y el régimen pasa a subcrítico (Fr < 1).
        """
        start = max(self._checked - 1, 0)
        previous = None
        for index in range(start, len(self.points)):
            point = self.points[index]
            excess = self._sequent_excess(point.depth)
            if excess <= 0:
                if previous is None:
                    self._pending_jump = (index, point.station, point.depth)
                else:
                    prev_point, prev_excess = previous
                    t = prev_excess / (prev_excess - excess)
                    station = prev_point.station + t * (point.station - prev_point.station)
                    depth = prev_point.depth + t * (point.depth - prev_point.depth)
                    self._pending_jump = (index, station, depth)
                logger.debug("Resalto localizado cerca de progresiva %.2f", point.station)
                return True
            previous = (point, excess)
        self._checked = len(self.points)
        return False


def _representative_depth(conditions: InitialConditions, points: list[FlowDepthPoint]) -> float:
    """Tirante de borde, o el medio si el borde coincide con yc o yn."""
    depth = conditions.depth
    for reference in (conditions.critical_depth, conditions.normal_depth):
        if _compare(depth, reference, DEPTH_MATCH_TOLERANCE) == 0:
            return float(np.mean([p.depth for p in points]))
    return depth


def _build_result(
    channel,
    conditions: InitialConditions,
    points: list[FlowDepthPoint],
    jump: Optional[JumpResult],
    is_choking: bool,
    detect_jumps: bool,
    direction: Direction,
) -> ProfileResult:
    points = sorted(points, key=lambda p: p.station)

    if jump is None or not jump.occurs:
        jump = NoJump()
        if detect_jumps:
            jump = detect_hydraulic_jump(points, channel, conditions.critical_depth)

    if jump.occurs:
        profile_type = ProfileType.MIXED
    else:
        profile_type = determine_profile_type(
            conditions.slope_class,
            _representative_depth(conditions, points),
            conditions.normal_depth,
            conditions.critical_depth,
            tolerance=DEPTH_MATCH_TOLERANCE,
        )

    return ProfileResult(
        points=tuple(points),
        profile_type=profile_type,
        slope_class=conditions.slope_class,
        critical_depth=conditions.critical_depth,
        normal_depth=conditions.normal_depth,
        is_choking=is_choking,
        hydraulic_jump=jump,
        direction=direction,
        critical_converged=conditions.critical_converged,
        normal_converged=conditions.normal_converged,
    )


def water_surface_profile(
    channel,
    num_steps: int = DEFAULT_STEPS,
    detect_jumps: bool = True,
    progress: Optional[ProgressCallback] = None,
    critical: Optional[RootResult] = None,
    normal: Optional[RootResult] = None,
) -> ProfileResult:
    """
    Calcula el perfil de superficie libre por paso estándar.

    Args:
        channel: Modelo de canal
        num_steps: Número de pasos base (paso = L / num_steps)
        detect_jumps: Detectar e insertar resalto hidráulico
        progress: Función llamada con el avance (0 hasta antes de 100)
        critical: Tirante crítico ya resuelto
        normal: Tirante normal ya resuelto

    Returns:
        ProfileResult ordenado por progresiva
    """
    conditions = setup_initial_conditions(channel, num_steps, critical, normal)
    logger.debug(
        "Inicio: y=%.4f en progresiva %.2f hacia %s (yc=%.4f, yn=%.4f, %s)",
        conditions.depth, conditions.station, conditions.direction.value,
        conditions.critical_depth, conditions.normal_depth, conditions.slope_class.value,
    )

    march = ProfileMarch(channel, conditions, detect_jumps=detect_jumps, progress=progress).run()
    return _build_result(
        channel,
        conditions,
        march.points,
        march.jump,
        is_choking=march.state == MarchState.CHOKED,
        detect_jumps=detect_jumps,
        direction=conditions.direction,
    )


def high_resolution_profile(
    channel,
    resolution: int = HIGH_RESOLUTION_STEPS,
    detect_jumps: bool = True,
    progress: Optional[ProgressCallback] = None,
    critical: Optional[RootResult] = None,
    normal: Optional[RootResult] = None,
) -> ProfileResult:
    """Perfil con paso fino (por defecto 200 pasos)."""
    return water_surface_profile(
        channel, max(resolution, HIGH_RESOLUTION_STEPS), detect_jumps, progress, critical, normal
    )


def _scaled(progress: Optional[ProgressCallback], offset: float, scale: float):
    if progress is None:
        return None
    return lambda value: progress(offset + scale * value / 100.0)


def refinement_regions(
    points: list[FlowDepthPoint],
    percentile: float = ADAPTIVE_PERCENTILE,
) -> list[tuple[float, float]]:
    """
    Tramos donde el gradiente de tirante o de Froude supera el percentil.

    Los intervalos de longitud nula (resalto) no abren ni cierran tramos.

    Args:
        points: Puntos del perfil
        percentile: Percentil de corte de los gradientes (0-100)

    Returns:
        Lista de (progresiva inicial, progresiva final)
    """
    ordered = sorted(points, key=lambda p: p.station)
    if len(ordered) < 2:
        return []

    stations = np.array([p.station for p in ordered])
    dx = np.diff(stations)
    valid = dx > 0
    if not valid.any():
        return []

    depth_gradient = np.zeros_like(dx)
    froude_gradient = np.zeros_like(dx)
    depth_gradient[valid] = np.abs(np.diff([p.depth for p in ordered]))[valid] / dx[valid]
    froude_gradient[valid] = np.abs(np.diff([p.froude_number for p in ordered]))[valid] / dx[valid]

    depth_limit = np.percentile(depth_gradient[valid], percentile, method="inverted_cdf")
    froude_limit = np.percentile(froude_gradient[valid], percentile, method="inverted_cdf")
    steep = (depth_gradient > depth_limit) | (froude_gradient > froude_limit)

    regions = []
    start = None
    for index in np.flatnonzero(valid):
        if steep[index] and start is None:
            start = float(stations[index])
        elif not steep[index] and start is not None:
            regions.append((start, float(stations[index])))
            start = None
    if start is not None:
        regions.append((start, float(stations[-1])))
    return regions


def _depth_at(points: list[FlowDepthPoint], station: float) -> float:
    """Tirante del último punto en la progresiva (lado aguas abajo de un resalto)."""
    return [p for p in points if p.station == station][-1].depth


def adaptive_resolution_profile(
    channel,
    num_steps: int = DEFAULT_STEPS,
    detect_jumps: bool = True,
    progress: Optional[ProgressCallback] = None,
    critical: Optional[RootResult] = None,
    normal: Optional[RootResult] = None,
    segment_steps: int = ADAPTIVE_SEGMENT_STEPS,
) -> ProfileResult:
    """
    Perfil con paso fino solo donde el tirante cambia rápido.

    Se calcula el perfil base, se buscan los tramos con gradiente de
    tirante o de Froude sobre el percentil 80 y cada tramo se recalcula con
    ``segment_steps`` pasos, impuestos los tirantes del perfil base en sus
    extremos. Los puntos refinados reemplazan a los interiores del perfil
    base; si el tramo contiene un resalto reemplaza también sus extremos.
    Un tramo que se estrangula conserva los puntos base.

    Args:
        channel: Modelo de canal
        num_steps: Número de pasos del perfil base
        detect_jumps: Detectar e insertar resalto hidráulico
        progress: Función llamada con el avance (0 hasta antes de 100)
        critical: Tirante crítico ya resuelto
        normal: Tirante normal ya resuelto
        segment_steps: Pasos de cada tramo refinado

    Returns:
        ProfileResult ordenado por progresiva
    """
    critical = critical or solve_critical_depth(channel)
    normal = normal or solve_normal_depth(channel)

    base = water_surface_profile(
        channel, num_steps, detect_jumps, _scaled(progress, 0.0, 50.0), critical, normal
    )
    regions = refinement_regions(list(base.points))
    logger.debug("Refinamiento adaptativo: %d tramos", len(regions))

    points = list(base.points)
    jump = base.hydraulic_jump
    base_data = channel.model_dump()

    for k, (start, end) in enumerate(regions):
        segment_channel = parse_channel({
            **base_data,
            "length": end - start,
            "upstream_depth": _depth_at(base.points, start),
            "downstream_depth": _depth_at(base.points, end),
        })
        segment = water_surface_profile(
            segment_channel, segment_steps, detect_jumps,
            _scaled(progress, 50.0 + 50.0 * k / len(regions), 50.0 / len(regions)),
            critical, normal,
        )
        if segment.is_choking:
            logger.debug("Tramo %.2f-%.2f estrangulado; se conservan los puntos base", start, end)
            continue

        if segment.has_jump:
            # El tramo con resalto reemplaza también los puntos de sus extremos
            points = [p for p in points if p.station < start or p.station > end]
            refined = segment.points
            jump = segment.hydraulic_jump.model_copy(
                update={"station": segment.hydraulic_jump.station + start}
            )
        else:
            points = [p for p in points if p.station <= start or p.station >= end]
            refined = [p for p in segment.points if 0.0 < p.station < segment_channel.length]
        points.extend(p.model_copy(update={"station": p.station + start}) for p in refined)

    points.sort(key=lambda p: p.station)
    return base.model_copy(update={"points": tuple(points), "hydraulic_jump": jump})


def _merge_station(
    supercritical: list[FlowDepthPoint],
    subcritical: list[FlowDepthPoint],
    channel,
    critical_depth: float,
) -> Optional[tuple[int, float, float]]:
    """
    Sección donde el conjugado del perfil supercrítico iguala al subcrítico.

    Returns:
        (índice del primer punto supercrítico descartado, progresiva, tirante)
        o None si los perfiles no se cruzan
    """
    sub_stations = np.array([p.station for p in subcritical])
    sub_depths = np.array([p.depth for p in subcritical])

    previous = None
    for index, point in enumerate(supercritical):
        if point.station < sub_stations[0] or point.station > sub_stations[-1]:
            continue
        if point.depth >= critical_depth:
            break
        excess = sequent_depth(point.depth, channel, critical_depth) - float(
            np.interp(point.station, sub_stations, sub_depths)
        )
        if excess <= 0:
            if previous is None:
                return index, point.station, point.depth
            prev_point, prev_excess = previous
            t = prev_excess / (prev_excess - excess)
            station = prev_point.station + t * (point.station - prev_point.station)
            depth = prev_point.depth + t * (point.depth - prev_point.depth)
            return index, station, depth
        previous = (point, excess)
    return None


def bidirectional_profile(
    channel,
    num_steps: int = DEFAULT_STEPS,
    detect_jumps: bool = True,
    progress: Optional[ProgressCallback] = None,
    critical: Optional[RootResult] = None,
    normal: Optional[RootResult] = None,
) -> ProfileResult:
    """
    Calcula el perfil en ambos sentidos y los une en el resalto.

    - Aguas arriba: tirante impuesto (o yn), cálculo hacia aguas abajo
    - Aguas abajo: tirante impuesto (o yc), cálculo hacia aguas arriba

    Si el perfil supercrítico y el subcrítico se cruzan según la condición
    de momentum, el resultado contiene el tramo supercrítico, el resalto y
    el tramo subcrítico. Si no, se usa el cálculo que controla el régimen.

    Args:
        channel: Modelo de canal
        num_steps: Número de pasos base de cada cálculo
        detect_jumps: Unir los cálculos en el resalto
        progress: Función llamada con el avance (0 hasta antes de 100)
        critical: Tirante crítico ya resuelto
        normal: Tirante normal ya resuelto

    Returns:
        ProfileResult ordenado por progresiva
    """
    critical = critical or solve_critical_depth(channel)
    normal = normal or solve_normal_depth(channel)
    yc, yn = critical.value, normal.value
    slope_class = classify_slope(yn, yc)

    common = dict(
        critical_depth=yc,
        normal_depth=yn,
        slope_class=slope_class,
        num_steps=num_steps,
        critical_converged=critical.converged,
        normal_converged=normal.converged,
    )
    up_conditions = InitialConditions(
        depth=channel.upstream_depth if channel.upstream_depth is not None else yn,
        station=0.0,
        direction=Direction.DOWNSTREAM,
        **common,
    )
    down_conditions = InitialConditions(
        depth=channel.downstream_depth if channel.downstream_depth is not None else yc,
        station=channel.length,
        direction=Direction.UPSTREAM,
        **common,
    )

    up_run = ProfileMarch(
        channel, up_conditions, detect_jumps=False, progress=_scaled(progress, 0.0, 50.0)
    ).run()
    down_run = ProfileMarch(
        channel, down_conditions, detect_jumps=False, progress=_scaled(progress, 50.0, 50.0)
    ).run()

    supercritical_inflow = up_conditions.depth < yc
    subcritical_control = down_conditions.depth >= yc
    down_points = sorted(down_run.points, key=lambda p: p.station)

    if detect_jumps and supercritical_inflow and subcritical_control:
        merge = _merge_station(up_run.points, down_points, channel, yc)
        if merge is not None:
            index, station, depth = merge
            jump = hydraulic_jump(depth, station, channel, yc)
            if jump.occurs:
                logger.info("Perfiles unidos por resalto en progresiva %.2f", station)
                points = (
                    up_run.points[:index]
                    + list(jump_points(jump, channel, yc, yn))
                    + [p for p in down_points if p.station > station]
                )
                return _build_result(
                    channel, up_conditions, points, jump,
                    is_choking=False, detect_jumps=detect_jumps,
                    direction=Direction.DOWNSTREAM,
                )

    if supercritical_inflow and up_run.state == MarchState.COMPLETE:
        return _build_result(
            channel, up_conditions, up_run.points, None,
            is_choking=False, detect_jumps=detect_jumps,
            direction=Direction.DOWNSTREAM,
        )

    # El tramo supercrítico no alcanzó a unirse con el subcrítico
    choked = down_run.state == MarchState.CHOKED or supercritical_inflow
    return _build_result(
        channel, down_conditions, down_points, None,
        is_choking=choked, detect_jumps=detect_jumps,
        direction=Direction.UPSTREAM,
    )
