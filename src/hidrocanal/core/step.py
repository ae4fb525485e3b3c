"""
Paso estándar: solución implícita del balance de energía entre dos secciones.

Para un avance dx en el sentido de cálculo:

    E(y2) = E(y1) + s × (S0 - Sf_medio) × dx

con s = +1 hacia aguas abajo y s = -1 hacia aguas arriba, y
Sf_medio = (Sf(y1) + Sf(y2)) / 2.

Método principal: Newton-Raphson con derivada por diferencia central y
paso amortiguado. Se pasa a bisección cuando la derivada es casi nula, el
error crece durante 3 iteraciones seguidas o se agotan las iteraciones.
La solución se restringe a la rama (subcrítica o supercrítica) del tirante
actual.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Union

from hidrocanal.config import CircularChannel, Direction
from hidrocanal.core.flow import friction_slope, specific_energy
from hidrocanal.core.solvers import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, bisect

# Derivada considerada nula
MIN_DERIVATIVE = 1e-6

# Iteraciones consecutivas con error creciente antes de abandonar Newton
MAX_ERROR_GROWTH = 3

# Fracción máxima del tirante que puede variar en una iteración
DAMPING_LIMIT = 0.5

# Variación relativa de la estimación inicial
GUESS_FACTOR = 0.05

MAX_BRACKET_EXPANSIONS = 40
BRANCH_TOLERANCE = 1e-6


@dataclass(frozen=True)
class StepResult:
    """Resultado de un paso del método estándar."""
    depth: float
    converged: bool
    iterations: int
    method: str
    residual: float


def _sign(direction: Union[Direction, str]) -> int:
    return 1 if Direction(direction) == Direction.DOWNSTREAM else -1


def residual_function(
    current_depth: float,
    dx: float,
    channel,
    direction: Union[Direction, str],
) -> Callable[[float], float]:
    """
    Construye el residuo del balance de energía para el tirante siguiente.

    Args:
        current_depth: Tirante conocido
        dx: Longitud del paso (positiva)
        channel: Modelo de canal
        direction: Sentido de avance

    Returns:
        Función f(y2) que se anula en el tirante buscado
    """
    sign = _sign(direction)
    e1 = specific_energy(current_depth, channel)
    sf1 = friction_slope(current_depth, channel)

    def residual(next_depth: float) -> float:
        sf_avg = (sf1 + friction_slope(next_depth, channel)) / 2
        return specific_energy(next_depth, channel) - (e1 + sign * (channel.slope - sf_avg) * dx)

    return residual


def energy_residual(
    next_depth: float,
    current_depth: float,
    dx: float,
    channel,
    direction: Union[Direction, str],
) -> float:
    """Evalúa el residuo del balance de energía."""
    return residual_function(current_depth, dx, channel, direction)(next_depth)


def initial_guess(
    current_depth: float,
    direction: Union[Direction, str],
    critical_depth: float,
    normal_depth: float,
) -> float:
    """
    Estimación inicial ±5% del tirante actual.

    En sentido aguas abajo el tirante crece cuando el flujo está por encima
    del normal en régimen subcrítico (remanso) o por debajo en régimen
    supercrítico; en sentido aguas arriba la tendencia se invierte.
    """
    subcritical = current_depth >= critical_depth
    growing = (current_depth > normal_depth) == subcritical
    if _sign(direction) < 0:
        growing = not growing
    factor = 1 + GUESS_FACTOR if growing else 1 - GUESS_FACTOR
    return current_depth * factor


def _on_branch(depth: float, critical_depth: float, subcritical: bool) -> bool:
    if subcritical:
        return depth >= critical_depth * (1 - BRANCH_TOLERANCE)
    return depth <= critical_depth * (1 + BRANCH_TOLERANCE)


def _branch_bracket(
    func: Callable[[float], float],
    current_depth: float,
    critical_depth: float,
    subcritical: bool,
    max_depth: float,
) -> Optional[tuple[float, float]]:
    """Intervalo con cambio de signo en la rama pedida, o None."""
    if func(critical_depth) >= 0:
        return None

    if subcritical:
        upper = max(current_depth, critical_depth) * 1.5
        for _ in range(MAX_BRACKET_EXPANSIONS):
            if upper >= max_depth:
                upper = max_depth
                break
            if func(upper) > 0:
                return critical_depth, upper
            upper *= 2
        if func(upper) > 0:
            return critical_depth, upper
        return None

    lower = min(current_depth, critical_depth) * 0.5
    for _ in range(MAX_BRACKET_EXPANSIONS):
        if func(lower) > 0:
            return lower, critical_depth
        lower /= 2
    return None


def solve_step(
    current_depth: float,
    dx: float,
    channel,
    direction: Union[Direction, str],
    critical_depth: float,
    normal_depth: float,
    subcritical: Optional[bool] = None,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> StepResult:
    """
    Calcula el tirante en la sección siguiente.

    Args:
        current_depth: Tirante en la sección conocida
        dx: Longitud del paso (positiva)
        channel: Modelo de canal
        direction: Sentido de avance
        critical_depth: Tirante crítico
        normal_depth: Tirante normal
        subcritical: Rama de la solución; por defecto la del tirante actual
            (en y = yc, subcrítica hacia aguas arriba)
        tolerance: Tolerancia sobre el residuo de energía
        max_iterations: Iteraciones máximas por método

    Returns:
        StepResult; converged=False indica que no existe solución en la
        rama (estrangulamiento o cambio de régimen)
    """
    if current_depth <= 0:
        raise ValueError("Tirante actual debe ser > 0")
    if dx <= 0:
        raise ValueError("Longitud del paso debe ser > 0")

    if subcritical is None:
        if current_depth == critical_depth:
            subcritical = _sign(direction) < 0
        else:
            subcritical = current_depth > critical_depth

    max_depth = channel.diameter if isinstance(channel, CircularChannel) else math.inf
    func = residual_function(current_depth, dx, channel, direction)

    y = min(initial_guess(current_depth, direction, critical_depth, normal_depth), max_depth)
    best_y, best_err = y, math.inf
    previous_err = math.inf
    growth = 0
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        r = func(y)
        err = abs(r)
        if err < best_err:
            best_y, best_err = y, err
        if err < tolerance:
            if _on_branch(y, critical_depth, subcritical):
                return StepResult(y, True, iterations, "newton", r)
            break

        growth = growth + 1 if err >= previous_err else 0
        if growth >= MAX_ERROR_GROWTH:
            break
        previous_err = err

        h = max(1e-4 * y, 1e-8)
        derivative = (func(y + h) - func(y - h)) / (2 * h)
        if abs(derivative) < MIN_DERIVATIVE:
            break

        delta = -r / derivative
        limit = DAMPING_LIMIT * y
        delta = max(-limit, min(limit, delta))
        y = min(max(y + delta, 1e-9), max_depth)

    bracket = _branch_bracket(func, current_depth, critical_depth, subcritical, max_depth)
    if bracket is None:
        return StepResult(best_y, False, iterations, "bisection", func(best_y))

    root = bisect(func, bracket[0], bracket[1], tolerance, max_iterations)
    return StepResult(root.value, root.converged, iterations + root.iterations, "bisection", func(root.value))
