"""
Métodos de búsqueda de raíces con presupuesto de iteraciones acotado.

Política de no convergencia: se devuelve la mejor estimación disponible
(punto medio del intervalo o último iterado) con ``converged=False``.
El llamador decide si la aproximación es aceptable.
"""

from dataclasses import dataclass
from typing import Callable

DEFAULT_TOLERANCE = 1e-4
DEFAULT_MAX_ITERATIONS = 50


@dataclass(frozen=True)
class RootResult:
    """Resultado de un método iterativo."""
    value: float
    iterations: int
    converged: bool
    method: str

    def __float__(self) -> float:
        return self.value


def bisect(
    func: Callable[[float], float],
    lower: float,
    upper: float,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> RootResult:
    """
    Método de bisección.

    Converge cuando |f(medio)| < tolerancia o el intervalo es menor que la
    tolerancia. Si el intervalo inicial no encierra un cambio de signo se
    itera igualmente y el resultado se marca como no convergido.

    Args:
        func: Función escalar
        lower: Límite inferior del intervalo
        upper: Límite superior del intervalo
        tolerance: Tolerancia sobre f y sobre el ancho del intervalo
        max_iterations: Iteraciones máximas

    Returns:
        RootResult con el punto medio final
    """
    if lower > upper:
        lower, upper = upper, lower

    f_lower = func(lower)
    f_upper = func(upper)
    if f_lower == 0:
        return RootResult(lower, 0, True, "bisection")
    if f_upper == 0:
        return RootResult(upper, 0, True, "bisection")
    bracketed = (f_lower < 0) != (f_upper < 0)

    mid = (lower + upper) / 2
    for iteration in range(1, max_iterations + 1):
        mid = (lower + upper) / 2
        f_mid = func(mid)

        if bracketed and (abs(f_mid) < tolerance or (upper - lower) / 2 < tolerance):
            return RootResult(mid, iteration, True, "bisection")

        if (f_lower < 0) != (f_mid < 0):
            upper = mid
        else:
            lower = mid
            f_lower = f_mid

    return RootResult(mid, max_iterations, False, "bisection")


def secant(
    func: Callable[[float], float],
    x0: float,
    x1: float,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    lower_limit: float = 1e-6,
    upper_limit: float = float("inf"),
) -> RootResult:
    """
    Método de la secante con iterados acotados a [lower_limit, upper_limit].

    Args:
        func: Función escalar
        x0: Primera estimación
        x1: Segunda estimación
        tolerance: Tolerancia sobre |f| y sobre el paso
        max_iterations: Iteraciones máximas
        lower_limit: Valor mínimo admisible del iterado
        upper_limit: Valor máximo admisible del iterado

    Returns:
        RootResult con el último iterado
    """
    f0 = func(x0)
    f1 = func(x1)

    for iteration in range(1, max_iterations + 1):
        if abs(f1) < tolerance:
            return RootResult(x1, iteration, True, "secant")
        if f1 == f0:
            return RootResult(x1, iteration, False, "secant")

        x2 = x1 - f1 * (x1 - x0) / (f1 - f0)
        x2 = min(max(x2, lower_limit), upper_limit)

        x0, f0 = x1, f1
        x1, f1 = x2, func(x2)

    return RootResult(x1, max_iterations, abs(f1) < tolerance, "secant")
