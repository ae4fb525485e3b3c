"""
Interfaz del motor de cálculo.

Funciones de entrada:
- compute_profile: perfil de superficie libre completo
- compute_critical_depth / compute_normal_depth: tirantes de referencia
- validate: validación previa con el mismo criterio que compute_profile
- compute_flow_profiles: un perfil por caudal con la misma geometría

Los parámetros pueden pasarse como modelo de canal o como diccionario.
Los datos inválidos levantan InvalidParameterError antes de ejecutar
cualquier método numérico.
"""

import logging
import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from pydantic import ValidationError

from hidrocanal.cache import ResultCache, get_cache
from hidrocanal.config import (
    CHANNEL_MODELS,
    NormalDepthMethod,
    ProfileOptions,
    parse_channel,
)
from hidrocanal.core.critical import solve_critical_depth
from hidrocanal.core.normal import solve_normal_depth
from hidrocanal.core.profile import (
    ProgressCallback,
    adaptive_resolution_profile,
    bidirectional_profile,
    high_resolution_profile,
    water_surface_profile,
)
from hidrocanal.core.solvers import RootResult
from hidrocanal.exceptions import ConvergenceWarning, InvalidParameterError, UnsupportedShapeError
from hidrocanal.models import ProfileResult

logger = logging.getLogger(__name__)

# Tramos de esta longitud o mayores no se guardan en cache
MAX_CACHED_LENGTH = 5000.0

_ERROR_MESSAGES = {
    "missing": "campo requerido",
    "extra_forbidden": "campo no admitido para esta sección",
    "union_tag_not_found": "falta la forma de la sección (shape)",
    "union_tag_invalid": "forma de sección no soportada",
    "finite_number": "debe ser un número finito",
    "float_parsing": "debe ser numérico",
    "float_type": "debe ser numérico",
}


@dataclass(frozen=True)
class ValidationResult:
    """Resultado de validate()."""
    valid: bool
    message: Optional[str] = None
    errors: tuple[str, ...] = ()


def _describe(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ())]
    # El primer elemento es la etiqueta de la unión cuando el error es de un campo
    if len(loc) > 1:
        loc = loc[1:]
    field = ".".join(loc) or "shape"

    kind = error.get("type", "")
    ctx = error.get("ctx") or {}
    if kind == "greater_than":
        text = f"debe ser > {ctx.get('gt')}"
    elif kind in _ERROR_MESSAGES:
        text = _ERROR_MESSAGES[kind]
    else:
        text = error.get("msg", "valor inválido")
    return f"{field}: {text}"


def _invalid(exc: ValidationError) -> InvalidParameterError:
    errors = [_describe(e) for e in exc.errors()]
    return InvalidParameterError("Parámetros inválidos: " + "; ".join(errors), tuple(errors))


def as_channel(params):
    """
    Valida y convierte los parámetros a un modelo de canal.

    Args:
        params: Modelo de canal o diccionario

    Returns:
        Modelo de canal validado

    Raises:
        InvalidParameterError: Si algún campo falta o no es válido
        UnsupportedShapeError: Si params no es un modelo ni un diccionario
    """
    if isinstance(params, CHANNEL_MODELS):
        data = params.model_dump()
    elif isinstance(params, Mapping):
        data = dict(params)
    else:
        raise UnsupportedShapeError(
            f"Parámetros de canal no soportados: {type(params).__name__}"
        )

    try:
        return parse_channel(data)
    except ValidationError as exc:
        raise _invalid(exc) from None


def _as_options(options) -> ProfileOptions:
    if options is None:
        return ProfileOptions()
    if isinstance(options, ProfileOptions):
        return options
    try:
        return ProfileOptions(**options)
    except ValidationError as exc:
        raise _invalid(exc) from None


def validate(params) -> ValidationResult:
    """
    Valida parámetros de canal sin ejecutar cálculos.

    Args:
        params: Modelo de canal o diccionario

    Returns:
        ValidationResult con valid=False y mensaje si hay errores
    """
    try:
        as_channel(params)
    except InvalidParameterError as exc:
        return ValidationResult(False, str(exc), exc.errors)
    return ValidationResult(True)


def should_use_cache(channel) -> bool:
    """Los tirantes de borde impuestos y los tramos largos no se guardan en cache."""
    return not channel.has_boundary_depth and channel.length < MAX_CACHED_LENGTH


def _warn_if_approximate(result: RootResult, name: str) -> None:
    if not result.converged:
        warnings.warn(
            f"{name} no convergió en {result.iterations} iteraciones "
            f"({result.method}); se usa la mejor estimación {result.value:.4f}",
            ConvergenceWarning,
            stacklevel=3,
        )


def _critical_result(channel, cache: Optional[ResultCache]) -> RootResult:
    result = cache.get_critical(channel) if cache is not None else None
    if result is None:
        result = solve_critical_depth(channel)
        if cache is not None:
            cache.put_critical(channel, result)
    _warn_if_approximate(result, "Tirante crítico")
    return result


def _normal_result(
    channel,
    cache: Optional[ResultCache],
    method: NormalDepthMethod = NormalDepthMethod.BISECTION,
) -> RootResult:
    if method != NormalDepthMethod.BISECTION:
        cache = None
    result = cache.get_normal(channel) if cache is not None else None
    if result is None:
        result = solve_normal_depth(channel, method)
        if cache is not None:
            cache.put_normal(channel, result)
    _warn_if_approximate(result, "Tirante normal")
    return result


def compute_critical_depth(
    params,
    cache: Optional[ResultCache] = None,
    use_cache: bool = True,
) -> float:
    """
    Calcula el tirante crítico.

    Args:
        params: Modelo de canal o diccionario
        cache: Cache a usar (por defecto el compartido)
        use_cache: Si False no consulta ni guarda en cache

    Returns:
        Tirante crítico

    Raises:
        InvalidParameterError: Si los parámetros no son válidos
    """
    channel = as_channel(params)
    if use_cache and cache is None:
        cache = get_cache()
    return _critical_result(channel, cache if use_cache else None).value


def compute_normal_depth(
    params,
    method: Union[NormalDepthMethod, str] = NormalDepthMethod.BISECTION,
    cache: Optional[ResultCache] = None,
    use_cache: bool = True,
) -> float:
    """
    Calcula el tirante normal.

    Args:
        params: Modelo de canal o diccionario
        method: "bisection" o "secant" (solo la bisección usa cache)
        cache: Cache a usar (por defecto el compartido)
        use_cache: Si False no consulta ni guarda en cache

    Returns:
        Tirante normal

    Raises:
        InvalidParameterError: Si los parámetros no son válidos
        ValueError: Si el método no existe
    """
    channel = as_channel(params)
    try:
        method = NormalDepthMethod(method)
    except ValueError:
        raise ValueError(f"Método desconocido: {method}") from None
    if use_cache and cache is None:
        cache = get_cache()
    return _normal_result(channel, cache if use_cache else None, method).value


def compute_profile(
    params,
    options: Union[ProfileOptions, Mapping, None] = None,
    progress: Optional[ProgressCallback] = None,
    cache: Optional[ResultCache] = None,
    use_cache: Optional[bool] = None,
) -> ProfileResult:
    """
    Calcula el perfil de superficie libre.

    Args:
        params: Modelo de canal o diccionario
        options: ProfileOptions o diccionario (resolution, bidirectional,
            detect_jumps, high_resolution, adaptive)
        progress: Función llamada con el avance (0-100); el 100 se informa
            una sola vez y solo si el perfil se completa
        cache: Cache a usar (por defecto el compartido)
        use_cache: Forzar uso (True) o no (False) del cache de perfiles;
            por defecto se decide con should_use_cache

    Returns:
        ProfileResult; is_choking indica un perfil incompleto

    Raises:
        InvalidParameterError: Si los parámetros u opciones no son válidos
    """
    channel = as_channel(params)
    options = _as_options(options)

    if cache is None:
        cache = get_cache()
    depth_cache = None if use_cache is False else cache
    if use_cache is None:
        use_cache = should_use_cache(channel)

    if use_cache:
        cached = cache.get_profile(channel, options)
        if cached is not None:
            logger.debug("Perfil obtenido del cache")
            if progress is not None and not cached.is_choking:
                progress(100.0)
            return cached

    critical = _critical_result(channel, depth_cache)
    normal = _normal_result(channel, depth_cache)

    if options.bidirectional:
        result = bidirectional_profile(
            channel, options.num_steps, options.detect_jumps, progress, critical, normal
        )
    elif options.adaptive:
        result = adaptive_resolution_profile(
            channel, options.num_steps, options.detect_jumps, progress, critical, normal
        )
    elif options.high_resolution:
        result = high_resolution_profile(
            channel, options.resolution, options.detect_jumps, progress, critical, normal
        )
    else:
        result = water_surface_profile(
            channel, options.num_steps, options.detect_jumps, progress, critical, normal
        )

    if result.is_choking:
        logger.info("Perfil incompleto: estrangulamiento (%d puntos)", len(result.points))
    elif progress is not None:
        progress(100.0)
    if use_cache:
        cache.put_profile(channel, options, result)
    return result


def compute_flow_profiles(
    params,
    discharges: Sequence[float],
    options: Union[ProfileOptions, Mapping, None] = None,
    cache: Optional[ResultCache] = None,
) -> list[ProfileResult]:
    """
    Calcula un perfil por cada caudal, con la misma geometría y condiciones.

    Args:
        params: Modelo de canal o diccionario (el caudal se reemplaza)
        discharges: Caudales a evaluar
        options: Opciones de cálculo
        cache: Cache a usar

    Returns:
        Lista de ProfileResult en el orden de los caudales

    Raises:
        InvalidParameterError: Si algún caudal no es válido
    """
    channel = as_channel(params)
    base = channel.model_dump()
    return [
        compute_profile({**base, "discharge": q}, options, cache=cache)
        for q in discharges
    ]
