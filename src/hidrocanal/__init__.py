"""
HidroCanal - Perfiles de flujo gradualmente variado en canales abiertos.

Calcula el perfil de superficie libre por el método del paso estándar
para secciones rectangulares, trapezoidales, triangulares y circulares,
junto con tirante crítico, tirante normal, clasificación de pendiente y
resalto hidráulico.
"""

__version__ = "0.1.0"

from hidrocanal.config import (
    ChannelParams,
    CircularChannel,
    Direction,
    FlowRegime,
    JumpType,
    ProfileOptions,
    ProfileType,
    RectangularChannel,
    SlopeClass,
    TrapezoidalChannel,
    TriangularChannel,
    UnitSystem,
    parse_channel,
)
from hidrocanal.engine import (
    ValidationResult,
    compute_critical_depth,
    compute_flow_profiles,
    compute_normal_depth,
    compute_profile,
    validate,
)
from hidrocanal.cache import ResultCache, cache_stats, clear_cache, configure_cache
from hidrocanal.exceptions import ConvergenceWarning, InvalidParameterError, UnsupportedShapeError
from hidrocanal.models import FlowDepthPoint, HydraulicJump, NoJump, ProfileResult

__all__ = [
    # Parámetros
    "ChannelParams",
    "RectangularChannel",
    "TrapezoidalChannel",
    "TriangularChannel",
    "CircularChannel",
    "ProfileOptions",
    "parse_channel",
    "UnitSystem",
    # Clasificaciones
    "SlopeClass",
    "ProfileType",
    "FlowRegime",
    "JumpType",
    "Direction",
    # Motor
    "compute_profile",
    "compute_critical_depth",
    "compute_normal_depth",
    "compute_flow_profiles",
    "validate",
    "ValidationResult",
    # Cache
    "ResultCache",
    "clear_cache",
    "configure_cache",
    "cache_stats",
    # Errores
    "InvalidParameterError",
    "UnsupportedShapeError",
    "ConvergenceWarning",
    # Resultados
    "FlowDepthPoint",
    "HydraulicJump",
    "NoJump",
    "ProfileResult",
]
