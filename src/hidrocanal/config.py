"""Modelos Pydantic para configuración y validación de datos."""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class UnitSystem(str, Enum):
    """Sistema de unidades."""
    METRIC = "metric"
    IMPERIAL = "imperial"


class ChannelShape(str, Enum):
    """Formas de sección transversal soportadas."""
    RECTANGULAR = "rectangular"
    TRAPEZOIDAL = "trapezoidal"
    TRIANGULAR = "triangular"
    CIRCULAR = "circular"


class SlopeClass(str, Enum):
    """Clasificación de la pendiente del canal."""
    MILD = "mild"
    CRITICAL = "critical"
    STEEP = "steep"


class ProfileType(str, Enum):
    """Tipos de perfil de flujo gradualmente variado."""
    M1 = "M1"
    M2 = "M2"
    M3 = "M3"
    S1 = "S1"
    S2 = "S2"
    S3 = "S3"
    C1 = "C1"
    C2 = "C2"
    C3 = "C3"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class FlowRegime(str, Enum):
    """Régimen de flujo según número de Froude."""
    SUBCRITICAL = "subcritical"
    CRITICAL = "critical"
    SUPERCRITICAL = "supercritical"


class JumpType(str, Enum):
    """Clasificación del resalto hidráulico según Froude aguas arriba."""
    UNDULAR = "undular"
    WEAK = "weak"
    OSCILLATING = "oscillating"
    STEADY = "steady"
    STRONG = "strong"


class Direction(str, Enum):
    """Sentido de avance del cálculo."""
    UPSTREAM = "upstream"
    DOWNSTREAM = "downstream"


class NormalDepthMethod(str, Enum):
    """Métodos de cálculo del tirante normal."""
    BISECTION = "bisection"
    SECANT = "secant"


# ============================================================================
# Modelos de Canal
# ============================================================================

class ChannelBase(BaseModel):
    """Parámetros de flujo comunes a todas las secciones."""
    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    discharge: float = Field(..., gt=0, description="Caudal (m³/s o ft³/s)")
    manning_n: float = Field(..., gt=0, description="Coeficiente de Manning")
    slope: float = Field(..., gt=0, description="Pendiente longitudinal (m/m)")
    length: float = Field(..., gt=0, description="Longitud del tramo (m o ft)")
    units: UnitSystem = Field(default=UnitSystem.METRIC, description="Sistema de unidades")
    upstream_depth: Optional[float] = Field(
        default=None, gt=0, description="Tirante impuesto aguas arriba"
    )
    downstream_depth: Optional[float] = Field(
        default=None, gt=0, description="Tirante impuesto aguas abajo"
    )

    @property
    def has_boundary_depth(self) -> bool:
        """Indica si se impuso algún tirante de borde."""
        return self.upstream_depth is not None or self.downstream_depth is not None


class RectangularChannel(ChannelBase):
    """Canal de sección rectangular."""
    shape: Literal["rectangular"] = "rectangular"
    bottom_width: float = Field(..., gt=0, description="Ancho de fondo")


class TrapezoidalChannel(ChannelBase):
    """Canal de sección trapezoidal (taludes simétricos z:1)."""
    shape: Literal["trapezoidal"] = "trapezoidal"
    bottom_width: float = Field(..., gt=0, description="Ancho de fondo")
    side_slope: float = Field(..., gt=0, description="Talud horizontal:vertical")


class TriangularChannel(ChannelBase):
    """Canal de sección triangular (taludes simétricos z:1)."""
    shape: Literal["triangular"] = "triangular"
    side_slope: float = Field(..., gt=0, description="Talud horizontal:vertical")


class CircularChannel(ChannelBase):
    """Conducto circular con superficie libre."""
    shape: Literal["circular"] = "circular"
    diameter: float = Field(..., gt=0, description="Diámetro interior")

    @model_validator(mode="after")
    def check_boundary_depths(self) -> "CircularChannel":
        for name in ("upstream_depth", "downstream_depth"):
            value = getattr(self, name)
            if value is not None and value >= self.diameter:
                raise ValueError(f"{name} debe ser menor que el diámetro ({self.diameter})")
        return self


ChannelParams = Annotated[
    Union[RectangularChannel, TrapezoidalChannel, TriangularChannel, CircularChannel],
    Field(discriminator="shape"),
]

CHANNEL_MODELS = (RectangularChannel, TrapezoidalChannel, TriangularChannel, CircularChannel)

_channel_adapter = TypeAdapter(ChannelParams)


def parse_channel(data: dict) -> ChannelParams:
    """
    Construye un canal a partir de un diccionario.

    El campo "shape" selecciona el modelo; los campos geométricos que no
    corresponden a la forma se rechazan.

    Args:
        data: Diccionario con los parámetros del canal

    Returns:
        Modelo de canal validado

    Raises:
        pydantic.ValidationError: Si falta un campo o un valor no es positivo
    """
    return _channel_adapter.validate_python(data)


# ============================================================================
# Opciones de Cálculo
# ============================================================================

HIGH_RESOLUTION_STEPS = 200


class ProfileOptions(BaseModel):
    """Opciones del cálculo de perfil."""
    model_config = ConfigDict(frozen=True)

    resolution: int = Field(default=100, ge=2, le=10000, description="Número de pasos")
    bidirectional: bool = Field(default=False, description="Cálculo en ambos sentidos")
    detect_jumps: bool = Field(default=True, description="Detectar resalto hidráulico")
    high_resolution: bool = Field(default=False, description="Forzar paso fino")
    adaptive: bool = Field(default=False, description="Paso fino solo en tramos de cambio rápido")

    @property
    def num_steps(self) -> int:
        """Número efectivo de pasos."""
        if self.high_resolution:
            return max(self.resolution, HIGH_RESOLUTION_STEPS)
        return self.resolution


class CacheConfig(BaseModel):
    """Configuración del cache de resultados."""
    enabled: bool = True
    ttl_s: float = Field(default=600.0, gt=0, description="Tiempo de vida (s)")
    max_size: int = Field(default=100, ge=1, description="Entradas máximas por tipo")
    precision: int = Field(default=4, ge=0, le=12, description="Decimales de la clave")
