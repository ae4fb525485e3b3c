"""
Modelo para el resultado del cálculo de perfil.
"""

from pydantic import Field

from hidrocanal.config import Direction, ProfileType, SlopeClass
from hidrocanal.models.base import ResultModel
from hidrocanal.models.jump import JumpResult, NoJump
from hidrocanal.models.point import FlowDepthPoint


class ProfileResult(ResultModel):
    """Perfil de superficie libre ordenado por progresiva."""

    points: tuple[FlowDepthPoint, ...]
    profile_type: ProfileType
    slope_class: SlopeClass
    critical_depth: float
    normal_depth: float
    is_choking: bool = False
    hydraulic_jump: JumpResult = Field(default_factory=NoJump)
    direction: Direction = Direction.DOWNSTREAM
    critical_converged: bool = True
    normal_converged: bool = True

    @property
    def has_jump(self) -> bool:
        """Indica si el perfil contiene un resalto."""
        return self.hydraulic_jump.occurs

    @property
    def stations(self) -> list[float]:
        return [p.station for p in self.points]

    @property
    def depths(self) -> list[float]:
        return [p.depth for p in self.points]
