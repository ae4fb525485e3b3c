"""
Modelo para un punto del perfil de superficie libre.
"""

from pydantic import Field

from hidrocanal.models.base import ResultModel


class FlowDepthPoint(ResultModel):
    """Estado hidráulico en una progresiva del canal."""

    station: float = Field(..., description="Progresiva desde aguas arriba")
    depth: float = Field(..., ge=0)
    velocity: float = Field(..., ge=0)
    froude_number: float = Field(..., ge=0)
    specific_energy: float = Field(..., ge=0)
    critical_depth: float = Field(..., ge=0)
    normal_depth: float = Field(..., ge=0)
