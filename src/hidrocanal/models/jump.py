"""
Modelos para el resultado de resalto hidráulico.

El resultado es una unión etiquetada por el campo ``occurs``: ``NoJump``
cuando no hay resalto y ``HydraulicJump`` cuando lo hay.
"""

from typing import Literal, Union

from pydantic import Field

from hidrocanal.config import JumpType
from hidrocanal.models.base import ResultModel


class NoJump(ResultModel):
    """No se produce resalto hidráulico."""

    occurs: Literal[False] = False


class HydraulicJump(ResultModel):
    """Resalto hidráulico entre un tirante supercrítico y su conjugado."""

    occurs: Literal[True] = True
    station: float
    upstream_depth: float = Field(..., gt=0)
    downstream_depth: float = Field(..., gt=0)
    energy_loss: float = Field(..., ge=0)
    froude_number_1: float = Field(..., description="Froude aguas arriba")
    length: float = Field(..., ge=0, description="Longitud aproximada")
    jump_type: JumpType
    upstream_energy: float = Field(default=0.0, ge=0)
    sequent_depth_ratio: float = Field(default=0.0, ge=0)
    efficiency: float = Field(default=0.0, description="1 - pérdida / energía aguas arriba")


JumpResult = Union[NoJump, HydraulicJump]
