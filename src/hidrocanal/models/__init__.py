"""
Modelos de resultado de HidroCanal.

Este módulo contiene los modelos Pydantic que produce el motor de cálculo.
"""

from hidrocanal.models.base import ResultModel
from hidrocanal.models.point import FlowDepthPoint
from hidrocanal.models.jump import HydraulicJump, JumpResult, NoJump
from hidrocanal.models.profile import ProfileResult

__all__ = [
    # Clase base
    "ResultModel",
    # Puntos del perfil
    "FlowDepthPoint",
    # Resalto hidráulico
    "HydraulicJump",
    "NoJump",
    "JumpResult",
    # Perfil completo
    "ProfileResult",
]
