"""
Clase base para modelos de resultado.

Los resultados son inmutables: una vez producidos no se modifican, y el
cache devuelve copias independientes.
"""

from pydantic import BaseModel, ConfigDict


class ResultModel(BaseModel):
    """Modelo base inmutable para resultados del motor."""

    model_config = ConfigDict(frozen=True)
