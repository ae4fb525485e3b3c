"""Excepciones y advertencias del motor hidráulico."""


class InvalidParameterError(ValueError):
    """Parámetro de canal o de flujo ausente o no positivo."""

    def __init__(self, message: str, errors: tuple[str, ...] = ()):
        super().__init__(message)
        self.errors = tuple(errors)


class UnsupportedShapeError(TypeError):
    """Operación invocada para una sección que no la define."""


class ConvergenceWarning(UserWarning):
    """Un método iterativo agotó sus iteraciones sin alcanzar la tolerancia."""
