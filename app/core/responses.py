"""
Enveloppes de réponse JSON uniformes et exception métier.
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """
    Erreur métier renvoyée au client sous la forme {"error": message}.
    """

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def api_error(message: str, status: int = 500) -> JSONResponse:
    """Réponse d'erreur : {"error": message}."""
    return JSONResponse(content={"error": message}, status_code=status)


def api_success(data: Any, status: int = 200) -> JSONResponse:
    """Réponse de succès : {"data": data}."""
    return JSONResponse(content={"data": jsonable_encoder(data)}, status_code=status)


__all__ = ["ApiError", "api_error", "api_success"]
