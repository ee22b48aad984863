"""
Module core - Fonctionnalités centrales de l'application.
Contient la sécurité, les sessions, les gardes de rôle, le logging
et les enveloppes de réponse.
"""

from .security import (
    create_access_token,
    verify_password,
    get_password_hash,
    verify_token,
)
from .logging import setup_logging, logger
from .responses import ApiError, api_error, api_success

__all__ = [
    "create_access_token",
    "verify_password",
    "get_password_hash",
    "verify_token",
    "setup_logging",
    "logger",
    "ApiError",
    "api_error",
    "api_success",
]
