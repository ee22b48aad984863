"""
Module API - Points d'entrée JSON et pages de l'application.
"""

from .deps import get_auth_session, require_session, require_admin, require_policy

__all__ = [
    "get_auth_session",
    "require_session",
    "require_admin",
    "require_policy",
]
