"""
Dépendances FastAPI pour l'injection de dépendances.
Gère la lecture de la session, les gardes de rôle et l'accès à la base de données.
"""

from typing import Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.core.guards import GuardPolicy, authorize, is_admin
from app.core.logging import log_access_denied
from app.core.responses import ApiError
from app.core.session import AuthSession, parse_user_id, session_from_token


# Schéma de sécurité Bearer Token
security = HTTPBearer(auto_error=False)


def extract_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """Token de session : en-tête Authorization en priorité, puis cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_auth_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Optional[AuthSession]:
    """
    Session de la requête courante, None si l'utilisateur n'est pas connecté.
    """
    return session_from_token(extract_session_token(request, credentials))


async def require_session(
    request: Request,
    session: Optional[AuthSession] = Depends(get_auth_session),
) -> AuthSession:
    """
    Exige une session valide.

    Raises:
        ApiError: 401 "Unauthorized" sans session
    """
    if session is None:
        log_access_denied(request.url.path, None, "session absente")
        raise ApiError("Unauthorized", 401)
    return session


async def get_current_user_id(
    request: Request,
    session: AuthSession = Depends(require_session),
) -> int:
    """
    Identifiant numérique de l'utilisateur de la session.

    Un identifiant non numérique rend la session invalide (401) plutôt que de
    produire une requête qui ne correspond à aucune ligne.
    """
    user_id = parse_user_id(session)
    if user_id is None:
        log_access_denied(request.url.path, session.user_id, "identifiant de session non numérique")
        raise ApiError("Unauthorized", 401)
    return user_id


async def require_admin(
    request: Request,
    session: AuthSession = Depends(require_session),
) -> AuthSession:
    """Exige une session ADMIN ou SUPER_ADMIN (403 sinon)."""
    if not is_admin(session):
        log_access_denied(request.url.path, session.user_id, f"rôle {session.role} non administrateur")
        raise ApiError("Acces refuse", 403)
    return session


def require_policy(policy: GuardPolicy):
    """
    Dépendance qui applique une politique de garde à la session.

    Usage:
        @router.get("/dashboard")
        def dashboard(session: AuthSession = Depends(require_policy(CAISSIER))):
            ...
    """
    async def policy_checker(
        request: Request,
        session: AuthSession = Depends(require_session),
    ) -> AuthSession:
        authorized = authorize(session, policy)
        if authorized is None:
            log_access_denied(
                request.url.path,
                session.user_id,
                f"rôle {policy.required_capability} requis",
            )
            raise ApiError("Acces refuse", 403)
        return authorized

    return policy_checker


class Pagination:
    """Paramètres de pagination communs (page, limit bornée à 50)."""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=50),
    ):
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict:
        return {
            "total": total,
            "page": self.page,
            "limit": self.limit,
            "total_pages": (total + self.limit - 1) // self.limit,
        }

    def page_of(self, items: list, total: int) -> dict:
        """Charge utile d'une liste paginée : {"items": [...], "meta": {...}}."""
        return {"items": items, "meta": self.meta(total)}


__all__ = [
    "get_db",
    "security",
    "extract_session_token",
    "get_auth_session",
    "require_session",
    "get_current_user_id",
    "require_admin",
    "require_policy",
    "Pagination",
]
