"""
Sessions d'authentification.

Une session est l'identité d'un utilisateur connecté telle que portée par son
token : identifiant, rôle principal et rôle de gestionnaire éventuel. Elle est
créée à la connexion et n'est jamais modifiée pendant une requête.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.core.security import create_access_token, verify_token


class AuthSession(BaseModel):
    """Session d'un utilisateur authentifié."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: Optional[str] = None
    gestionnaire_role: Optional[str] = None
    nom: str = ""
    prenom: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.prenom} {self.nom}".strip()


def issue_session_token(user) -> str:
    """Crée le token de session d'un utilisateur (modèle User)."""
    return create_access_token(
        subject=user.id,
        role=user.role,
        gestionnaire_role=user.gestionnaire_role,
        extra_claims={"nom": user.nom, "prenom": user.prenom},
    )


def session_from_token(token: Optional[str]) -> Optional[AuthSession]:
    """
    Reconstruit la session portée par un token.

    Returns:
        La session, ou None si le token est absent, invalide ou expiré
    """
    if not token:
        return None

    payload = verify_token(token, token_type="access")
    if payload is None or not payload.get("sub"):
        return None

    return AuthSession(
        user_id=payload["sub"],
        role=payload.get("role"),
        gestionnaire_role=payload.get("gestionnaire_role"),
        nom=payload.get("nom") or "",
        prenom=payload.get("prenom") or "",
    )


def parse_user_id(session: AuthSession) -> Optional[int]:
    """Identifiant numérique de l'utilisateur de la session, None s'il n'est pas numérique."""
    try:
        return int(session.user_id)
    except (TypeError, ValueError):
        return None
