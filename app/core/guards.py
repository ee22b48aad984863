"""
Contrôle d'accès par rôle.

Chaque espace de gestionnaire est protégé par une politique : le rôle de
gestionnaire exigé, et si les administrateurs (ADMIN, SUPER_ADMIN) y entrent
d'office. Les gardes reçoivent la session explicitement et la renvoient telle
quelle si elle est autorisée, None sinon.
"""

from dataclasses import dataclass
from typing import Optional

from app.core.session import AuthSession
from app.models.user import ADMIN_ROLES, RoleGestionnaire


@dataclass(frozen=True)
class GuardPolicy:
    """Politique d'accès d'un espace de gestionnaire."""
    required_capability: str
    allow_admin: bool = True


# Les espaces opérationnels (terrain, logistique, magasin) n'ont pas d'accès admin.
AGENT_TERRAIN = GuardPolicy(RoleGestionnaire.AGENT_TERRAIN.value, allow_admin=False)
CAISSIER = GuardPolicy(RoleGestionnaire.CAISSIER.value)
COMPTABLE = GuardPolicy(RoleGestionnaire.COMPTABLE.value)
LOGISTIQUE = GuardPolicy(RoleGestionnaire.AGENT_LOGISTIQUE_APPROVISIONNEMENT.value, allow_admin=False)
MAGASINIER = GuardPolicy(RoleGestionnaire.MAGAZINIER.value, allow_admin=False)
RPV = GuardPolicy(RoleGestionnaire.RESPONSABLE_POINT_DE_VENTE.value)


def is_admin(session: Optional[AuthSession]) -> bool:
    """Vrai pour une session ADMIN ou SUPER_ADMIN."""
    return session is not None and session.role in ADMIN_ROLES


def is_authorized(session: Optional[AuthSession], policy: GuardPolicy) -> bool:
    """
    Vérifie qu'une session satisfait une politique d'accès.

    Args:
        session: Session de la requête (None si anonyme)
        policy: Politique de l'espace demandé

    Returns:
        True si le rôle de gestionnaire correspond exactement, ou si la
        politique admet les administrateurs et que la session en est un
    """
    if session is None:
        return False
    if policy.allow_admin and is_admin(session):
        return True
    return session.gestionnaire_role == policy.required_capability


def authorize(session: Optional[AuthSession], policy: GuardPolicy) -> Optional[AuthSession]:
    """Renvoie la session inchangée si elle est autorisée, None sinon."""
    return session if is_authorized(session, policy) else None


def get_agent_terrain_session(session: Optional[AuthSession]) -> Optional[AuthSession]:
    return authorize(session, AGENT_TERRAIN)


def get_caissier_session(session: Optional[AuthSession]) -> Optional[AuthSession]:
    return authorize(session, CAISSIER)


def get_comptable_session(session: Optional[AuthSession]) -> Optional[AuthSession]:
    return authorize(session, COMPTABLE)


def get_logistique_session(session: Optional[AuthSession]) -> Optional[AuthSession]:
    return authorize(session, LOGISTIQUE)


def get_magasinier_session(session: Optional[AuthSession]) -> Optional[AuthSession]:
    return authorize(session, MAGASINIER)


def get_rpv_session(session: Optional[AuthSession]) -> Optional[AuthSession]:
    return authorize(session, RPV)


__all__ = [
    "GuardPolicy",
    "AGENT_TERRAIN",
    "CAISSIER",
    "COMPTABLE",
    "LOGISTIQUE",
    "MAGASINIER",
    "RPV",
    "is_admin",
    "is_authorized",
    "authorize",
    "get_agent_terrain_session",
    "get_caissier_session",
    "get_comptable_session",
    "get_logistique_session",
    "get_magasinier_session",
    "get_rpv_session",
]
