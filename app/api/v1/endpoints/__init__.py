"""
Endpoints de l'API.
"""

from . import (
    auth,
    user,
    admin,
    admin_clients,
    admin_membres,
    admin_gestionnaires,
    admin_stock,
    admin_tontines,
    admin_credits_alimentaires,
    agent_terrain,
    caissier,
    comptable,
    logistique,
    magasinier,
    rpv,
    notifications,
    cron,
)

__all__ = [
    "auth",
    "user",
    "admin",
    "admin_clients",
    "admin_membres",
    "admin_gestionnaires",
    "admin_stock",
    "admin_tontines",
    "admin_credits_alimentaires",
    "agent_terrain",
    "caissier",
    "comptable",
    "logistique",
    "magasinier",
    "rpv",
    "notifications",
    "cron",
]
