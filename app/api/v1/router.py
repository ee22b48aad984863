"""
Routeur principal de l'API.
Regroupe toutes les routes des différents modules.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    user,
    admin,
    admin_clients,
    admin_membres,
    admin_gestionnaires,
    admin_stock,
    admin_tontines,
    admin_credits_alimentaires,
    admin_cotisations,
    agent_terrain,
    caissier,
    comptable,
    logistique,
    magasinier,
    rpv,
    notifications,
    cron,
)

api_router = APIRouter()

# Routes d'authentification
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentification"],
)

# Espace membre
api_router.include_router(
    user.router,
    prefix="/user",
    tags=["Membre"],
)

# Administration
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Administration"],
)
api_router.include_router(
    admin_clients.router,
    prefix="/admin/clients",
    tags=["Administration - Clients"],
)
api_router.include_router(
    admin_membres.router,
    prefix="/admin/membres",
    tags=["Administration - Membres"],
)
api_router.include_router(
    admin_gestionnaires.router,
    prefix="/admin/gestionnaires",
    tags=["Administration - Gestionnaires"],
)
api_router.include_router(
    admin_stock.router,
    prefix="/admin/stock",
    tags=["Administration - Stock"],
)
api_router.include_router(
    admin_tontines.router,
    prefix="/admin/tontines",
    tags=["Administration - Tontines"],
)
api_router.include_router(
    admin_credits_alimentaires.router,
    prefix="/admin/creditsAlimentaires",
    tags=["Administration - Crédits alimentaires"],
)
api_router.include_router(
    admin_cotisations.router,
    prefix="/admin/cotisations",
    tags=["Administration - Cotisations"],
)

# Espaces des gestionnaires
api_router.include_router(
    agent_terrain.router,
    prefix="/agentTerrain",
    tags=["Agent terrain"],
)
api_router.include_router(
    caissier.router,
    prefix="/caissier",
    tags=["Caissier"],
)
api_router.include_router(
    comptable.router,
    prefix="/comptable",
    tags=["Comptable"],
)
api_router.include_router(
    logistique.router,
    prefix="/logistique",
    tags=["Logistique"],
)
api_router.include_router(
    magasinier.router,
    prefix="/magasinier",
    tags=["Magasinier"],
)
api_router.include_router(
    rpv.router,
    prefix="/rpv",
    tags=["Responsable point de vente"],
)

# Routes notifications
api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["Notifications"],
)

# Tâches planifiées
api_router.include_router(
    cron.router,
    prefix="/cron",
    tags=["Tâches planifiées"],
)
