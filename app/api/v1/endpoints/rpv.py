"""
Routes de l'espace responsable du point de vente.
"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.guards import RPV
from app.core.responses import api_success
from app.core.session import AuthSession
from app.services.dashboard_service import dashboard_service
from app.api.deps import require_policy


router = APIRouter()


@router.get(
    "/dashboard",
    summary="Tableau de bord du point de vente",
)
async def get_dashboard(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(RPV)),
) -> Any:
    """Alertes de stock, ventes du jour et effectif de l'équipe."""
    return api_success(dashboard_service.get_dashboard_rpv(db))
