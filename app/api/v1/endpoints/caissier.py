"""
Routes de l'espace caissier - Ventes contre crédit alimentaire.
"""

from datetime import datetime, time
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.guards import CAISSIER
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession, parse_user_id
from app.models.credit_alimentaire import CreditAlimentaire, VenteCreditAlimentaire
from app.models.user import RoleGestionnaire
from app.schemas.credit_alimentaire import VenteCaissierCreate, VenteResponse
from app.services.credit_alimentaire_service import credit_alimentaire_service
from app.services.dashboard_service import dashboard_service
from app.services.notification_service import NotificationPayload, notification_service
from app.api.deps import Pagination, require_policy


router = APIRouter()

# Destinataires d'une vente en caisse (en plus des admins)
ROLES_VENTE = [
    RoleGestionnaire.RESPONSABLE_POINT_DE_VENTE.value,
    RoleGestionnaire.MAGAZINIER.value,
    RoleGestionnaire.COMPTABLE.value,
]


@router.get(
    "/dashboard",
    summary="Tableau de bord du caissier",
)
async def get_dashboard(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(CAISSIER)),
) -> Any:
    """Ventes du jour du point de vente et du caissier connecté."""
    vendeur_id = parse_user_id(session)
    return api_success({
        "ventes_du_jour": dashboard_service.ventes_du_jour(db),
        "mes_ventes_du_jour": (
            dashboard_service.ventes_du_jour(db, vendeur_id) if vendeur_id is not None else None
        ),
    })


@router.get(
    "/ventes",
    summary="Liste des ventes",
)
async def list_ventes(
    aujourd_hui: bool = Query(False, description="Uniquement les ventes du jour"),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(CAISSIER)),
) -> Any:
    query = db.query(VenteCreditAlimentaire)
    if aujourd_hui:
        debut = datetime.combine(datetime.utcnow().date(), time.min)
        query = query.filter(VenteCreditAlimentaire.created_at >= debut)

    total = query.count()
    ventes = query.order_by(VenteCreditAlimentaire.created_at.desc(), VenteCreditAlimentaire.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    return api_success(pagination.page_of([VenteResponse.model_validate(v) for v in ventes], total))


@router.post(
    "/ventes",
    status_code=status.HTTP_201_CREATED,
    summary="Enregistrer une vente",
)
async def create_vente(
    data: VenteCaissierCreate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(CAISSIER)),
) -> Any:
    """
    Enregistre une vente contre le crédit alimentaire d'un membre ou d'un client.

    Le crédit doit être ACTIF, le stock et le solde du crédit suffisants.
    """
    credit = db.get(CreditAlimentaire, data.credit_alimentaire_id)
    if credit is None:
        raise ApiError("Crédit alimentaire introuvable", 404)

    vendeur_id = parse_user_id(session)
    vente = credit_alimentaire_service.consommer(
        db, credit, data.produit_id, data.quantite, vendeur_id=vendeur_id
    )

    notification_service.audit_log(db, vendeur_id, "VENTE_CAISSIER", "VenteCreditAlimentaire", vente.id)
    notification_service.notify_roles(db, ROLES_VENTE, NotificationPayload(
        titre="Nouvelle vente",
        message=(
            f"{session.display_name} a vendu {vente.quantite} x {vente.produit.nom} "
            f"({vente.montant} FCFA) sur le crédit alimentaire #{credit.id}."
        ),
        action_url=f"/dashboard/admin/creditsAlimentaires/{credit.id}",
    ))
    db.commit()
    db.refresh(vente)

    logger.info(f"Vente {vente.id} enregistrée par le caissier {session.user_id}")
    return api_success(VenteResponse.model_validate(vente), status=status.HTTP_201_CREATED)
