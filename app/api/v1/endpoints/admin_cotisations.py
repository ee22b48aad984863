"""
Routes d'administration des cotisations.
"""

from datetime import datetime
from typing import Any, Optional

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession, parse_user_id
from app.models.client import Client
from app.models.cotisation import Cotisation, PeriodeCotisation, StatutCotisation
from app.models.user import RoleGestionnaire, User
from app.schemas.cotisation import CotisationCreate, CotisationResponse
from app.services.notification_service import NotificationPayload, notification_service
from app.api.deps import Pagination, require_admin


router = APIRouter()


ECHEANCES = {
    PeriodeCotisation.MENSUEL.value: relativedelta(months=1),
    PeriodeCotisation.ANNUEL.value: relativedelta(years=1),
}


def statistiques_cotisations(db: Session) -> dict:
    par_statut = dict(
        db.query(Cotisation.statut, func.count(Cotisation.id))
        .group_by(Cotisation.statut)
        .all()
    )
    collecte = db.query(func.coalesce(func.sum(Cotisation.montant), 0)).filter(
        Cotisation.statut == StatutCotisation.PAYEE.value
    ).scalar()

    return {
        "total_payees": par_statut.get(StatutCotisation.PAYEE.value, 0),
        "total_en_attente": par_statut.get(StatutCotisation.EN_ATTENTE.value, 0),
        "total_expirees": par_statut.get(StatutCotisation.EXPIREE.value, 0),
        "montant_total_collecte": collecte,
    }


@router.get(
    "",
    summary="Liste des cotisations",
)
async def list_cotisations(
    statut: Optional[str] = Query(None),
    periode: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Nom, prénom, email ou téléphone du titulaire"),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Liste paginée des cotisations avec les statistiques globales.
    Les filtres statut et periode inconnus sont ignorés.
    """
    query = db.query(Cotisation)
    if statut in {s.value for s in StatutCotisation}:
        query = query.filter(Cotisation.statut == statut)
    if periode in {p.value for p in PeriodeCotisation}:
        query = query.filter(Cotisation.periode == periode)
    if search:
        pattern = f"%{search}%"
        membres = select(User.id).where(or_(
            User.nom.ilike(pattern),
            User.prenom.ilike(pattern),
            User.email.ilike(pattern),
        ))
        clients = select(Client.id).where(or_(
            Client.nom.ilike(pattern),
            Client.prenom.ilike(pattern),
            Client.telephone.ilike(pattern),
        ))
        query = query.filter(or_(
            Cotisation.member_id.in_(membres),
            Cotisation.client_id.in_(clients),
        ))

    total = query.count()
    cotisations = query.order_by(Cotisation.created_at.desc(), Cotisation.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    data = pagination.page_of([CotisationResponse.model_validate(c) for c in cotisations], total)
    data["stats"] = statistiques_cotisations(db)
    return api_success(data)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Créer une cotisation",
)
async def create_cotisation(
    data: CotisationCreate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Crée une cotisation EN_ATTENTE pour un membre ou un client.

    Les cotisations de clients sont signalées aux agents terrain, qui les
    collectent.

    Raises:
        400 si aucun ou les deux titulaires sont fournis,
        404 si le titulaire n'existe pas
    """
    if (data.member_id is None) == (data.client_id is None):
        raise ApiError("Une cotisation appartient à un membre ou à un client", 400)

    if data.member_id is not None:
        titulaire = db.get(User, data.member_id)
        if titulaire is None:
            raise ApiError("Membre introuvable", 404)
    else:
        titulaire = db.get(Client, data.client_id)
        if titulaire is None:
            raise ApiError("Client introuvable", 404)

    periode = data.periode.value
    cotisation = Cotisation(
        member_id=data.member_id,
        client_id=data.client_id,
        montant=data.montant,
        periode=periode,
        statut=StatutCotisation.EN_ATTENTE.value,
        date_expiration=data.date_expiration or datetime.utcnow() + ECHEANCES[periode],
    )
    db.add(cotisation)
    db.flush()

    notification_service.audit_log(db, parse_user_id(session), "CREATION_COTISATION", "Cotisation", cotisation.id)
    if data.member_id is not None:
        notification_service.notify(db, [data.member_id], NotificationPayload(
            titre="Nouvelle cotisation",
            message=f"Une cotisation de {cotisation.montant} FCFA est à régler.",
            action_url="/dashboard/user/cotisations",
        ))
    else:
        notification_service.notify_gestionnaires(db, [RoleGestionnaire.AGENT_TERRAIN.value], NotificationPayload(
            titre="Cotisation à collecter",
            message=f"Cotisation de {titulaire.full_name} ({cotisation.montant} FCFA) à collecter.",
            action_url="/dashboard/agentTerrain/cotisations",
        ))
    db.commit()
    db.refresh(cotisation)

    logger.info(f"Cotisation {cotisation.id} créée par {session.user_id}")
    return api_success(CotisationResponse.model_validate(cotisation), status=status.HTTP_201_CREATED)


@router.get(
    "/{cotisation_id}",
    summary="Détails d'une cotisation",
)
async def get_cotisation(
    cotisation_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    cotisation = db.get(Cotisation, cotisation_id)
    if cotisation is None:
        raise ApiError("Cotisation introuvable", 404)
    return api_success(CotisationResponse.model_validate(cotisation))
