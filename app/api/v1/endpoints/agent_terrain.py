"""
Routes de l'espace agent terrain - Suivi des clients, collecte des cotisations
et crédits alimentaires.
"""

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.guards import AGENT_TERRAIN
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession, parse_user_id
from app.models.client import Client
from app.models.cotisation import Cotisation, StatutCotisation
from app.models.credit_alimentaire import CreditAlimentaire, StatutCreditAlim
from app.schemas.client import ClientResponse
from app.schemas.cotisation import CotisationResponse
from app.schemas.credit_alimentaire import CreditAlimentaireResponse
from app.services.credit_alimentaire_service import credit_alimentaire_service
from app.services.notification_service import NotificationPayload, notification_service
from app.api.deps import Pagination, require_policy


router = APIRouter()


@router.get(
    "/creditsAlimentaires",
    summary="Crédits alimentaires des clients",
)
async def list_credits_alimentaires(
    statut: Optional[str] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(AGENT_TERRAIN)),
) -> Any:
    query = db.query(CreditAlimentaire).filter(CreditAlimentaire.client_id.isnot(None))
    if statut:
        query = query.filter(CreditAlimentaire.statut == statut)

    total = query.count()
    credits = query.order_by(CreditAlimentaire.created_at.desc(), CreditAlimentaire.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    actifs, restant = db.query(
        func.count(CreditAlimentaire.id),
        func.coalesce(func.sum(CreditAlimentaire.montant_restant), 0),
    ).filter(
        CreditAlimentaire.client_id.isnot(None),
        CreditAlimentaire.statut == StatutCreditAlim.ACTIF.value,
    ).one()

    data = pagination.page_of([CreditAlimentaireResponse.model_validate(c) for c in credits], total)
    data["stats"] = {"actifs": actifs, "montant_restant": restant}
    return api_success(data)


@router.get(
    "/clients",
    summary="Clients suivis",
)
async def list_clients(
    search: Optional[str] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(AGENT_TERRAIN)),
) -> Any:
    query = db.query(Client)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Client.nom.ilike(pattern),
            Client.prenom.ilike(pattern),
            Client.telephone.ilike(pattern),
        ))

    total = query.count()
    clients = query.order_by(Client.nom, Client.prenom).offset(pagination.skip).limit(pagination.limit).all()

    return api_success(pagination.page_of([ClientResponse.model_validate(c) for c in clients], total))


@router.get(
    "/cotisations",
    summary="Cotisations des clients",
)
async def list_cotisations(
    statut: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Nom, prénom ou téléphone du client"),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(AGENT_TERRAIN)),
) -> Any:
    query = db.query(Cotisation).filter(Cotisation.client_id.isnot(None))
    if statut in {s.value for s in StatutCotisation}:
        query = query.filter(Cotisation.statut == statut)
    if search:
        pattern = f"%{search}%"
        query = query.join(Client, Cotisation.client_id == Client.id).filter(or_(
            Client.nom.ilike(pattern),
            Client.prenom.ilike(pattern),
            Client.telephone.ilike(pattern),
        ))

    total = query.count()
    cotisations = query.order_by(Cotisation.created_at.desc(), Cotisation.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    par_statut = dict(
        db.query(Cotisation.statut, func.count(Cotisation.id))
        .filter(Cotisation.client_id.isnot(None))
        .group_by(Cotisation.statut)
        .all()
    )
    data = pagination.page_of([CotisationResponse.model_validate(c) for c in cotisations], total)
    data["stats"] = {
        "total_payees": par_statut.get(StatutCotisation.PAYEE.value, 0),
        "total_en_attente": par_statut.get(StatutCotisation.EN_ATTENTE.value, 0),
        "total_expirees": par_statut.get(StatutCotisation.EXPIREE.value, 0),
    }
    return api_success(data)


@router.patch(
    "/cotisations/{cotisation_id}/collect",
    summary="Collecter une cotisation sur le terrain",
)
async def collect_cotisation(
    cotisation_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(AGENT_TERRAIN)),
) -> Any:
    """
    Marque une cotisation EN_ATTENTE comme PAYEE et génère le crédit
    alimentaire correspondant.
    """
    cotisation = db.get(Cotisation, cotisation_id)
    if cotisation is None:
        raise ApiError("Cotisation introuvable", 404)
    if cotisation.statut != StatutCotisation.EN_ATTENTE.value:
        raise ApiError("Cette cotisation n'est pas en attente", 400)

    cotisation.statut = StatutCotisation.PAYEE.value
    cotisation.date_paiement = datetime.utcnow()
    credit = credit_alimentaire_service.generer_depuis_cotisation(db, cotisation)

    titulaire = cotisation.client.full_name if cotisation.client else "Client"
    notification_service.audit_log(
        db, parse_user_id(session), "COLLECTE_COTISATION_TERRAIN", "Cotisation", cotisation.id
    )
    notification_service.notify_admins(db, NotificationPayload(
        titre="Cotisation collectée (terrain)",
        message=(
            f"L'agent {session.display_name} a collecté la cotisation de {titulaire} "
            f"({cotisation.montant} FCFA)."
        ),
        action_url=f"/dashboard/admin/cotisations/{cotisation.id}",
    ))
    db.commit()
    db.refresh(cotisation)

    logger.info(f"Cotisation {cotisation.id} collectée par l'agent {session.user_id}")
    return api_success({
        "cotisation": CotisationResponse.model_validate(cotisation),
        "credit_alimentaire_genere": credit is not None,
    })
