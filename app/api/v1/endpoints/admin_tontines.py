"""
Routes d'administration des tontines.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession, parse_user_id
from app.models.finance import Wallet
from app.models.tontine import StatutCycle, StatutTontine, Tontine, TontineCycle
from app.schemas.credit_alimentaire import CreditAlimentaireResponse
from app.schemas.tontine import (
    TontineCreate,
    TontineCycleResponse,
    TontineDetailResponse,
    TontineResponse,
)
from app.services.credit_alimentaire_service import credit_alimentaire_service
from app.services.notification_service import NotificationPayload, notification_service
from app.api.deps import Pagination, require_admin


router = APIRouter()


@router.get(
    "",
    summary="Liste des tontines",
)
async def list_tontines(
    statut: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    query = db.query(Tontine)
    if statut:
        query = query.filter(Tontine.statut == statut)
    if search:
        query = query.filter(Tontine.nom.ilike(f"%{search}%"))

    total = query.count()
    tontines = query.order_by(Tontine.created_at.desc(), Tontine.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    return api_success(pagination.page_of(
        [TontineResponse.model_validate(t) for t in tontines],
        total,
    ))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Créer une tontine",
)
async def create_tontine(
    data: TontineCreate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    tontine = Tontine(
        nom=data.nom,
        description=data.description,
        montant_cycle=data.montant_cycle,
        frequence=data.frequence.value,
        statut=data.statut.value,
        date_debut=data.date_debut or datetime.utcnow(),
        date_fin=data.date_fin,
    )
    db.add(tontine)
    db.flush()

    admin_id = parse_user_id(session)
    notification_service.audit_log(db, admin_id, "CREATION_TONTINE", "Tontine", tontine.id)
    notification_service.notify(db, [admin_id], NotificationPayload(
        titre="Tontine créée",
        message=f'La tontine "{tontine.nom}" a été créée avec succès.',
        action_url=f"/dashboard/admin/tontines/{tontine.id}",
    ))
    db.commit()
    db.refresh(tontine)

    logger.info(f"Tontine {tontine.id} créée par {session.user_id}")
    return api_success(TontineResponse.model_validate(tontine), status=status.HTTP_201_CREATED)


@router.get(
    "/{tontine_id}",
    summary="Détails d'une tontine",
)
async def get_tontine(
    tontine_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    tontine = db.get(Tontine, tontine_id)
    if tontine is None:
        raise ApiError("Tontine introuvable", 404)
    return api_success(TontineDetailResponse.model_validate(tontine))


@router.get(
    "/{tontine_id}/cycles",
    summary="Cycles d'une tontine",
)
async def list_cycles(
    tontine_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    if db.get(Tontine, tontine_id) is None:
        raise ApiError("Tontine introuvable", 404)

    cycles = db.query(TontineCycle).filter(
        TontineCycle.tontine_id == tontine_id
    ).order_by(TontineCycle.numero.desc()).all()
    return api_success([TontineCycleResponse.model_validate(c) for c in cycles])


@router.post(
    "/{tontine_id}/cycles",
    summary="Démarrer le cycle suivant",
)
async def start_cycle(
    tontine_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Démarre le cycle suivant d'une tontine ACTIVE.

    Le bénéficiaire est le membre actif dont l'ordre de passage vaut le
    numéro du cycle, et le pot vaut montant_cycle x membres actifs.
    Quand tous les membres actifs ont reçu le pot, la tontine passe à
    TERMINEE au lieu d'ouvrir un cycle.

    Raises:
        404 si la tontine n'existe pas,
        400 si elle n'est pas active, sans membre actif, avec un cycle
        en cours ou des ordres de passage incomplets
    """
    tontine = db.get(Tontine, tontine_id)
    if tontine is None:
        raise ApiError("Tontine introuvable", 404)
    if tontine.statut != StatutTontine.ACTIVE.value:
        raise ApiError("La tontine n'est pas active", 400)

    actifs = tontine.membres_actifs
    if not actifs:
        raise ApiError("La tontine n'a aucun membre actif", 400)

    en_cours = db.query(TontineCycle).filter(
        TontineCycle.tontine_id == tontine_id,
        TontineCycle.statut == StatutCycle.EN_COURS.value,
    ).first()
    if en_cours is not None:
        raise ApiError("Un cycle est déjà en cours", 400)

    ordres = sorted(m.ordre for m in actifs if m.ordre is not None)
    if ordres != list(range(1, len(actifs) + 1)):
        raise ApiError(
            f"Les ordres de passage des membres actifs doivent aller de 1 à {len(actifs)} sans doublon",
            400,
        )

    dernier = db.query(func.max(TontineCycle.numero)).filter(
        TontineCycle.tontine_id == tontine_id
    ).scalar() or 0
    numero = dernier + 1
    admin_id = parse_user_id(session)

    if numero > len(actifs):
        tontine.statut = StatutTontine.TERMINEE.value
        notification_service.audit_log(db, admin_id, "CLOTURE_TONTINE", "Tontine", tontine.id)
        notification_service.notify_admins(db, NotificationPayload(
            titre="Tontine terminée",
            message=f'Tous les membres actifs de la tontine "{tontine.nom}" ont reçu le pot.',
            action_url=f"/dashboard/admin/tontines/{tontine.id}",
        ))
        db.commit()
        logger.info(f"Tontine {tontine.id} terminée par {session.user_id}")
        return api_success({"message": "La tontine est terminée", "tontine_terminee": True})

    beneficiaire = next(m for m in actifs if m.ordre == numero)
    cycle = TontineCycle(
        tontine_id=tontine.id,
        numero=numero,
        beneficiaire_id=beneficiaire.member_id,
        montant_pot=Decimal(tontine.montant_cycle) * len(actifs),
        statut=StatutCycle.EN_COURS.value,
    )
    db.add(cycle)
    db.flush()

    notification_service.audit_log(db, admin_id, "DEMARRAGE_CYCLE_TONTINE", "TontineCycle", cycle.id)
    notification_service.notify_admins(db, NotificationPayload(
        titre=f"Cycle {numero} démarré",
        message=(
            f'Le cycle {numero} de la tontine "{tontine.nom}" a démarré. '
            f"Bénéficiaire : {beneficiaire.member.full_name}. Pot : {cycle.montant_pot} FCFA."
        ),
        action_url=f"/dashboard/admin/tontines/{tontine.id}",
    ))
    db.commit()
    db.refresh(cycle)

    logger.info(f"Cycle {numero} de la tontine {tontine.id} démarré par {session.user_id}")
    return api_success(TontineCycleResponse.model_validate(cycle), status=status.HTTP_201_CREATED)


@router.patch(
    "/{tontine_id}/cycles/{cycle_id}/complete",
    summary="Clôturer un cycle de tontine",
)
async def complete_cycle(
    tontine_id: int,
    cycle_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Clôture un cycle : le bénéficiaire reçoit le pot sur son solde tontine
    et un crédit alimentaire du même montant est généré.
    """
    cycle = db.get(TontineCycle, cycle_id)
    if cycle is None or cycle.tontine_id != tontine_id:
        raise ApiError("Cycle introuvable", 404)
    if cycle.statut == StatutCycle.COMPLETE.value:
        raise ApiError("Ce cycle est déjà clôturé", 400)

    cycle.statut = StatutCycle.COMPLETE.value
    cycle.date_cloture = datetime.utcnow()

    credit = None
    if cycle.beneficiaire_id is not None:
        wallet = db.query(Wallet).filter(Wallet.member_id == cycle.beneficiaire_id).first()
        if wallet is not None:
            wallet.solde_tontine = Decimal(wallet.solde_tontine) + Decimal(cycle.montant_pot)

        credit = credit_alimentaire_service.generer_depuis_tontine(db, cycle)
        notification_service.notify(db, [cycle.beneficiaire_id], NotificationPayload(
            titre="Pot de tontine reçu",
            message=f"Vous avez reçu le pot du cycle {cycle.numero} : {cycle.montant_pot} FCFA.",
            action_url="/dashboard/user",
        ))

    notification_service.audit_log(db, parse_user_id(session), "CLOTURE_CYCLE_TONTINE", "TontineCycle", cycle.id)
    db.commit()
    db.refresh(cycle)

    logger.info(f"Cycle {cycle.numero} de la tontine {tontine_id} clôturé par {session.user_id}")
    return api_success({
        "cycle": TontineCycleResponse.model_validate(cycle),
        "credit_alimentaire": CreditAlimentaireResponse.model_validate(credit) if credit else None,
    })
