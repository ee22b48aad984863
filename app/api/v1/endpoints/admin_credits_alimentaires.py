"""
Routes d'administration des crédits alimentaires.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession
from app.models.credit_alimentaire import CreditAlimentaire, StatutCreditAlim
from app.schemas.credit_alimentaire import CreditAlimentaireResponse
from app.api.deps import Pagination, require_admin


router = APIRouter()


def statistiques_credits(db: Session) -> dict:
    """Répartition par statut et montants cumulés des crédits alimentaires."""
    par_statut = dict(
        db.query(CreditAlimentaire.statut, func.count(CreditAlimentaire.id))
        .group_by(CreditAlimentaire.statut)
        .all()
    )
    plafond, utilise, restant = db.query(
        func.coalesce(func.sum(CreditAlimentaire.plafond), 0),
        func.coalesce(func.sum(CreditAlimentaire.montant_utilise), 0),
        func.coalesce(func.sum(CreditAlimentaire.montant_restant), 0),
    ).one()

    return {
        "total": sum(par_statut.values()),
        "actifs": par_statut.get(StatutCreditAlim.ACTIF.value, 0),
        "epuises": par_statut.get(StatutCreditAlim.EPUISE.value, 0),
        "expires": par_statut.get(StatutCreditAlim.EXPIRE.value, 0),
        "montant_plafond": plafond,
        "montant_utilise": utilise,
        "montant_restant": restant,
    }


@router.get(
    "",
    summary="Liste des crédits alimentaires",
)
async def list_credits_alimentaires(
    statut: Optional[str] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    query = db.query(CreditAlimentaire)
    if statut:
        query = query.filter(CreditAlimentaire.statut == statut)

    total = query.count()
    credits = query.order_by(CreditAlimentaire.created_at.desc(), CreditAlimentaire.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    data = pagination.page_of([CreditAlimentaireResponse.model_validate(c) for c in credits], total)
    data["stats"] = statistiques_credits(db)
    return api_success(data)


@router.get(
    "/{credit_id}",
    summary="Détails d'un crédit alimentaire",
)
async def get_credit_alimentaire(
    credit_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    credit = db.get(CreditAlimentaire, credit_id)
    if credit is None:
        raise ApiError("Crédit alimentaire introuvable", 404)
    return api_success(CreditAlimentaireResponse.model_validate(credit))
