"""
Routes de l'espace comptable - Synthèse financière.
"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.guards import COMPTABLE
from app.core.responses import api_success
from app.core.session import AuthSession
from app.models.cotisation import Cotisation, StatutCotisation
from app.models.credit_alimentaire import CreditAlimentaire, VenteCreditAlimentaire
from app.api.deps import require_policy


router = APIRouter()


@router.get(
    "/synthese",
    summary="Synthèse financière",
)
async def get_synthese(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(COMPTABLE)),
) -> Any:
    """
    Totaux des cotisations payées, des crédits alimentaires accordés et
    consommés, et des ventes.
    """
    nb_cotisations, total_cotisations = db.query(
        func.count(Cotisation.id),
        func.coalesce(func.sum(Cotisation.montant), 0),
    ).filter(Cotisation.statut == StatutCotisation.PAYEE.value).one()

    plafond, utilise = db.query(
        func.coalesce(func.sum(CreditAlimentaire.plafond), 0),
        func.coalesce(func.sum(CreditAlimentaire.montant_utilise), 0),
    ).one()

    nb_ventes, total_ventes = db.query(
        func.count(VenteCreditAlimentaire.id),
        func.coalesce(func.sum(VenteCreditAlimentaire.prix_unitaire * VenteCreditAlimentaire.quantite), 0),
    ).one()

    return api_success({
        "cotisations_payees": {"nombre": nb_cotisations, "montant": total_cotisations},
        "credits_alimentaires": {"montant_accorde": plafond, "montant_consomme": utilise},
        "ventes": {"nombre": nb_ventes, "montant": total_ventes},
    })
