"""
Routes de l'espace magasinier - Consultation et ajustement du stock.
"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.guards import MAGASINIER
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession
from app.models.produit import Produit
from app.schemas.produit import AjustementStock, MouvementStockResponse, ProduitResponse
from app.services.stock_service import stock_service
from app.api.deps import require_policy
from app.api.v1.endpoints.admin_stock import produit_detail


router = APIRouter()


@router.get(
    "/stock/{produit_id}",
    summary="Détails d'un produit",
)
async def get_produit(
    produit_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(MAGASINIER)),
) -> Any:
    produit = db.get(Produit, produit_id)
    if produit is None:
        raise ApiError("Produit introuvable", 404)
    return api_success(produit_detail(produit))


@router.post(
    "/stock/{produit_id}/ajustement",
    summary="Réception ou ajustement de stock",
)
async def ajuster_stock(
    produit_id: int,
    data: AjustementStock,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(MAGASINIER)),
) -> Any:
    """
    Enregistre une réception (ENTREE, quantité > 0) ou un ajustement
    d'inventaire (AJUSTEMENT, quantité signée non nulle).

    Le responsable du point de vente et la logistique sont notifiés.
    """
    result = stock_service.ajuster(
        db,
        session,
        produit_id=produit_id,
        type_mouvement=data.type,
        quantite=data.quantite,
        motif=data.motif,
    )
    db.commit()

    return api_success({
        "mouvement": MouvementStockResponse.model_validate(result["mouvement"]),
        "produit": ProduitResponse.model_validate(result["produit"]),
    })
