"""
Routes de l'espace logistique - État du stock et mouvements pour l'approvisionnement.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.guards import LOGISTIQUE
from app.core.responses import api_success
from app.core.session import AuthSession
from app.models.produit import MouvementStock, Produit, TypeMouvement
from app.schemas.produit import MouvementStockResponse, ProduitResponse
from app.api.deps import Pagination, require_policy


router = APIRouter()


@router.get(
    "/stock",
    summary="État du stock",
)
async def get_stock(
    alerte: bool = Query(False, description="Uniquement les produits en rupture ou en stock faible"),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(LOGISTIQUE)),
) -> Any:
    produits = db.query(Produit).order_by(Produit.stock, Produit.nom).all()
    if alerte:
        produits = [p for p in produits if p.en_rupture or p.stock_faible]

    return api_success([ProduitResponse.model_validate(p) for p in produits])


@router.get(
    "/mouvements",
    summary="Historique des mouvements de stock",
)
async def list_mouvements(
    produit_id: Optional[int] = Query(None),
    type: Optional[str] = Query(None, description="ENTREE, SORTIE ou AJUSTEMENT"),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_policy(LOGISTIQUE)),
) -> Any:
    query = db.query(MouvementStock)
    if produit_id is not None:
        query = query.filter(MouvementStock.produit_id == produit_id)
    if type in {t.value for t in TypeMouvement}:
        query = query.filter(MouvementStock.type == type)

    total = query.count()
    mouvements = query.order_by(MouvementStock.created_at.desc(), MouvementStock.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    return api_success(pagination.page_of(
        [MouvementStockResponse.model_validate(m) for m in mouvements],
        total,
    ))
