"""
Routes d'administration du stock (catalogue produits).
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession, parse_user_id
from app.models.produit import Produit
from app.models.user import RoleGestionnaire
from app.schemas.produit import (
    MouvementStockResponse,
    ProduitCreate,
    ProduitDetailResponse,
    ProduitResponse,
    ProduitUpdate,
)
from app.services.notification_service import NotificationPayload, notification_service
from app.services.stock_service import stock_service
from app.api.deps import Pagination, require_admin


router = APIRouter()

# Destinataires des changements de catalogue (en plus des admins)
ROLES_CATALOGUE = [
    RoleGestionnaire.MAGAZINIER.value,
    RoleGestionnaire.AGENT_LOGISTIQUE_APPROVISIONNEMENT.value,
]


def produit_detail(produit: Produit, derniers: int = 20) -> dict:
    """Produit avec ses derniers mouvements de stock."""
    data = ProduitResponse.model_validate(produit).model_dump()
    data["mouvements"] = [
        MouvementStockResponse.model_validate(m) for m in produit.mouvements[:derniers]
    ]
    return ProduitDetailResponse(**data).model_dump()


@router.get(
    "",
    summary="Liste des produits et statistiques du stock",
)
async def list_produits(
    search: Optional[str] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    query = db.query(Produit)
    if search:
        query = query.filter(Produit.nom.ilike(f"%{search}%"))

    total = query.count()
    produits = query.order_by(Produit.nom).offset(pagination.skip).limit(pagination.limit).all()

    data = pagination.page_of([ProduitResponse.model_validate(p) for p in produits], total)
    data["stats"] = stock_service.statistiques(db)
    return api_success(data)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Créer un produit",
)
async def create_produit(
    data: ProduitCreate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Crée un produit. Un stock initial positif est tracé par un mouvement ENTREE.
    """
    produit = stock_service.creer_produit(
        db,
        nom=data.nom,
        prix_unitaire=data.prix_unitaire,
        stock=data.stock,
        alerte_stock=data.alerte_stock,
        description=data.description,
    )
    notification_service.audit_log(db, parse_user_id(session), "CREATION_PRODUIT", "Produit", produit.id)
    notification_service.notify_roles(db, ROLES_CATALOGUE, NotificationPayload(
        titre="Nouveau produit",
        message=f"Le produit \"{produit.nom}\" a été ajouté au catalogue (stock initial : {produit.stock}).",
        action_url=f"/dashboard/admin/stock/{produit.id}",
    ))
    db.commit()
    db.refresh(produit)

    logger.info(f"Produit {produit.id} créé par {session.user_id}")
    return api_success(ProduitResponse.model_validate(produit), status=status.HTTP_201_CREATED)


@router.get(
    "/{produit_id}",
    summary="Détails d'un produit",
)
async def get_produit(
    produit_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    produit = db.get(Produit, produit_id)
    if produit is None:
        raise ApiError("Produit introuvable", 404)
    return api_success(produit_detail(produit))


@router.patch(
    "/{produit_id}",
    summary="Modifier un produit",
)
async def update_produit(
    produit_id: int,
    data: ProduitUpdate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Modifie la fiche produit. Le stock ne se modifie que par des mouvements.
    """
    produit = db.get(Produit, produit_id)
    if produit is None:
        raise ApiError("Produit introuvable", 404)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(produit, field, value)

    notification_service.audit_log(db, parse_user_id(session), "MODIFICATION_PRODUIT", "Produit", produit.id)
    notification_service.notify_roles(db, ROLES_CATALOGUE, NotificationPayload(
        titre="Produit modifié",
        message=f"La fiche du produit \"{produit.nom}\" a été modifiée.",
        action_url=f"/dashboard/admin/stock/{produit.id}",
    ))
    db.commit()
    db.refresh(produit)

    return api_success(ProduitResponse.model_validate(produit))
