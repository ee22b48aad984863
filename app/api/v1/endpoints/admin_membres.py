"""
Routes d'administration des membres.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession, parse_user_id
from app.models.user import User
from app.schemas.user import MembreUpdate, UserResponse
from app.services.notification_service import notification_service
from app.api.deps import Pagination, require_admin


router = APIRouter()


@router.get(
    "",
    summary="Liste des membres",
)
async def list_membres(
    search: Optional[str] = Query(None, description="Nom, prénom, email ou téléphone"),
    etat: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    query = db.query(User)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            User.nom.ilike(pattern),
            User.prenom.ilike(pattern),
            User.email.ilike(pattern),
            User.telephone.ilike(pattern),
        ))
    if etat:
        query = query.filter(User.etat == etat)
    if role:
        query = query.filter(User.role == role)

    total = query.count()
    membres = query.order_by(User.created_at.desc(), User.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    return api_success(pagination.page_of(
        [UserResponse.model_validate(m) for m in membres],
        total,
    ))


@router.get(
    "/{member_id}",
    summary="Détails d'un membre",
)
async def get_membre(
    member_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    membre = db.get(User, member_id)
    if membre is None:
        raise ApiError("Membre introuvable", 404)
    return api_success(UserResponse.model_validate(membre))


@router.patch(
    "/{member_id}",
    summary="Modifier un membre",
)
async def update_membre(
    member_id: int,
    data: MembreUpdate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    membre = db.get(User, member_id)
    if membre is None:
        raise ApiError("Membre introuvable", 404)

    update_data = data.model_dump(exclude_unset=True)

    telephone = update_data.get("telephone")
    if telephone and telephone != membre.telephone:
        if db.query(User).filter(User.telephone == telephone, User.id != membre.id).first():
            raise ApiError("Ce numéro de téléphone est déjà utilisé", 409)

    for field, value in update_data.items():
        setattr(membre, field, value.value if hasattr(value, "value") else value)

    notification_service.audit_log(db, parse_user_id(session), "MODIFICATION_MEMBRE", "User", membre.id)
    db.commit()
    db.refresh(membre)

    logger.info(f"Membre {membre.id} modifié par {session.user_id}")
    return api_success(UserResponse.model_validate(membre))
