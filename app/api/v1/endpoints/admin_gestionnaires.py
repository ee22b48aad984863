"""
Routes d'administration des gestionnaires (rôles du personnel).
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession, parse_user_id
from app.models.user import Gestionnaire, RoleGestionnaire, User
from app.schemas.gestionnaire import GestionnaireCreate, GestionnaireResponse, GestionnaireUpdate
from app.services.notification_service import NotificationPayload, notification_service
from app.api.deps import Pagination, require_admin


router = APIRouter()

ROLES_GESTIONNAIRE = {r.value for r in RoleGestionnaire}


@router.get(
    "",
    summary="Liste des gestionnaires",
)
async def list_gestionnaires(
    role: Optional[str] = Query(None),
    actif: Optional[bool] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    query = db.query(Gestionnaire)
    if role:
        query = query.filter(Gestionnaire.role == role)
    if actif is not None:
        query = query.filter(Gestionnaire.actif == actif)

    total = query.count()
    gestionnaires = query.order_by(Gestionnaire.created_at.desc(), Gestionnaire.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    return api_success(pagination.page_of(
        [GestionnaireResponse.model_validate(g) for g in gestionnaires],
        total,
    ))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Nommer un gestionnaire",
)
async def create_gestionnaire(
    data: GestionnaireCreate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Attribue un rôle de gestionnaire à un membre.

    Raises:
        400 si le membre n'existe pas, est déjà gestionnaire, ou si le rôle est inconnu
    """
    if data.role not in ROLES_GESTIONNAIRE:
        raise ApiError("Rôle invalide", 400)

    membre = db.get(User, data.member_id)
    if membre is None:
        raise ApiError("Utilisateur introuvable", 400)
    if membre.gestionnaire is not None:
        raise ApiError("Cet utilisateur est déjà gestionnaire", 400)

    gestionnaire = Gestionnaire(member_id=membre.id, role=data.role, actif=True)
    db.add(gestionnaire)
    db.flush()

    notification_service.audit_log(
        db, parse_user_id(session), "CREATION_GESTIONNAIRE", "Gestionnaire", gestionnaire.id
    )
    notification_service.notify(db, [membre.id], NotificationPayload(
        titre="Nouveau rôle",
        message=f"Vous avez été nommé {data.role}.",
        action_url="/dashboard/user",
    ))
    db.commit()
    db.refresh(gestionnaire)

    logger.info(f"Membre {membre.id} nommé {data.role} par {session.user_id}")
    return api_success(GestionnaireResponse.model_validate(gestionnaire), status=status.HTTP_201_CREATED)


@router.get(
    "/{gestionnaire_id}",
    summary="Détails d'un gestionnaire",
)
async def get_gestionnaire(
    gestionnaire_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    gestionnaire = db.get(Gestionnaire, gestionnaire_id)
    if gestionnaire is None:
        raise ApiError("Gestionnaire introuvable", 404)
    return api_success(GestionnaireResponse.model_validate(gestionnaire))


@router.patch(
    "/{gestionnaire_id}",
    summary="Modifier un gestionnaire",
)
async def update_gestionnaire(
    gestionnaire_id: int,
    data: GestionnaireUpdate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    gestionnaire = db.get(Gestionnaire, gestionnaire_id)
    if gestionnaire is None:
        raise ApiError("Gestionnaire introuvable", 404)

    update_data = data.model_dump(exclude_unset=True)
    if "role" in update_data and update_data["role"] not in ROLES_GESTIONNAIRE:
        raise ApiError("Rôle invalide", 400)

    for field, value in update_data.items():
        setattr(gestionnaire, field, value)

    notification_service.audit_log(
        db, parse_user_id(session), "MODIFICATION_GESTIONNAIRE", "Gestionnaire", gestionnaire.id
    )
    db.commit()
    db.refresh(gestionnaire)

    return api_success(GestionnaireResponse.model_validate(gestionnaire))
