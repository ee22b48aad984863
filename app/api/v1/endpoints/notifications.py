"""
Routes pour la gestion des notifications du membre connecté.
"""

from typing import Any, Optional
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.database import get_db
from app.core.responses import api_success
from app.models.notification import Notification
from app.schemas.notification import NotificationResponse
from app.api.deps import Pagination, get_current_user_id


router = APIRouter()


@router.get(
    "",
    summary="Liste des notifications",
)
async def list_notifications(
    lue: Optional[bool] = Query(None, description="Filtrer sur l'état de lecture"),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> Any:
    """
    Liste les notifications de l'utilisateur connecté, les plus récentes d'abord.
    """
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if lue is not None:
        query = query.filter(Notification.lue == lue)

    notifications = query.order_by(
        Notification.created_at.desc(), Notification.id.desc()
    ).offset(pagination.skip).limit(pagination.limit).all()

    return api_success([NotificationResponse.model_validate(n) for n in notifications])


@router.delete(
    "",
    summary="Supprimer toutes mes notifications",
)
async def delete_notifications(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> Any:
    deleted = db.query(Notification).filter(
        Notification.user_id == user_id
    ).delete(synchronize_session=False)
    db.commit()
    return api_success({"deleted": deleted})


@router.get(
    "/unread",
    summary="Nombre de notifications non lues",
)
async def get_unread_count(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> Any:
    count = db.query(func.count(Notification.id)).filter(
        Notification.user_id == user_id,
        Notification.lue == False,  # noqa: E712
    ).scalar()

    return api_success(count or 0)


@router.patch(
    "/readAll",
    summary="Tout marquer comme lu",
)
async def mark_all_read(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> Any:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.lue == False,  # noqa: E712
    ).update({"lue": True, "date_lecture": datetime.utcnow()}, synchronize_session=False)
    db.commit()
    return api_success({"updated": updated})


@router.patch(
    "/{notification_uuid}/read",
    summary="Marquer une notification comme lue",
)
async def mark_read(
    notification_uuid: str,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> Any:
    """
    Marque une notification comme lue. Sans effet si elle appartient à un
    autre utilisateur.
    """
    updated = db.query(Notification).filter(
        Notification.uuid == notification_uuid,
        Notification.user_id == user_id,
    ).update({"lue": True, "date_lecture": datetime.utcnow()}, synchronize_session=False)
    db.commit()
    return api_success({"updated": updated})


@router.delete(
    "/{notification_uuid}",
    summary="Supprimer une notification",
)
async def delete_notification(
    notification_uuid: str,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> Any:
    deleted = db.query(Notification).filter(
        Notification.uuid == notification_uuid,
        Notification.user_id == user_id,
    ).delete(synchronize_session=False)
    db.commit()
    return api_success({"deleted": deleted})
