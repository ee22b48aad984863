"""
Routes d'administration des clients.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.core.session import AuthSession, parse_user_id
from app.models.client import Client
from app.models.user import MemberStatus
from app.schemas.client import ClientCreate, ClientResponse, ClientUpdate
from app.services.notification_service import NotificationPayload, notification_service
from app.api.deps import Pagination, require_admin


router = APIRouter()


def _get_client_or_404(db: Session, client_id: int) -> Client:
    client = db.get(Client, client_id)
    if client is None:
        raise ApiError("Client introuvable", 404)
    return client


@router.get(
    "",
    summary="Liste des clients",
)
async def list_clients(
    search: Optional[str] = Query(None, description="Nom, prénom ou téléphone"),
    etat: Optional[str] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    query = db.query(Client)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Client.nom.ilike(pattern),
            Client.prenom.ilike(pattern),
            Client.telephone.ilike(pattern),
        ))
    if etat:
        query = query.filter(Client.etat == etat)

    total = query.count()
    clients = query.order_by(Client.created_at.desc(), Client.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    return api_success(pagination.page_of(
        [ClientResponse.model_validate(c) for c in clients],
        total,
    ))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Créer un client",
)
async def create_client(
    data: ClientCreate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Crée un client ACTIF.

    Raises:
        409 si le téléphone est déjà utilisé
    """
    if db.query(Client).filter(Client.telephone == data.telephone).first():
        raise ApiError("Ce numéro de téléphone est déjà utilisé", 409)

    client = Client(**data.model_dump(), etat=MemberStatus.ACTIF.value)
    db.add(client)
    db.flush()

    notification_service.audit_log(db, parse_user_id(session), "CREATION_CLIENT", "Client", client.id)
    notification_service.notify_admins(db, NotificationPayload(
        titre="Nouveau client ajouté",
        message=f"Un nouveau client ({client.full_name}) a été ajouté.",
        action_url="/dashboard/admin/clients",
    ))
    db.commit()
    db.refresh(client)

    logger.info(f"Client {client.id} créé par {session.user_id}")
    return api_success(ClientResponse.model_validate(client), status=status.HTTP_201_CREATED)


@router.get(
    "/{client_id}",
    summary="Détails d'un client",
)
async def get_client(
    client_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    client = _get_client_or_404(db, client_id)
    data = ClientResponse.model_validate(client).model_dump()
    data["nombre_credits_alimentaires"] = len(client.credits_alimentaires)
    data["nombre_cotisations"] = len(client.cotisations)
    return api_success(data)


@router.patch(
    "/{client_id}",
    summary="Modifier un client",
)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Met à jour un client.

    Raises:
        409 si le téléphone est déjà utilisé par un autre client,
        400 si l'état est inconnu
    """
    client = _get_client_or_404(db, client_id)
    update_data = data.model_dump(exclude_unset=True)

    telephone = update_data.get("telephone")
    if telephone and telephone != client.telephone:
        if db.query(Client).filter(Client.telephone == telephone, Client.id != client.id).first():
            raise ApiError("Ce numéro de téléphone est déjà utilisé", 409)

    etat = update_data.get("etat")
    if etat is not None and etat not in {s.value for s in MemberStatus}:
        raise ApiError("Etat invalide", 400)

    for field, value in update_data.items():
        setattr(client, field, value)

    notification_service.audit_log(db, parse_user_id(session), "MODIFICATION_CLIENT", "Client", client.id)
    notification_service.notify_admins(db, NotificationPayload(
        titre="Client modifié",
        message=f"Le client {client.full_name} a été modifié par {session.display_name}.",
        action_url=f"/dashboard/admin/clients/{client.id}",
    ))
    db.commit()
    db.refresh(client)

    logger.info(f"Client {client.id} modifié par {session.user_id}")
    return api_success(ClientResponse.model_validate(client))


@router.delete(
    "/{client_id}",
    summary="Supprimer un client",
)
async def delete_client(
    client_id: int,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Supprime un client sans activité (ni crédit alimentaire, ni cotisation).
    """
    client = _get_client_or_404(db, client_id)
    if client.credits_alimentaires or client.cotisations:
        raise ApiError("Impossible de supprimer un client ayant des activités", 409)

    nom = client.full_name
    db.delete(client)
    notification_service.audit_log(db, parse_user_id(session), "SUPPRESSION_CLIENT", "Client", client_id)
    notification_service.notify_admins(db, NotificationPayload(
        titre="Client supprimé",
        message=f"Le client {nom} a été supprimé par {session.display_name}.",
        action_url="/dashboard/admin/clients",
    ))
    db.commit()

    logger.info(f"Client {client_id} supprimé par {session.user_id}")
    return api_success({"message": "Client supprimé"})
