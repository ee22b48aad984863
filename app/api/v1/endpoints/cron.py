"""
Tâches planifiées déclenchées par HTTP.
"""

import hmac
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.services.expiration_service import expiration_service


router = APIRouter()


def _cron_secret_valide(request: Request, secret: Optional[str]) -> bool:
    """Le secret est accepté en paramètre ?secret= ou en en-tête Authorization: Bearer."""
    if not settings.CRON_SECRET:
        return False

    fourni = secret
    if fourni is None:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            fourni = auth_header[7:]

    return fourni is not None and hmac.compare_digest(
        fourni.encode("utf-8"), settings.CRON_SECRET.encode("utf-8")
    )


@router.get(
    "/expirations",
    summary="Traitement quotidien des expirations",
)
async def run_expirations(
    request: Request,
    secret: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> Any:
    """
    Expire les cotisations en attente et les crédits alimentaires échus.
    Protégé par CRON_SECRET.
    """
    if not _cron_secret_valide(request, secret):
        logger.warning("Appel de la tâche d'expiration refusé (secret invalide)")
        raise ApiError("Non autorise", 401)

    result = expiration_service.traiter_expirations(db)
    db.commit()
    return api_success(result)
