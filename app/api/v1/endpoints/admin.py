"""
Routes d'administration générales - Tableau de bord, journal d'audit et crédits
classiques.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.responses import api_success
from app.core.session import AuthSession
from app.models.finance import Credit, StatutCredit
from app.models.notification import AuditLog
from app.schemas.finance import CreditResponse
from app.schemas.notification import AuditLogResponse
from app.services.dashboard_service import dashboard_service
from app.api.deps import Pagination, require_admin


router = APIRouter()


@router.get(
    "/dashboard",
    summary="Indicateurs globaux",
)
async def get_dashboard(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    """
    Membres actifs, tontines actives, crédits en cours et achats réalisés
    via les crédits alimentaires.
    """
    return api_success(dashboard_service.get_dashboard_admin(db))


@router.get(
    "/auditLogs",
    summary="Journal d'audit",
)
async def list_audit_logs(
    action: Optional[str] = Query(None, description="Filtrer par code action"),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    query = db.query(AuditLog)
    if action:
        query = query.filter(AuditLog.action == action)

    total = query.count()
    logs = query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    return api_success(pagination.page_of(
        [AuditLogResponse.model_validate(log) for log in logs],
        total,
    ))


@router.get(
    "/credits",
    summary="Crédits classiques",
)
async def list_credits(
    statut: Optional[str] = Query(None),
    member_id: Optional[int] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_admin),
) -> Any:
    query = db.query(Credit)
    if statut in {s.value for s in StatutCredit}:
        query = query.filter(Credit.statut == statut)
    if member_id is not None:
        query = query.filter(Credit.member_id == member_id)

    total = query.count()
    credits = query.order_by(Credit.created_at.desc(), Credit.id.desc()).offset(
        pagination.skip
    ).limit(pagination.limit).all()

    return api_success(pagination.page_of([CreditResponse.model_validate(c) for c in credits], total))
