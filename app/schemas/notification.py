"""
Schémas Pydantic pour les notifications et le journal d'audit.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: int
    uuid: str
    titre: str
    message: str
    priorite: str
    action_url: Optional[str] = None
    lue: bool
    date_lecture: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AuditLogResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    action: str
    entite: str
    entite_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
