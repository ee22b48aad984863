"""
Modèle Notification - Notifications in-app et journal d'audit.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, Enum,
    ForeignKey, Index,
)
from sqlalchemy.orm import relationship

from app.database import Base


class PrioriteNotification(str, enum.Enum):
    """Priorité d'une notification."""
    BASSE = "BASSE"
    NORMAL = "NORMAL"
    HAUTE = "HAUTE"


class Notification(Base):
    """
    Notification adressée à un utilisateur.

    Attributes:
        uuid: Identifiant public (utilisé dans les URLs)
        titre / message: Contenu
        priorite: BASSE, NORMAL, HAUTE
        action_url: Page à ouvrir depuis la notification
        lue / date_lecture: Suivi de lecture
    """

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    uuid = Column(String(36), unique=True, index=True, default=lambda: str(uuid.uuid4()), nullable=False)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    titre = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    priorite = Column(
        Enum(*[p.value for p in PrioriteNotification], name="prioritenotification"),
        default=PrioriteNotification.NORMAL.value,
        nullable=False,
    )
    action_url = Column(String(500), nullable=True)

    lue = Column(Boolean, default=False, nullable=False)
    date_lecture = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User")

    __table_args__ = (
        Index("idx_notification_user_lue", "user_id", "lue"),
        Index("idx_notification_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user_id={self.user_id}, titre='{self.titre}')>"


class AuditLog(Base):
    """
    Trace d'une action métier (création, modification, expiration...).
    """

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # NULL pour le système
    action = Column(String(100), nullable=False, index=True)
    entite = Column(String(100), nullable=False)
    entite_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_audit_entite", "entite", "entite_id"),
    )
