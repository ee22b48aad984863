"""
Modèle Cotisation - Cotisations périodiques des membres et clients.
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, DateTime, Numeric, Enum,
    ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


class PeriodeCotisation(str, enum.Enum):
    MENSUEL = "MENSUEL"
    ANNUEL = "ANNUEL"


class StatutCotisation(str, enum.Enum):
    """Statuts d'une cotisation."""
    EN_ATTENTE = "EN_ATTENTE"
    PAYEE = "PAYEE"
    EXPIREE = "EXPIREE"
    ANNULEE = "ANNULEE"


class Cotisation(Base):
    """
    Cotisation d'un membre ou d'un client.

    Une cotisation payée génère un crédit alimentaire du même montant.
    """

    __tablename__ = "cotisations"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    member_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)

    montant = Column(Numeric(12, 2), nullable=False)
    periode = Column(
        Enum(*[p.value for p in PeriodeCotisation], name="periodecotisation"),
        default=PeriodeCotisation.MENSUEL.value,
        nullable=False,
    )
    statut = Column(
        Enum(*[s.value for s in StatutCotisation], name="statutcotisation"),
        default=StatutCotisation.EN_ATTENTE.value,
        nullable=False,
    )
    date_paiement = Column(DateTime, nullable=True)
    date_expiration = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    client = relationship("Client", back_populates="cotisations", foreign_keys=[client_id])

    __table_args__ = (
        Index("idx_cotisation_member", "member_id"),
        Index("idx_cotisation_statut_expiration", "statut", "date_expiration"),
        CheckConstraint("montant > 0", name="positive_montant_cotisation"),
    )

    def __repr__(self) -> str:
        return f"<Cotisation(id={self.id}, montant={self.montant}, statut={self.statut})>"
