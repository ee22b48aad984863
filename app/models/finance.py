"""
Modèles financiers - Crédits classiques et portefeuilles des membres.
"""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column, Integer, String, DateTime, Numeric, Enum, Text,
    ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


class StatutCredit(str, enum.Enum):
    """Statuts d'un crédit classique."""
    EN_ATTENTE = "EN_ATTENTE"
    APPROUVE = "APPROUVE"
    REJETE = "REJETE"
    REMBOURSE_PARTIEL = "REMBOURSE_PARTIEL"
    REMBOURSE_TOTAL = "REMBOURSE_TOTAL"


# Crédits non totalement remboursés
STATUTS_CREDIT_EN_COURS = (
    StatutCredit.EN_ATTENTE.value,
    StatutCredit.APPROUVE.value,
    StatutCredit.REMBOURSE_PARTIEL.value,
)


class Credit(Base):
    """Crédit classique accordé à un membre."""

    __tablename__ = "credits"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    member_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    montant = Column(Numeric(12, 2), nullable=False)
    statut = Column(
        Enum(*[s.value for s in StatutCredit], name="statutcredit"),
        default=StatutCredit.EN_ATTENTE.value,
        nullable=False,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_credit_statut", "statut"),
        CheckConstraint("montant > 0", name="positive_montant_credit"),
    )


class Wallet(Base):
    """
    Portefeuille d'un membre (un par membre).
    """

    __tablename__ = "wallets"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    member_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    solde_general = Column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    solde_tontine = Column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    solde_credit = Column(Numeric(14, 2), default=Decimal("0"), nullable=False)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    member = relationship("User", back_populates="wallet")
    transactions = relationship(
        "WalletTransaction",
        back_populates="wallet",
        order_by="WalletTransaction.created_at.desc()",
    )


class WalletTransaction(Base):
    """Opération sur un portefeuille."""

    __tablename__ = "wallet_transactions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False)
    type = Column(String(50), nullable=False)  # COTISATION, DEPOT, RETRAIT...
    montant = Column(Numeric(14, 2), nullable=False)
    description = Column(Text, nullable=True)
    reference = Column(String(100), unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    wallet = relationship("Wallet", back_populates="transactions")
