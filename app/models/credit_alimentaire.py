"""
Modèle CreditAlimentaire - Lignes de crédit alimentaire et ventes associées.
"""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column, Integer, DateTime, Numeric, Enum,
    ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


class SourceCreditAlim(str, enum.Enum):
    """Origine d'un crédit alimentaire."""
    COTISATION = "COTISATION"
    TONTINE = "TONTINE"


class StatutCreditAlim(str, enum.Enum):
    """Statuts d'un crédit alimentaire."""
    ACTIF = "ACTIF"
    EPUISE = "EPUISE"
    EXPIRE = "EXPIRE"


class CreditAlimentaire(Base):
    """
    Crédit alimentaire d'un membre (ou d'un client).

    Attributes:
        member_id / client_id: Propriétaire (exactement un des deux)
        plafond: Montant accordé
        montant_utilise: Montant consommé
        montant_restant: Montant encore disponible
        source / source_id: Cotisation ou cycle de tontine à l'origine du crédit
        date_expiration: Date au-delà de laquelle le crédit expire
        statut: ACTIF, EPUISE, EXPIRE
    """

    __tablename__ = "credits_alimentaires"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    member_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)

    plafond = Column(Numeric(12, 2), nullable=False)
    montant_utilise = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    montant_restant = Column(Numeric(12, 2), nullable=False)

    source = Column(
        Enum(*[s.value for s in SourceCreditAlim], name="sourcecreditalim"),
        nullable=True,
    )
    source_id = Column(Integer, nullable=True)

    date_expiration = Column(DateTime, nullable=True)
    statut = Column(
        Enum(*[s.value for s in StatutCreditAlim], name="statutcreditalim"),
        default=StatutCreditAlim.ACTIF.value,
        nullable=False,
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relations
    member = relationship("User", back_populates="credits_alimentaires", foreign_keys=[member_id])
    client = relationship("Client", back_populates="credits_alimentaires", foreign_keys=[client_id])
    ventes = relationship(
        "VenteCreditAlimentaire",
        back_populates="credit_alimentaire",
        lazy="selectin",
        order_by="VenteCreditAlimentaire.created_at.desc()",
    )

    __table_args__ = (
        Index("idx_credit_alim_member", "member_id"),
        Index("idx_credit_alim_client", "client_id"),
        Index("idx_credit_alim_statut", "statut"),
        CheckConstraint(
            "(member_id IS NULL) <> (client_id IS NULL)",
            name="credit_alim_has_owner",
        ),
        CheckConstraint("plafond > 0", name="positive_plafond"),
        CheckConstraint("montant_restant >= 0", name="non_negative_restant"),
    )

    def __repr__(self) -> str:
        return f"<CreditAlimentaire(id={self.id}, restant={self.montant_restant}, statut={self.statut})>"


class VenteCreditAlimentaire(Base):
    """
    Achat de produit payé avec un crédit alimentaire.
    """

    __tablename__ = "ventes_credit_alimentaire"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    credit_alimentaire_id = Column(Integer, ForeignKey("credits_alimentaires.id"), nullable=False)
    produit_id = Column(Integer, ForeignKey("produits.id"), nullable=False)
    quantite = Column(Integer, nullable=False)
    prix_unitaire = Column(Numeric(12, 2), nullable=False)

    # Caissier ou agent ayant enregistré la vente
    vendeur_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    credit_alimentaire = relationship("CreditAlimentaire", back_populates="ventes")
    produit = relationship("Produit", lazy="selectin")

    __table_args__ = (
        Index("idx_vente_credit", "credit_alimentaire_id"),
        Index("idx_vente_created", "created_at"),
        CheckConstraint("quantite > 0", name="positive_quantite"),
    )

    @property
    def montant(self) -> Decimal:
        """Montant total de la vente."""
        return Decimal(self.prix_unitaire) * self.quantite
