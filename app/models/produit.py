"""
Modèle Produit - Stock de la coopérative et mouvements associés.
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Numeric, Enum,
    ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


class TypeMouvement(str, enum.Enum):
    """Types de mouvement de stock."""
    ENTREE = "ENTREE"
    SORTIE = "SORTIE"
    AJUSTEMENT = "AJUSTEMENT"


class Produit(Base):
    """
    Produit vendu contre crédit alimentaire.

    Attributes:
        prix_unitaire: Prix en FCFA
        stock: Quantité disponible
        alerte_stock: Seuil en dessous duquel le stock est jugé faible
    """

    __tablename__ = "produits"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    nom = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    prix_unitaire = Column(Numeric(12, 2), nullable=False)
    stock = Column(Integer, default=0, nullable=False)
    alerte_stock = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    mouvements = relationship(
        "MouvementStock",
        back_populates="produit",
        order_by="MouvementStock.created_at.desc()",
    )

    __table_args__ = (
        CheckConstraint("prix_unitaire > 0", name="positive_prix"),
        CheckConstraint("stock >= 0", name="non_negative_stock"),
    )

    def __repr__(self) -> str:
        return f"<Produit(id={self.id}, nom='{self.nom}', stock={self.stock})>"

    @property
    def en_rupture(self) -> bool:
        return self.stock == 0

    @property
    def stock_faible(self) -> bool:
        return 0 < self.stock <= self.alerte_stock


class MouvementStock(Base):
    """
    Entrée, sortie ou ajustement de stock sur un produit.
    """

    __tablename__ = "mouvements_stock"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    produit_id = Column(Integer, ForeignKey("produits.id"), nullable=False)
    type = Column(
        Enum(*[t.value for t in TypeMouvement], name="typemouvement"),
        nullable=False,
    )
    quantite = Column(Integer, nullable=False)
    motif = Column(Text, nullable=True)
    reference = Column(String(100), unique=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    produit = relationship("Produit", back_populates="mouvements")

    __table_args__ = (
        Index("idx_mouvement_produit", "produit_id", "created_at"),
    )
