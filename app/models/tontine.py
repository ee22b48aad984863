"""
Modèle Tontine - Groupes d'épargne rotatifs.
Gère les paramètres de la tontine, ses membres et ses cycles.
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Numeric, Enum,
    ForeignKey, Index, CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


class StatutTontine(str, enum.Enum):
    """Statuts d'une tontine."""
    BROUILLON = "BROUILLON"
    ACTIVE = "ACTIVE"
    TERMINEE = "TERMINEE"
    SUSPENDUE = "SUSPENDUE"


class FrequenceTontine(str, enum.Enum):
    """Fréquence des cotisations."""
    HEBDOMADAIRE = "HEBDOMADAIRE"
    MENSUEL = "MENSUEL"
    ANNUEL = "ANNUEL"


class StatutCycle(str, enum.Enum):
    EN_COURS = "EN_COURS"
    COMPLETE = "COMPLETE"


class Tontine(Base):
    """
    Modèle représentant une tontine.

    Attributes:
        nom: Nom de la tontine
        montant_cycle: Cotisation de chaque membre par cycle
        frequence: Fréquence des cycles
        statut: BROUILLON, ACTIVE, TERMINEE, SUSPENDUE
    """

    __tablename__ = "tontines"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    nom = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    montant_cycle = Column(Numeric(12, 2), nullable=False)
    frequence = Column(
        Enum(*[f.value for f in FrequenceTontine], name="frequencetontine"),
        default=FrequenceTontine.MENSUEL.value,
        nullable=False,
    )
    statut = Column(
        Enum(*[s.value for s in StatutTontine], name="statuttontine"),
        default=StatutTontine.BROUILLON.value,
        nullable=False,
    )
    date_debut = Column(DateTime, nullable=True)
    date_fin = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    membres = relationship(
        "TontineMembre",
        back_populates="tontine",
        lazy="selectin",
        order_by="TontineMembre.ordre",
    )
    cycles = relationship(
        "TontineCycle",
        back_populates="tontine",
        lazy="selectin",
        order_by="TontineCycle.numero",
    )

    __table_args__ = (
        Index("idx_tontine_statut", "statut"),
        CheckConstraint("montant_cycle > 0", name="positive_montant_cycle"),
    )

    def __repr__(self) -> str:
        return f"<Tontine(id={self.id}, nom='{self.nom}', statut={self.statut})>"

    @property
    def nombre_membres(self) -> int:
        return len(self.membres_actifs)

    @property
    def membres_actifs(self) -> list:
        return [m for m in self.membres if m.date_sortie is None]


class TontineMembre(Base):
    """
    Association entre membres et tontines, avec l'ordre de passage.
    """

    __tablename__ = "tontine_membres"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    tontine_id = Column(Integer, ForeignKey("tontines.id"), nullable=False)
    member_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    ordre = Column(Integer, nullable=True)  # NULL si pas encore défini
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    date_sortie = Column(DateTime, nullable=True)  # NULL tant que le membre participe

    tontine = relationship("Tontine", back_populates="membres")
    member = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("tontine_id", "member_id", name="unique_tontine_membre"),
        Index("idx_tontine_membre_member", "member_id"),
    )


class TontineCycle(Base):
    """
    Cycle d'une tontine : un bénéficiaire reçoit le pot à la fin du cycle.
    """

    __tablename__ = "tontine_cycles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    tontine_id = Column(Integer, ForeignKey("tontines.id"), nullable=False)
    numero = Column(Integer, nullable=False)
    beneficiaire_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    montant_pot = Column(Numeric(14, 2), nullable=False)
    statut = Column(
        Enum(*[s.value for s in StatutCycle], name="statutcycle"),
        default=StatutCycle.EN_COURS.value,
        nullable=False,
    )
    date_cloture = Column(DateTime, nullable=True)

    tontine = relationship("Tontine", back_populates="cycles")

    __table_args__ = (
        UniqueConstraint("tontine_id", "numero", name="unique_cycle_numero"),
    )
