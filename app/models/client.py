"""
Modèle Client - Bénéficiaires sans compte, suivis par les agents terrain.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.user import MemberStatus, member_status_enum


class Client(Base):
    """
    Client de la coopérative (cotisations et crédits alimentaires sans compte en ligne).
    """

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    nom = Column(String(100), nullable=False)
    prenom = Column(String(100), nullable=False)
    telephone = Column(String(20), unique=True, index=True, nullable=False)
    adresse = Column(Text, nullable=True)
    etat = Column(member_status_enum, default=MemberStatus.ACTIF.value, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    credits_alimentaires = relationship(
        "CreditAlimentaire",
        back_populates="client",
        foreign_keys="[CreditAlimentaire.client_id]",
    )
    cotisations = relationship(
        "Cotisation",
        back_populates="client",
        foreign_keys="[Cotisation.client_id]",
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, nom='{self.prenom} {self.nom}')>"

    @property
    def full_name(self) -> str:
        return f"{self.prenom} {self.nom}"
