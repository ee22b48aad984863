"""
Modèle User - Membres et comptes de la coopérative.
Gère les informations personnelles, l'authentification, le rôle principal
et le rôle de gestionnaire éventuel.
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, Enum,
    ForeignKey, Index,
)
from sqlalchemy.orm import relationship

from app.database import Base


class Role(str, enum.Enum):
    """Rôles principaux des comptes."""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    USER = "USER"


ADMIN_ROLES = (Role.ADMIN.value, Role.SUPER_ADMIN.value)


class RoleGestionnaire(str, enum.Enum):
    """Rôles spécialisés des gestionnaires (personnel de la coopérative)."""
    RESPONSABLE_POINT_DE_VENTE = "RESPONSABLE_POINT_DE_VENTE"
    RESPONSABLE_COMMUNAUTE = "RESPONSABLE_COMMUNAUTE"
    REVENDEUR = "REVENDEUR"
    AGENT_LOGISTIQUE_APPROVISIONNEMENT = "AGENT_LOGISTIQUE_APPROVISIONNEMENT"
    MAGAZINIER = "MAGAZINIER"
    CAISSIER = "CAISSIER"
    COMMERCIAL = "COMMERCIAL"
    COMPTABLE = "COMPTABLE"
    AUDITEUR_INTERNE = "AUDITEUR_INTERNE"
    RESPONSABLE_VENTE_CREDIT = "RESPONSABLE_VENTE_CREDIT"
    CONTROLEUR_TERRAIN = "CONTROLEUR_TERRAIN"
    AGENT_TERRAIN = "AGENT_TERRAIN"
    RESPONSABLE_ECONOMIQUE = "RESPONSABLE_ECONOMIQUE"
    RESPONSABLE_MARKETING = "RESPONSABLE_MARKETING"
    ACTIONNAIRE = "ACTIONNAIRE"


class MemberStatus(str, enum.Enum):
    """État d'un membre ou d'un client."""
    ACTIF = "ACTIF"
    INACTIF = "INACTIF"
    SUSPENDU = "SUSPENDU"


role_enum = Enum(*[r.value for r in Role], name="role")
role_gestionnaire_enum = Enum(*[r.value for r in RoleGestionnaire], name="rolegestionnaire")
member_status_enum = Enum(*[s.value for s in MemberStatus], name="memberstatus")


class User(Base):
    """
    Modèle représentant un membre de la coopérative.

    Attributes:
        id: Identifiant unique
        nom / prenom: Identité
        email: Adresse email (unique)
        telephone: Numéro de téléphone (unique)
        hashed_password: Mot de passe hashé
        role: Rôle principal (SUPER_ADMIN, ADMIN, USER)
        etat: État du membre (ACTIF, INACTIF, SUSPENDU)
        gestionnaire: Rôle de gestionnaire éventuel
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Identité
    nom = Column(String(100), nullable=False)
    prenom = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    telephone = Column(String(20), unique=True, index=True, nullable=True)
    adresse = Column(Text, nullable=True)
    photo = Column(String(500), nullable=True)

    # Authentification
    hashed_password = Column(String(255), nullable=False)

    # Rôle et statut
    role = Column(role_enum, default=Role.USER.value, nullable=False)
    etat = Column(member_status_enum, default=MemberStatus.ACTIF.value, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relations
    gestionnaire = relationship(
        "Gestionnaire",
        back_populates="member",
        uselist=False,
        lazy="selectin",
    )
    wallet = relationship("Wallet", back_populates="member", uselist=False)
    credits_alimentaires = relationship(
        "CreditAlimentaire",
        back_populates="member",
        foreign_keys="[CreditAlimentaire.member_id]",
    )

    __table_args__ = (
        Index("idx_user_role", "role"),
        Index("idx_user_etat", "etat"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"

    @property
    def full_name(self) -> str:
        """Retourne le nom complet du membre."""
        return f"{self.prenom} {self.nom}"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def gestionnaire_role(self):
        """Rôle de gestionnaire actif, None sinon."""
        if self.gestionnaire and self.gestionnaire.actif:
            return self.gestionnaire.role
        return None


class Gestionnaire(Base):
    """
    Rôle de gestionnaire rattaché à un membre (un seul par membre).
    """

    __tablename__ = "gestionnaires"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    member_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    role = Column(role_gestionnaire_enum, nullable=False)
    actif = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    member = relationship("User", back_populates="gestionnaire")

    __table_args__ = (
        Index("idx_gestionnaire_role_actif", "role", "actif"),
    )

    def __repr__(self) -> str:
        return f"<Gestionnaire(id={self.id}, member_id={self.member_id}, role={self.role})>"
