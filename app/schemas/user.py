"""
Schémas Pydantic pour les membres et l'authentification.
Validation des données d'entrée et sérialisation des réponses.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
import re

from app.models.user import MemberStatus, Role


def _clean_phone(v: str) -> str:
    # Supprimer les espaces et tirets
    cleaned = re.sub(r"[\s\-]", "", v)
    if not re.match(r"^\+?[0-9]{8,15}$", cleaned):
        raise ValueError("Format de téléphone invalide. Exemple: +224621234567")
    return cleaned


class UserRegister(BaseModel):
    """Schéma pour l'inscription d'un membre."""
    nom: str = Field(..., min_length=2, max_length=100, description="Nom de famille")
    prenom: str = Field(..., min_length=2, max_length=100, description="Prénom")
    email: EmailStr = Field(..., description="Adresse email")
    telephone: Optional[str] = Field(None, min_length=8, max_length=20, description="Numéro de téléphone")
    adresse: Optional[str] = Field(None, max_length=500)
    password: str = Field(..., min_length=8, description="Mot de passe (min 8 caractères)")
    confirm_password: str = Field(..., description="Confirmation du mot de passe")

    @field_validator("telephone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _clean_phone(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Valide la complexité du mot de passe."""
        if not re.search(r"[A-Z]", v):
            raise ValueError("Le mot de passe doit contenir au moins une majuscule")
        if not re.search(r"[a-z]", v):
            raise ValueError("Le mot de passe doit contenir au moins une minuscule")
        if not re.search(r"[0-9]", v):
            raise ValueError("Le mot de passe doit contenir au moins un chiffre")
        return v

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info) -> str:
        """Vérifie que les mots de passe correspondent."""
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("Les mots de passe ne correspondent pas")
        return v


class UserLogin(BaseModel):
    """Schéma pour la connexion."""
    email: EmailStr = Field(..., description="Email")
    password: str = Field(..., description="Mot de passe")


class Token(BaseModel):
    """Token de session renvoyé à la connexion."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class GestionnaireSummary(BaseModel):
    id: int
    role: str
    actif: bool

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    """Schéma de réponse pour un membre."""
    id: int
    nom: str
    prenom: str
    full_name: str
    email: EmailStr
    telephone: Optional[str] = None
    adresse: Optional[str] = None
    photo: Optional[str] = None
    role: Role
    etat: MemberStatus
    gestionnaire: Optional[GestionnaireSummary] = None
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class MembreUpdate(BaseModel):
    """Mise à jour d'un membre par un administrateur."""
    nom: Optional[str] = Field(None, min_length=2, max_length=100)
    prenom: Optional[str] = Field(None, min_length=2, max_length=100)
    telephone: Optional[str] = Field(None, min_length=8, max_length=20)
    adresse: Optional[str] = Field(None, max_length=500)
    role: Optional[Role] = None
    etat: Optional[MemberStatus] = None

    @field_validator("telephone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _clean_phone(v)

