"""
Schémas Pydantic pour les gestionnaires.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class MembreSummary(BaseModel):
    id: int
    nom: str
    prenom: str
    email: str
    telephone: Optional[str] = None

    class Config:
        from_attributes = True


class GestionnaireCreate(BaseModel):
    """Attribution d'un rôle de gestionnaire à un membre existant."""
    member_id: int
    role: str


class GestionnaireUpdate(BaseModel):
    role: Optional[str] = None
    actif: Optional[bool] = None


class GestionnaireResponse(BaseModel):
    id: int
    member_id: int
    role: str
    actif: bool
    created_at: datetime
    member: Optional[MembreSummary] = None

    class Config:
        from_attributes = True
