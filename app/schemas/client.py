"""
Schémas Pydantic pour les clients.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ClientResponse(BaseModel):
    id: int
    nom: str
    prenom: str
    full_name: str
    telephone: str
    adresse: Optional[str] = None
    etat: str
    created_at: datetime

    class Config:
        from_attributes = True


class ClientCreate(BaseModel):
    """Création d'un client par un administrateur."""
    nom: str = Field(..., min_length=1, max_length=100)
    prenom: str = Field(..., min_length=1, max_length=100)
    telephone: str = Field(..., min_length=8, max_length=20)
    adresse: Optional[str] = Field(None, max_length=500)


class ClientUpdate(BaseModel):
    """
    Mise à jour partielle d'un client.
    L'état est validé par la route (400 si inconnu).
    """
    nom: Optional[str] = Field(None, min_length=1, max_length=100)
    prenom: Optional[str] = Field(None, min_length=1, max_length=100)
    telephone: Optional[str] = Field(None, min_length=8, max_length=20)
    adresse: Optional[str] = Field(None, max_length=500)
    etat: Optional[str] = None
