"""
Schémas Pydantic pour les crédits classiques et les portefeuilles.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from app.schemas.montant import Montant


class CreditResponse(BaseModel):
    id: int
    member_id: int
    montant: Montant
    statut: str
    created_at: datetime

    class Config:
        from_attributes = True


class WalletTransactionResponse(BaseModel):
    """Mouvement du portefeuille d'un membre."""
    id: int
    type: str
    montant: Montant
    description: Optional[str] = None
    reference: str
    created_at: datetime

    class Config:
        from_attributes = True
