"""
Schémas Pydantic pour les cotisations.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from app.models.cotisation import PeriodeCotisation
from app.schemas.montant import Montant


class CotisationCreate(BaseModel):
    """
    Cotisation EN_ATTENTE d'un membre ou d'un client (un seul des deux).
    Sans date d'expiration, l'échéance suit la période (un mois ou un an).
    """
    member_id: Optional[int] = None
    client_id: Optional[int] = None
    montant: Decimal = Field(..., gt=0, description="Montant en FCFA")
    periode: PeriodeCotisation = PeriodeCotisation.MENSUEL
    date_expiration: Optional[datetime] = None


class CotisationResponse(BaseModel):
    id: int
    member_id: Optional[int] = None
    client_id: Optional[int] = None
    montant: Montant
    periode: str
    statut: str
    date_paiement: Optional[datetime] = None
    date_expiration: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
