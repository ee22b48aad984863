"""
Schémas Pydantic pour les tontines.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from app.models.tontine import FrequenceTontine, StatutTontine
from app.schemas.gestionnaire import MembreSummary
from app.schemas.montant import Montant


class TontineMembreResponse(BaseModel):
    id: int
    member_id: int
    ordre: Optional[int] = None
    joined_at: datetime
    date_sortie: Optional[datetime] = None
    member: Optional[MembreSummary] = None

    class Config:
        from_attributes = True


class TontineCycleResponse(BaseModel):
    id: int
    numero: int
    beneficiaire_id: Optional[int] = None
    montant_pot: Montant
    statut: str
    date_cloture: Optional[datetime] = None

    class Config:
        from_attributes = True


class TontineResponse(BaseModel):
    id: int
    nom: str
    description: Optional[str] = None
    montant_cycle: Montant
    frequence: str
    statut: str
    date_debut: Optional[datetime] = None
    date_fin: Optional[datetime] = None
    nombre_membres: int
    created_at: datetime

    class Config:
        from_attributes = True


class TontineDetailResponse(TontineResponse):
    membres: List[TontineMembreResponse] = []
    cycles: List[TontineCycleResponse] = []


class TontineCreate(BaseModel):
    nom: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    montant_cycle: Decimal = Field(..., gt=0, description="Cotisation de chaque membre par cycle")
    frequence: FrequenceTontine = FrequenceTontine.MENSUEL
    statut: StatutTontine = StatutTontine.ACTIVE
    date_debut: Optional[datetime] = None
    date_fin: Optional[datetime] = None
