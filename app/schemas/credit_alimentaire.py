"""
Schémas Pydantic pour les crédits alimentaires et leurs ventes.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from app.models.credit_alimentaire import SourceCreditAlim
from app.schemas.montant import Montant


class ProduitSummary(BaseModel):
    id: int
    nom: str
    prix_unitaire: Montant

    class Config:
        from_attributes = True


class VenteResponse(BaseModel):
    id: int
    credit_alimentaire_id: int
    produit_id: int
    quantite: int
    prix_unitaire: Montant
    montant: Montant
    vendeur_id: Optional[int] = None
    created_at: datetime
    produit: Optional[ProduitSummary] = None

    class Config:
        from_attributes = True


class CreditAlimentaireResponse(BaseModel):
    """Crédit alimentaire avec ses ventes."""
    id: int
    member_id: Optional[int] = None
    client_id: Optional[int] = None
    plafond: Montant
    montant_utilise: Montant
    montant_restant: Montant
    source: Optional[str] = None
    source_id: Optional[int] = None
    date_expiration: Optional[datetime] = None
    statut: str
    created_at: datetime
    ventes: List[VenteResponse] = []

    class Config:
        from_attributes = True


class CreditAlimentaireCreate(BaseModel):
    plafond: Decimal = Field(..., gt=0, description="Montant accordé en FCFA")
    source: Optional[SourceCreditAlim] = None
    source_id: Optional[int] = None
    date_expiration: Optional[datetime] = None


class Consommation(BaseModel):
    """Achat de produits avec un crédit alimentaire."""
    produit_id: int
    quantite: int = Field(..., gt=0)


class VenteCaissierCreate(Consommation):
    """Vente enregistrée en caisse contre le crédit alimentaire d'un membre ou d'un client."""
    credit_alimentaire_id: int
