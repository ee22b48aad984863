"""
Schémas Pydantic pour les produits et les mouvements de stock.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from app.schemas.montant import Montant


class ProduitCreate(BaseModel):
    nom: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    prix_unitaire: Decimal = Field(..., gt=0, description="Prix unitaire en FCFA")
    stock: int = Field(default=0, ge=0)
    alerte_stock: int = Field(default=0, ge=0)


class ProduitUpdate(BaseModel):
    nom: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    prix_unitaire: Optional[Decimal] = Field(None, gt=0)
    alerte_stock: Optional[int] = Field(None, ge=0)


class ProduitResponse(BaseModel):
    id: int
    nom: str
    description: Optional[str] = None
    prix_unitaire: Montant
    stock: int
    alerte_stock: int
    en_rupture: bool
    stock_faible: bool
    created_at: datetime

    class Config:
        from_attributes = True


class MouvementStockResponse(BaseModel):
    id: int
    produit_id: int
    type: str
    quantite: int
    motif: Optional[str] = None
    reference: str
    created_at: datetime

    class Config:
        from_attributes = True


class ProduitDetailResponse(ProduitResponse):
    """Produit avec ses derniers mouvements."""
    mouvements: List[MouvementStockResponse] = []


class AjustementStock(BaseModel):
    """
    Réception (ENTREE, quantité > 0) ou ajustement d'inventaire
    (AJUSTEMENT, quantité signée non nulle).
    """
    type: str
    quantite: int
    motif: str = Field(..., min_length=1, max_length=500)
