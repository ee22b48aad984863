"""
Module des schémas Pydantic pour Nafa.
Définit les modèles de validation pour les requêtes et réponses API.
"""

from .user import (
    UserRegister,
    UserLogin,
    Token,
    UserResponse,
    MembreUpdate,
)
from .finance import CreditResponse, WalletTransactionResponse
from .client import ClientCreate, ClientResponse, ClientUpdate
from .gestionnaire import (
    MembreSummary,
    GestionnaireCreate,
    GestionnaireUpdate,
    GestionnaireResponse,
)
from .produit import (
    ProduitCreate,
    ProduitUpdate,
    ProduitResponse,
    ProduitDetailResponse,
    MouvementStockResponse,
    AjustementStock,
)
from .credit_alimentaire import (
    VenteResponse,
    CreditAlimentaireResponse,
    CreditAlimentaireCreate,
    Consommation,
    VenteCaissierCreate,
)
from .cotisation import CotisationCreate, CotisationResponse
from .tontine import (
    TontineCreate,
    TontineResponse,
    TontineDetailResponse,
    TontineMembreResponse,
    TontineCycleResponse,
)
from .notification import NotificationResponse, AuditLogResponse

__all__ = [
    "UserRegister",
    "UserLogin",
    "Token",
    "UserResponse",
    "MembreUpdate",
    "CreditResponse",
    "WalletTransactionResponse",
    "ClientCreate",
    "ClientResponse",
    "ClientUpdate",
    "MembreSummary",
    "GestionnaireCreate",
    "GestionnaireUpdate",
    "GestionnaireResponse",
    "ProduitCreate",
    "ProduitUpdate",
    "ProduitResponse",
    "ProduitDetailResponse",
    "MouvementStockResponse",
    "AjustementStock",
    "VenteResponse",
    "CreditAlimentaireResponse",
    "CreditAlimentaireCreate",
    "Consommation",
    "VenteCaissierCreate",
    "CotisationCreate",
    "CotisationResponse",
    "TontineCreate",
    "TontineResponse",
    "TontineDetailResponse",
    "TontineMembreResponse",
    "TontineCycleResponse",
    "NotificationResponse",
    "AuditLogResponse",
]
