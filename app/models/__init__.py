"""
Module des modèles SQLAlchemy pour Nafa.
Définit toutes les entités de la base de données.
"""

from .user import User, Gestionnaire, Role, RoleGestionnaire, MemberStatus, ADMIN_ROLES
from .client import Client
from .credit_alimentaire import (
    CreditAlimentaire,
    VenteCreditAlimentaire,
    SourceCreditAlim,
    StatutCreditAlim,
)
from .produit import Produit, MouvementStock, TypeMouvement
from .cotisation import Cotisation, StatutCotisation, PeriodeCotisation
from .tontine import (
    Tontine,
    TontineMembre,
    TontineCycle,
    StatutTontine,
    FrequenceTontine,
    StatutCycle,
)
from .finance import Credit, StatutCredit, Wallet, WalletTransaction
from .notification import Notification, PrioriteNotification, AuditLog

__all__ = [
    # User
    "User",
    "Gestionnaire",
    "Role",
    "RoleGestionnaire",
    "MemberStatus",
    "ADMIN_ROLES",
    # Client
    "Client",
    # Crédit alimentaire
    "CreditAlimentaire",
    "VenteCreditAlimentaire",
    "SourceCreditAlim",
    "StatutCreditAlim",
    # Stock
    "Produit",
    "MouvementStock",
    "TypeMouvement",
    # Cotisation
    "Cotisation",
    "StatutCotisation",
    "PeriodeCotisation",
    # Tontine
    "Tontine",
    "TontineMembre",
    "TontineCycle",
    "StatutTontine",
    "FrequenceTontine",
    "StatutCycle",
    # Finance
    "Credit",
    "StatutCredit",
    "Wallet",
    "WalletTransaction",
    # Notification
    "Notification",
    "PrioriteNotification",
    "AuditLog",
]
