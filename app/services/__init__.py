"""
Module des services métier de Nafa.
"""

from .notification_service import NotificationService, NotificationPayload, notification_service
from .credit_alimentaire_service import CreditAlimentaireService, credit_alimentaire_service
from .expiration_service import ExpirationService, expiration_service
from .dashboard_service import DashboardService, dashboard_service
from .stock_service import StockService, stock_service

__all__ = [
    "NotificationService",
    "NotificationPayload",
    "notification_service",
    "CreditAlimentaireService",
    "credit_alimentaire_service",
    "ExpirationService",
    "expiration_service",
    "DashboardService",
    "dashboard_service",
    "StockService",
    "stock_service",
]
