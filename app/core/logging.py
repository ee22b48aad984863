"""
Configuration du système de logging pour Nafa.
Utilise Loguru pour un logging structuré et détaillé.
"""

import sys
from pathlib import Path
from typing import Optional, Dict
from loguru import logger


def setup_logging(
    log_level: str = "INFO",
    log_file: str = "logs/nafa.log",
    rotation: str = "10 MB",
    retention: str = "30 days",
) -> None:
    """
    Configure le système de logging de l'application.

    Args:
        log_level: Niveau de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Chemin du fichier de log
        rotation: Taille maximale avant rotation
        retention: Durée de rétention des logs
    """
    # Supprimer le handler par défaut
    logger.remove()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    # Format pour fichier (sans couleurs)
    file_format = (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
        "{level: <8} | "
        "{name}:{function}:{line} | "
        "{message}"
    )

    logger.add(
        sys.stdout,
        format=log_format,
        level=log_level,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # Handler pour fichier avec rotation
    logger.add(
        log_file,
        format=file_format,
        level=log_level,
        rotation=rotation,
        retention=retention,
        compression="zip",
        backtrace=True,
        diagnose=True,
        enqueue=True,  # Thread-safe
    )

    # Fichier séparé pour les erreurs
    error_log = str(log_path.parent / "errors.log")
    logger.add(
        error_log,
        format=file_format,
        level="ERROR",
        rotation=rotation,
        retention=retention,
        compression="zip",
        backtrace=True,
        diagnose=True,
        enqueue=True,
    )

    logger.info("Système de logging initialisé")
    logger.debug(f"Niveau de log: {log_level}")
    logger.debug(f"Fichier de log: {log_file}")


def log_request(
    method: str,
    url: str,
    status_code: int,
    duration_ms: float,
    user_id: Optional[str] = None,
) -> None:
    """
    Log une requête HTTP avec ses détails.

    Args:
        method: Méthode HTTP (GET, POST, etc.)
        url: URL de la requête
        status_code: Code de statut HTTP
        duration_ms: Durée de la requête en millisecondes
        user_id: ID de l'utilisateur de la session (optionnel)
    """
    logger.bind(
        method=method,
        url=url,
        status_code=status_code,
        duration_ms=duration_ms,
        user_id=user_id,
    ).info(
        f"{method} {url} - {status_code} ({duration_ms:.2f}ms)"
    )


def log_database_query(
    query: str,
    duration_ms: float,
    params: Optional[Dict] = None,
) -> None:
    """
    Log une requête SQL avec sa durée.
    """
    logger.bind(
        query=query[:200],  # Tronquer les longues requêtes
        duration_ms=duration_ms,
        params=params,
    ).debug(
        f"SQL Query ({duration_ms:.2f}ms): {query[:100]}..."
    )


def log_access_denied(
    path: str,
    user_id: Optional[str],
    reason: str,
) -> None:
    """
    Log un refus d'accès (session absente ou rôle insuffisant).

    Args:
        path: Chemin demandé
        user_id: ID de l'utilisateur de la session, None si anonyme
        reason: Motif du refus
    """
    logger.bind(path=path, user_id=user_id).warning(
        f"Accès refusé sur {path} (utilisateur: {user_id or 'anonyme'}): {reason}"
    )


def log_stock_event(
    action: str,
    produit_id: int,
    quantite: int,
    stock_avant: int,
    stock_apres: int,
) -> None:
    """
    Log un mouvement de stock.
    """
    logger.bind(
        action=action,
        produit_id=produit_id,
        quantite=quantite,
    ).info(
        f"Stock {action}: produit {produit_id} {quantite:+d} ({stock_avant} -> {stock_apres})"
    )


__all__ = [
    "logger",
    "setup_logging",
    "log_request",
    "log_database_query",
    "log_access_denied",
    "log_stock_event",
]
