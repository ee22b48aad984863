"""
Module de sécurité pour Nafa.
Gestion des tokens de session JWT et du hashage des mots de passe.
"""

from datetime import datetime, timedelta
from typing import Any, Optional, Dict, Union

import bcrypt
from jose import JWTError, jwt

from app.config import settings
from app.core.logging import logger


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Vérifie si un mot de passe en clair correspond au hash stocké.

    Args:
        plain_password: Mot de passe en clair
        hashed_password: Hash du mot de passe stocké

    Returns:
        True si le mot de passe est correct, False sinon
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError as e:
        logger.error(f"Hash de mot de passe invalide: {e}")
        return False


def get_password_hash(password: str) -> str:
    """
    Hash un mot de passe pour le stockage sécurisé.
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def create_access_token(
    subject: Union[str, int],
    role: Optional[str],
    gestionnaire_role: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Crée le token de session d'un utilisateur.

    Args:
        subject: Identifiant de l'utilisateur
        role: Rôle principal (SUPER_ADMIN, ADMIN, USER)
        gestionnaire_role: Rôle de gestionnaire éventuel
        expires_delta: Durée de validité du token
        extra_claims: Claims supplémentaires (nom, prenom...)

    Returns:
        Token JWT encodé
    """
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode = {
        "sub": str(subject),
        "role": role,
        "gestionnaire_role": gestionnaire_role,
        "exp": expire,
        "iat": datetime.utcnow(),
        "type": "access",
    }

    if extra_claims:
        to_encode.update(extra_claims)

    encoded_jwt = jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

    logger.debug(f"Token de session créé pour l'utilisateur {subject} (rôle {role}, gestionnaire {gestionnaire_role})")
    return encoded_jwt


def verify_token(token: str, token_type: str = "access") -> Optional[Dict[str, Any]]:
    """
    Vérifie et décode un token JWT.

    Returns:
        Payload du token si valide, None sinon
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.warning(f"Erreur de vérification du token JWT: {e}")
        return None

    if payload.get("type") != token_type:
        logger.warning(f"Type de token invalide: attendu {token_type}, reçu {payload.get('type')}")
        return None

    return payload


__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "verify_token",
]
