"""
Routes d'authentification - Inscription, connexion, déconnexion.
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.security import verify_password, get_password_hash
from app.core.session import issue_session_token
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.config import settings
from app.models.finance import Wallet
from app.models.user import MemberStatus, Role, User
from app.schemas.user import UserRegister, UserLogin, Token, UserResponse
from app.api.deps import get_current_user_id


router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Inscription d'un nouveau membre",
)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
) -> Any:
    """
    Crée un compte membre (rôle USER) et son portefeuille.

    - **email**: Adresse email unique
    - **telephone**: Numéro de téléphone unique (optionnel)
    - **password**: Mot de passe (min 8 caractères, 1 majuscule, 1 chiffre)
    """
    logger.info(f"Tentative d'inscription: {user_data.email}")

    if db.query(User).filter(User.email == user_data.email).first():
        logger.warning(f"Email déjà utilisé: {user_data.email}")
        raise ApiError("Un compte existe déjà avec cet email", 400)

    if user_data.telephone and db.query(User).filter(User.telephone == user_data.telephone).first():
        logger.warning(f"Téléphone déjà utilisé: {user_data.telephone}")
        raise ApiError("Un compte existe déjà avec ce numéro de téléphone", 400)

    user = User(
        nom=user_data.nom,
        prenom=user_data.prenom,
        email=user_data.email,
        telephone=user_data.telephone,
        adresse=user_data.adresse,
        hashed_password=get_password_hash(user_data.password),
        role=Role.USER.value,
        etat=MemberStatus.ACTIF.value,
    )
    db.add(user)
    db.flush()
    db.add(Wallet(member_id=user.id))
    db.commit()
    db.refresh(user)

    logger.info(f"Nouveau membre créé: {user.email} (ID: {user.id})")
    return api_success(UserResponse.model_validate(user), status=status.HTTP_201_CREATED)


@router.post(
    "/login",
    summary="Connexion",
)
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
) -> Any:
    """
    Authentifie un membre et ouvre sa session.

    Le token est renvoyé dans la réponse et posé dans un cookie HttpOnly
    utilisé par les pages.
    """
    logger.info(f"Tentative de connexion: {credentials.email}")

    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.warning(f"Identifiants incorrects pour: {credentials.email}")
        raise ApiError("Email ou mot de passe incorrect", 401)

    if user.etat != MemberStatus.ACTIF.value:
        logger.warning(f"Compte {user.etat}: {user.email}")
        raise ApiError("Votre compte n'est pas actif", 403)

    user.last_login = datetime.utcnow()
    db.commit()

    access_token = issue_session_token(user)
    logger.info(f"Connexion réussie: {user.email}")

    response = api_success(Token(
        access_token=access_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    ))
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return response


@router.post(
    "/logout",
    summary="Déconnexion",
)
async def logout() -> Any:
    """Supprime le cookie de session."""
    response = api_success({"message": "Déconnexion réussie"})
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get(
    "/me",
    summary="Profil du membre connecté",
)
async def me(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    user = db.get(User, user_id)
    if user is None:
        raise ApiError("Utilisateur introuvable", 404)
    return api_success(UserResponse.model_validate(user))
