"""
Nafa - Point d'entrée principal de l'application.
Plateforme d'administration d'une coopérative communautaire.
"""

import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import check_db_connection, init_db
from app.core.logging import setup_logging, logger, log_request
from app.core.responses import ApiError, api_error
from app.core.session import session_from_token
from app.api.v1.router import api_router
from app.web.pages import PageRedirect, redirect, router as pages_router


# Configuration du logging au démarrage
setup_logging(
    log_level=settings.LOG_LEVEL or ("DEBUG" if settings.DEBUG else "INFO"),
    log_file=settings.LOG_FILE,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestionnaire de cycle de vie de l'application.
    Exécuté au démarrage et à l'arrêt.
    """
    # Démarrage
    logger.info("=" * 60)
    logger.info(f"Démarrage de {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environnement: {settings.ENVIRONMENT}")
    logger.info("=" * 60)

    # Vérifier la connexion à la base de données
    if not check_db_connection():
        logger.error("Impossible de se connecter à la base de données!")
        # En mode développement, on peut initialiser la base
        if settings.DEBUG:
            logger.info("Mode DEBUG: Tentative d'initialisation de la base...")
            try:
                init_db()
            except SQLAlchemyError as e:
                logger.error(f"Erreur d'initialisation: {e}")

    logger.info("Application prête à recevoir des requêtes")

    yield

    # Arrêt
    logger.info("Arrêt de l'application...")
    logger.info("Application arrêtée proprement")


# Création de l'application FastAPI
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## Nafa - Administration d'une coopérative communautaire

    ### Fonctionnalités principales:

    * **Membres et clients** - Comptes, états, gestionnaires
    * **Crédits alimentaires** - Génération automatique, achats, expiration
    * **Stock** - Produits, réceptions, ajustements
    * **Tontines** - Membres, cycles, pots
    * **Notifications** - Alertes in-app et journal d'audit

    ### Rôles:

    * **SUPER_ADMIN / ADMIN** - Administration de la coopérative
    * **USER** - Membre, éventuellement gestionnaire (caissier, comptable,
      magasinier, logistique, agent terrain, responsable de point de vente...)
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)


# Configuration CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware de logging des requêtes
@app.middleware("http")
async def logging_middleware(request: Request, call_next: Callable) -> Response:
    """
    Middleware pour logger toutes les requêtes HTTP.
    """
    start_time = time.time()

    # Récupérer l'ID utilisateur de la session si présente
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:]
    session = session_from_token(token)
    user_id = session.user_id if session else None

    # Exécuter la requête
    response = await call_next(request)

    # Calculer la durée
    duration_ms = (time.time() - start_time) * 1000

    log_request(
        method=request.method,
        url=str(request.url.path),
        status_code=response.status_code,
        duration_ms=duration_ms,
        user_id=user_id,
    )

    # Ajouter des headers de performance
    response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"

    return response


# Erreurs métier : {"error": message}
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Erreur {exc.status_code} sur {request.url.path}: {exc.message}")
    else:
        logger.debug(f"Erreur {exc.status_code} sur {request.url.path}: {exc.message}")
    return api_error(exc.message, exc.status_code)


# Redirections des pages protégées
@app.exception_handler(PageRedirect)
async def page_redirect_handler(request: Request, exc: PageRedirect) -> Response:
    return redirect(exc.url)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Erreurs HTTP du framework (404 de routage, 405...) dans l'enveloppe commune."""
    response = api_error(str(exc.detail), exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


# Gestionnaire d'erreurs de validation
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Gestionnaire personnalisé pour les erreurs de validation Pydantic.
    """
    logger.warning(f"Erreur de validation: {exc.errors()}")

    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(x) for x in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Données invalides",
            "errors": errors,
        },
    )


# Gestionnaire d'erreurs SQLAlchemy
@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """
    Gestionnaire pour les erreurs de base de données.
    """
    logger.error(f"Erreur SQLAlchemy: {exc}")
    return api_error("Erreur de base de données", status.HTTP_500_INTERNAL_SERVER_ERROR)


# Gestionnaire d'erreurs génériques
@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Gestionnaire pour toutes les autres exceptions.
    """
    logger.opt(exception=exc).error(f"Erreur non gérée: {exc}")

    if settings.DEBUG:
        return api_error(f"{type(exc).__name__}: {exc}", status.HTTP_500_INTERNAL_SERVER_ERROR)
    return api_error("Une erreur interne est survenue", status.HTTP_500_INTERNAL_SERVER_ERROR)


# Inclusion du routeur API
app.include_router(api_router, prefix="/api")

# Pages
app.include_router(pages_router)


# Route de santé
@app.get(
    "/health",
    tags=["Système"],
    summary="Vérification de l'état de l'application",
)
async def health_check():
    """
    Endpoint de health check pour les load balancers et monitoring.
    """
    db_status = "ok" if check_db_connection() else "error"

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": db_status,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
