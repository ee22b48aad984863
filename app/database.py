"""
Configuration de la base de données avec SQLAlchemy.
Le moteur est créé paresseusement, une seule fois par processus.
"""

from contextlib import contextmanager
from typing import Generator, Optional
import time

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from app.config import settings
from app.core.logging import logger, log_database_query
from app.core.responses import ApiError


# Factory de sessions (liée au moteur à la première utilisation)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
)

# Classe de base pour tous les modèles
Base = declarative_base()

_engine: Optional[Engine] = None


def _engine_options(url: str) -> dict:
    """Options du moteur selon le backend."""
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool  # une seule connexion partagée
        return options

    return {
        "poolclass": QueuePool,
        "pool_size": 10,  # Nombre de connexions permanentes
        "max_overflow": 20,  # Connexions supplémentaires temporaires
        "pool_timeout": 30,
        "pool_recycle": 1800,  # Recycler les connexions après 30 minutes
        "pool_pre_ping": True,
    }


def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Enregistre le temps de début de la requête."""
    conn.info.setdefault("query_start_time", []).append(time.time())


def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Calcule et log la durée de la requête."""
    total_time = time.time() - conn.info["query_start_time"].pop(-1)
    duration_ms = total_time * 1000

    # Logger uniquement si la requête prend plus de 10ms ou en mode debug
    if duration_ms > 10 or settings.DEBUG:
        log_database_query(
            query=statement,
            duration_ms=duration_ms,
            params=parameters if isinstance(parameters, dict) else None,
        )


def get_engine() -> Engine:
    """
    Retourne le moteur SQLAlchemy du processus, en le créant au premier appel.

    Les rechargements à chaud en développement réimportent les routes mais
    conservent ce module : le pool de connexions n'est donc créé qu'une fois.
    """
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DEBUG and not settings.is_production,
            **_engine_options(settings.DATABASE_URL),
        )
        event.listen(_engine, "before_cursor_execute", _before_cursor_execute)
        event.listen(_engine, "after_cursor_execute", _after_cursor_execute)
        SessionLocal.configure(bind=_engine)
        logger.info(f"Moteur de base de données initialisé ({_engine.url.get_backend_name()})")
    return _engine


def get_db() -> Generator[Session, None, None]:
    """
    Générateur de session de base de données pour l'injection de dépendances.

    Yields:
        Session SQLAlchemy active
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
    except ApiError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Erreur lors de l'utilisation de la session: {e}")
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager pour utilisation hors FastAPI (tâches planifiées, scripts).

    Usage:
        with get_db_context() as db:
            traiter_expirations(db)
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        logger.error(f"Erreur de transaction: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """
    Initialise la base de données en créant toutes les tables.
    À utiliser uniquement en développement ou pour les tests.
    En production, utiliser Alembic pour les migrations.
    """
    import app.models  # noqa: F401  enregistre les tables sur Base

    logger.info("Initialisation de la base de données...")
    Base.metadata.create_all(bind=get_engine())
    logger.info("Tables créées avec succès")


def check_db_connection() -> bool:
    """
    Vérifie que la connexion à la base de données fonctionne.
    """
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Connexion à la base de données établie")
        return True
    except Exception as e:
        logger.error(f"Impossible de se connecter à la base de données: {e}")
        return False


__all__ = [
    "SessionLocal",
    "Base",
    "get_engine",
    "get_db",
    "get_db_context",
    "init_db",
    "check_db_connection",
]
