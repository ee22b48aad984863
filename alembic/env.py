"""
Configuration Alembic pour les migrations de base de données Nafa.

L'URL vient des settings (DATABASE_URL). Un appelant peut aussi fournir
sa propre connexion via config.attributes["connection"] : les migrations
s'exécutent alors dessus, sans créer de moteur.
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool
from sqlalchemy.engine import Connection

from alembic import context

import sys
import os

# Ajouter le répertoire parent au path pour les imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.database import Base

# Enregistre toutes les tables sur Base.metadata
import app.models  # noqa: F401


config = context.config
connexion_fournie = config.attributes.get("connection")

# Une connexion fournie signifie que l'appelant gère déjà la journalisation
if config.config_file_name is not None and connexion_fournie is None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# DATABASE_URL prime sur l'URL d'exemple de alembic.ini
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)


def run_migrations_offline() -> None:
    """
    Génère le SQL des migrations sans connexion (alembic upgrade --sql).
    """
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def _executer(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        # SQLite ne sait pas modifier une colonne en place
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    if connexion_fournie is not None:
        _executer(connexion_fournie)
        return

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _executer(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
