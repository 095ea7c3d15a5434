"""Environnement Alembic.

Rôle (fonctionnel) :
- Branche Alembic sur la configuration applicative (DATABASE_URL_SYNC, driver psycopg).
- Expose les métadonnées ORM (Base.metadata) pour l’autogénération.
- Supporte les modes offline (SQL généré) et online (connexion directe).
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from app.core.settings import settings
from app.db.base import Base
import app.models  # noqa: F401  (enregistre User / Role dans Base.metadata)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _sqlalchemy_url(raw_url: str) -> str:
    """Force le driver psycopg si l’URL est au format postgres “brut”."""
    if raw_url.startswith("postgresql://"):
        return raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
    if raw_url.startswith("postgres://"):
        return raw_url.replace("postgres://", "postgresql+psycopg://", 1)
    return raw_url


def get_url() -> str:
    return _sqlalchemy_url(settings.DATABASE_URL_SYNC)


def run_migrations_offline() -> None:
    """Mode offline : génère le SQL sans connexion."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Mode online : applique les migrations sur la base."""
    connectable = create_engine(get_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
