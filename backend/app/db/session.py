from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.settings import settings

"""
DB Session.

Rôle (fonctionnel) :
- Initialise l’engine SQLAlchemy en mode async (runtime FastAPI).
- Fournit une factory de sessions AsyncSession (AsyncSessionLocal).
- Expose `get_db()` comme dépendance FastAPI : une session par requête (unité de travail).

Notes :
- expire_on_commit=False : les entités restent lisibles après commit (mapping vers la réponse).
- echo=False : pas de log SQL brut (on préfère les logs applicatifs en JSON).
"""

# Engine async utilisé par l’application (SQLAlchemy async)
engine = create_async_engine(settings.DATABASE_URL, echo=False, pool_pre_ping=True)

# Factory de sessions async
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db():
    """Dépendance FastAPI : yield une session DB et garantit sa fermeture."""
    async with AsyncSessionLocal() as session:
        yield session


async def dispose_engine() -> None:
    """Ferme le pool de connexions (arrêt de l’application)."""
    await engine.dispose()
