"""
app.db

Package base de données : connexion, session et base déclarative.

Contenu :
- base : classe Base SQLAlchemy (metadata des tables role / users).
- session : engine async + sessions AsyncSession pour FastAPI (Depends(get_db)).
- migrations : configuration Alembic (côté sync) via DATABASE_URL_SYNC.
"""
