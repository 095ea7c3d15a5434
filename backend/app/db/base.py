from sqlalchemy.orm import DeclarativeBase

"""
DB Base.

Rôle (fonctionnel) :
- Classe Base SQLAlchemy commune aux entités persistées (User, Role).
- Sa metadata est la cible d’Alembic (migrations) et de create_all (tests / démo).
"""


class Base(DeclarativeBase):
    """Classe racine ORM (SQLAlchemy Declarative)."""
    pass
