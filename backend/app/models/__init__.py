"""
app.models

Package ORM (SQLAlchemy) : définition des entités persistées en base.

Rôle (fonctionnel) :
- Centralise les entités de l’application (User, Role).
- Permet des imports plus simples depuis app.models (ex: from app.models import User).
- Expose explicitement l’API publique du package via __all__.
"""

from app.models.role import Role
from app.models.user import User

__all__ = ["Role", "User"]
