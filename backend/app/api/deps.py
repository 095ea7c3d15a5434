from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import password_hasher
from app.core.settings import settings
from app.db.session import get_db
from app.repositories.roles import SqlAlchemyRoleRepository
from app.repositories.users import SqlAlchemyUserRepository
from app.services.user_service import UserService

"""
Dépendances API.

Rôle (fonctionnel) :
- Centralise les dépendances réutilisables sur les routes.
- Ici : construction d’un UserService par requête (session DB + repositories + hasher).
- Les tests remplacent `get_user_service` via app.dependency_overrides.
"""


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(
        SqlAlchemyUserRepository(db),
        SqlAlchemyRoleRepository(db),
        password_hasher,
        default_role_name=settings.DEFAULT_ROLE_NAME,
    )


# Dépendance prête à l’emploi pour les endpoints utilisateurs
UserServiceDep = Depends(get_user_service)
