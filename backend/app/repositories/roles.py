from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.role import Role

"""
Repository Rôles.

Rôle (fonctionnel) :
- Résout des rôles existants (par id ou par nom).
- Les rôles sont provisionnés hors application (migration / script de seed) :
  aucune création ni suppression ici.
"""


class RoleRepository(Protocol):
    async def get(self, role_id: int) -> Optional[Role]:
        ...

    async def find_by_name(self, name: str) -> Optional[Role]:
        ...


class SqlAlchemyRoleRepository:
    """Implémentation SQLAlchemy (async) de RoleRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, role_id: int) -> Optional[Role]:
        return await self.session.get(Role, role_id)

    async def find_by_name(self, name: str) -> Optional[Role]:
        res = await self.session.execute(select(Role).where(Role.name == name))
        return res.scalar_one_or_none()
