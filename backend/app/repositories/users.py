from __future__ import annotations

from typing import List, Optional, Protocol

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User

"""
Repository Utilisateurs.

Rôle (fonctionnel) :
- Stockage durable des utilisateurs, indexé par id.
- Recherches dérivées par email / username et prédicats d’existence
  (utilisés par le service pour les pré-contrôles d’unicité).

Notes :
- Les contraintes UNIQUE de la base restent la garantie qui fait foi :
  `save` laisse remonter IntegrityError (après rollback) pour que le service
  la traduise en conflit.
- L’ordre de `list_all` est l’ordre natif du stockage (aucun tri imposé).
"""


class UserRepository(Protocol):
    async def get(self, user_id: int) -> Optional[User]:
        ...

    async def list_all(self) -> List[User]:
        ...

    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    async def find_by_username(self, username: str) -> Optional[User]:
        ...

    async def exists_by_id(self, user_id: int) -> bool:
        ...

    async def exists_by_email(self, email: str) -> bool:
        ...

    async def exists_by_username(self, username: str) -> bool:
        ...

    async def save(self, user: User) -> User:
        """Insère ou met à jour ; lève IntegrityError si une contrainte d’unicité est violée."""
        ...

    async def delete_by_id(self, user_id: int) -> None:
        ...


class SqlAlchemyUserRepository:
    """Implémentation SQLAlchemy (async) de UserRepository (1 session = 1 requête HTTP)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def list_all(self) -> List[User]:
        res = await self.session.execute(select(User))
        return list(res.scalars().unique().all())

    async def find_by_email(self, email: str) -> Optional[User]:
        res = await self.session.execute(select(User).where(User.email == email))
        return res.scalars().unique().one_or_none()

    async def find_by_username(self, username: str) -> Optional[User]:
        res = await self.session.execute(select(User).where(User.username == username))
        return res.scalars().unique().one_or_none()

    async def exists_by_id(self, user_id: int) -> bool:
        return bool(await self.session.scalar(select(exists().where(User.id == user_id))))

    async def exists_by_email(self, email: str) -> bool:
        return bool(await self.session.scalar(select(exists().where(User.email == email))))

    async def exists_by_username(self, username: str) -> bool:
        return bool(await self.session.scalar(select(exists().where(User.username == username))))

    async def save(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        # Recharge l’id attribué + la relation role (réponse complète)
        await self.session.refresh(user, attribute_names=["role"])
        return user

    async def delete_by_id(self, user_id: int) -> None:
        await self.session.execute(delete(User).where(User.id == user_id))
        await self.session.commit()
