"""
Fixtures partagées des tests.

- FakeUserRepository / FakeRoleRepository : stockage en mémoire conforme aux
  interfaces UserRepository / RoleRepository (aucune base nécessaire).
- FakeHasher : hash déterministe ("hashed::" + mot de passe) pour vérifier
  ce que le service persiste.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.role import Role
from app.models.user import User
from app.services.user_service import UserService


class FakeHasher:
    def hash(self, plaintext: str) -> str:
        return f"hashed::{plaintext}"

    def verify(self, plaintext: str, hashed: str) -> bool:
        return hashed == self.hash(plaintext)


class FakeRoleRepository:
    def __init__(self, names: tuple = ("UTILISATEUR", "ADMINISTRATEUR")) -> None:
        self.rows: Dict[int, Role] = {}
        for i, name in enumerate(names, start=1):
            self.rows[i] = Role(id=i, name=name)

    async def get(self, role_id: int) -> Optional[Role]:
        return self.rows.get(role_id)

    async def find_by_name(self, name: str) -> Optional[Role]:
        return next((r for r in self.rows.values() if r.name == name), None)


class FakeUserRepository:
    """Stockage en mémoire ; unicité email/username vérifiée à l’écriture comme en base."""

    def __init__(self) -> None:
        self.rows: Dict[int, User] = {}
        self.save_calls = 0
        self.delete_calls = 0
        # Simule une course : la prochaine écriture est rejetée par la contrainte UNIQUE
        self.reject_next_save = False
        self._next_id = 1

    async def get(self, user_id: int) -> Optional[User]:
        return self.rows.get(user_id)

    async def list_all(self) -> List[User]:
        return list(self.rows.values())

    async def find_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.email == email), None)

    async def find_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.username == username), None)

    async def exists_by_id(self, user_id: int) -> bool:
        return user_id in self.rows

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def exists_by_username(self, username: str) -> bool:
        return await self.find_by_username(username) is not None

    async def save(self, user: User) -> User:
        self.save_calls += 1
        duplicate = any(
            other is not user and (other.email == user.email or other.username == user.username)
            for other in self.rows.values()
        )
        if self.reject_next_save or duplicate:
            self.reject_next_save = False
            raise IntegrityError("INSERT INTO users", {}, Exception("duplicate key value"))
        if user.id is None:
            user.id = self._next_id
            self._next_id += 1
        if user.role is not None:
            user.role_id = user.role.id
        self.rows[user.id] = user
        return user

    async def delete_by_id(self, user_id: int) -> None:
        self.delete_calls += 1
        del self.rows[user_id]

    def add(self, **fields) -> User:
        """Insère directement un utilisateur (mise en place des tests)."""
        user = User(**fields)
        user.id = self._next_id
        self._next_id += 1
        user.role_id = user.role.id
        self.rows[user.id] = user
        return user


@pytest.fixture
def roles() -> FakeRoleRepository:
    return FakeRoleRepository()


@pytest.fixture
def users() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def hasher() -> FakeHasher:
    return FakeHasher()


@pytest.fixture
def service(users, roles, hasher) -> UserService:
    return UserService(users, roles, hasher, default_role_name="UTILISATEUR")


@pytest.fixture
def existing_user(users, roles) -> User:
    return users.add(
        username="janedoe",
        nom="Doe",
        prenom="Jane",
        email="jane@x.com",
        date_naissance=date(1992, 5, 17),
        photo_path="photos/jane.png",
        password_hash="hashed::Initial123!",
        remember_token="tok-123",
        role=roles.rows[1],
    )


@pytest.fixture
def make_payload():
    """Fabrique de payload JSON (camelCase) de création valide."""

    def _make(**overrides) -> dict:
        payload = {
            "username": "johndoe",
            "nom": "Doe",
            "prenom": "John",
            "email": "john@x.com",
            "dateNaissance": "1990-01-01",
            "password": "Password123!",
        }
        payload.update(overrides)
        return payload

    return _make
