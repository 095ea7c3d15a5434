from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from starlette.concurrency import run_in_threadpool

from app.core.errors import (
    ConfigurationError,
    ConflictError,
    ConflictField,
    NotFoundError,
    Resource,
)
from app.core.security import CredentialHasher
from app.models.role import Role
from app.models.user import User
from app.repositories.roles import RoleRepository
from app.repositories.users import UserRepository
from app.schemas.users import UserCreate, UserResponse, UserUpdate
from app.services.user_mapper import apply_update, to_entity, to_response

"""
User Service.

Rôle (fonctionnel) :
- Porte toutes les règles métier des utilisateurs :
  - lecture par id / email / username, liste complète
  - création : unicité email puis username, hash du mot de passe, résolution du rôle
  - mise à jour partielle : unicité re-vérifiée si email/username changent,
    re-hash si nouveau mot de passe non vide, changement de rôle explicite
  - suppression définitive par id
- Lève des erreurs typées (NotFoundError, ConflictError, ConfigurationError) ;
  la traduction en réponse HTTP est faite par app.core.errors.

Notes :
- Les pré-contrôles d’unicité sont un raccourci : la contrainte UNIQUE en base fait foi.
  Une IntegrityError remontée par le stockage (course entre deux requêtes) devient un conflit.
- Aucun état partagé : 1 instance par requête (voir app.api.deps).
"""

log = logging.getLogger("app.users")


async def ensure_default_role(roles: RoleRepository, name: str) -> Role:
    """Retourne le rôle par défaut ; ConfigurationError s’il n’a pas été provisionné."""
    role = await roles.find_by_name(name)
    if role is None:
        raise ConfigurationError(f"Rôle par défaut '{name}' introuvable en base")
    return role


class UserService:
    """
    Service CRUD utilisateurs.

    Collaborateurs injectés (interfaces étroites) :
    - users : UserRepository
    - roles : RoleRepository
    - hasher : CredentialHasher (hash à sens unique)
    """

    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        hasher: CredentialHasher,
        *,
        default_role_name: str = "UTILISATEUR",
    ) -> None:
        self.users = users
        self.roles = roles
        self.hasher = hasher
        self.default_role_name = default_role_name

    # --- Lecture ---

    async def get_by_id(self, user_id: int) -> UserResponse:
        return to_response(await self._get_or_404(user_id))

    async def get_by_email(self, email: str) -> UserResponse:
        user = await self.users.find_by_email(email)
        if user is None:
            raise NotFoundError(Resource.USER, "email", email)
        return to_response(user)

    async def get_by_username(self, username: str) -> UserResponse:
        user = await self.users.find_by_username(username)
        if user is None:
            raise NotFoundError(Resource.USER, "username", username)
        return to_response(user)

    async def list_all(self) -> List[UserResponse]:
        return [to_response(u) for u in await self.users.list_all()]

    # --- Écriture ---

    async def create(self, payload: UserCreate) -> UserResponse:
        if await self.users.exists_by_email(payload.email):
            raise ConflictError(ConflictField.EMAIL, payload.email)
        if await self.users.exists_by_username(payload.username):
            raise ConflictError(ConflictField.USERNAME, payload.username)

        role = await self._resolve_role(payload.role_id)

        user = to_entity(payload)
        # Remplace le mot de passe en clair (valeur provisoire du mapper)
        user.password_hash = await self._hash(payload.password)
        user.role = role

        saved = await self._save(user)
        log.info(
            "user_created",
            extra={"user_id": saved.id, "username": saved.username, "role_id": role.id},
        )
        return to_response(saved)

    async def update(self, user_id: int, payload: UserUpdate) -> UserResponse:
        user = await self._get_or_404(user_id)

        if payload.provided("email") and payload.email != user.email:
            if await self.users.exists_by_email(payload.email):
                raise ConflictError(ConflictField.EMAIL, payload.email)
        if payload.provided("username") and payload.username != user.username:
            if await self.users.exists_by_username(payload.username):
                raise ConflictError(ConflictField.USERNAME, payload.username)

        # Rôle résolu avant toute mutation (aucun changement partiel si le rôle est inconnu)
        new_role: Optional[Role] = None
        if payload.provided("role_id"):
            new_role = await self._resolve_role(payload.role_id)

        apply_update(payload, user)

        password_changed = bool(payload.password)
        if password_changed:
            user.password_hash = await self._hash(payload.password)
        if new_role is not None:
            user.role = new_role

        saved = await self._save(user)
        log.info("user_updated", extra={"user_id": saved.id, "username": saved.username})
        if password_changed:
            log.info("user_password_changed", extra={"user_id": saved.id})
        return to_response(saved)

    async def delete(self, user_id: int) -> None:
        if not await self.users.exists_by_id(user_id):
            raise NotFoundError(Resource.USER, "id", user_id)
        await self.users.delete_by_id(user_id)
        log.info("user_deleted", extra={"user_id": user_id})

    # --- Helpers ---

    async def _get_or_404(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError(Resource.USER, "id", user_id)
        return user

    async def _resolve_role(self, role_id: Optional[int]) -> Role:
        """
        Résolution du rôle :
        - id fourni -> rôle correspondant, sinon NotFoundError(ROLE)
        - pas d’id -> rôle par défaut (par nom), sinon ConfigurationError (défaut de déploiement)
        """
        if role_id is not None:
            role = await self.roles.get(role_id)
            if role is None:
                raise NotFoundError(Resource.ROLE, "id", role_id)
            return role
        return await ensure_default_role(self.roles, self.default_role_name)

    async def _hash(self, plaintext: str) -> str:
        # Argon2 est coûteux en CPU : exécuté hors de la boucle d’événements
        return await run_in_threadpool(self.hasher.hash, plaintext)

    async def _save(self, user: User) -> User:
        try:
            return await self.users.save(user)
        except IntegrityError as exc:
            # Course entre pré-contrôle et écriture : la contrainte UNIQUE a tranché
            raise ConflictError(ConflictField.GENERIC) from exc
