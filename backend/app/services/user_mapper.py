from __future__ import annotations

from typing import Optional

from app.models.role import Role
from app.models.user import User
from app.schemas.users import RoleResponse, UserCreate, UserResponse, UserUpdate

"""
Mapper User (entité ORM <-> schémas API).

Rôle (fonctionnel) :
- Conversions pures, sans I/O :
  - to_response : User -> UserResponse (rôle embarqué, jamais de secret)
  - to_entity : UserCreate -> nouvel User
  - apply_update : applique les champs simples d’un UserUpdate sur un User existant
- Le mot de passe et le rôle sont gérés explicitement par UserService.
"""

# Champs simples recopiés tels quels lors d’une mise à jour partielle
UPDATABLE_FIELDS = ("username", "nom", "prenom", "email", "date_naissance", "photo_path")


def to_role_response(role: Optional[Role]) -> Optional[RoleResponse]:
    if role is None:
        return None
    return RoleResponse(id=role.id, name=role.name)


def to_response(user: Optional[User]) -> Optional[UserResponse]:
    """User -> UserResponse (None si user est None)."""
    if user is None:
        return None
    return UserResponse(
        id=user.id,
        username=user.username,
        nom=user.nom,
        prenom=user.prenom,
        email=user.email,
        date_naissance=user.date_naissance,
        photo_path=user.photo_path,
        role=to_role_response(user.role),
    )


def to_entity(payload: Optional[UserCreate]) -> Optional[User]:
    """
    UserCreate -> User (non persisté).

    Le mot de passe en clair est recopié dans password_hash comme valeur provisoire :
    le service doit le remplacer par le hash avant toute sauvegarde.
    """
    if payload is None:
        return None
    return User(
        username=payload.username,
        nom=payload.nom,
        prenom=payload.prenom,
        email=payload.email,
        date_naissance=payload.date_naissance,
        photo_path=payload.photo_path,
        password_hash=payload.password,
    )


def apply_update(payload: Optional[UserUpdate], user: Optional[User]) -> None:
    """Mute `user` champ par champ ; un champ absent (ou null) est ignoré."""
    if payload is None or user is None:
        return
    for field in UPDATABLE_FIELDS:
        if payload.provided(field):
            setattr(user, field, getattr(payload, field))
