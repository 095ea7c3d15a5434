from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

"""
Schemas Users (Pydantic).

Rôle (fonctionnel) :
- Définit le contrat HTTP des utilisateurs (création, mise à jour partielle, réponse).
- Valide la structure des entrées (formats, longueurs, champs obligatoires) :
  - refuse les champs inconnus (extra="forbid")
  - strip des champs texte
  - email au format valide, date de naissance dans le passé
  - politique de mot de passe (longueur + classes de caractères)

Notes :
- Noms côté JSON en camelCase (dateNaissance, photoPath, roleId), attributs Python en snake_case.
  Les deux formes sont acceptées en entrée.
- UserResponse n’expose jamais le hash du mot de passe ni le remember token.
- UserUpdate : la présence d’un champ est connue via `model_fields_set`
  (un champ absent n’est pas confondu avec un champ envoyé).
"""

PASSWORD_MIN_LENGTH = 8
PASSWORD_PATTERN = re.compile(r"^(?=.*[0-9])(?=.*[a-z])(?=.*[A-Z])(?=.*[@#$%^&+=!?]).*$")
PASSWORD_POLICY_MESSAGE = (
    "Le mot de passe doit contenir au moins une majuscule, une minuscule, "
    "un chiffre et un caractère spécial"
)

_WIRE_CONFIG = dict(alias_generator=to_camel, populate_by_name=True)


# --- Règles par champ (partagées entre création et mise à jour) ---

def _strip(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip()
    return v


def _check_username(v: str) -> str:
    if not v:
        raise ValueError("Le nom d'utilisateur est obligatoire")
    if not 3 <= len(v) <= 50:
        raise ValueError("Le nom d'utilisateur doit contenir entre 3 et 50 caractères")
    return v


def _check_name(v: str, label: str) -> str:
    if not v:
        raise ValueError(f"Le {label} est obligatoire")
    if len(v) > 100:
        raise ValueError(f"Le {label} ne peut pas dépasser 100 caractères")
    return v


def _check_email(v: str) -> str:
    if not v:
        raise ValueError("L'email est obligatoire")
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("L'email doit être valide") from None
    return v


def _check_birth_date(v: date) -> date:
    if v >= date.today():
        raise ValueError("La date de naissance doit être dans le passé")
    return v


def _check_password(v: str) -> str:
    if not v:
        raise ValueError("Le mot de passe est obligatoire")
    if len(v) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Le mot de passe doit contenir au moins {PASSWORD_MIN_LENGTH} caractères")
    if not PASSWORD_PATTERN.match(v):
        raise ValueError(PASSWORD_POLICY_MESSAGE)
    return v


class UserCreate(BaseModel):
    """Payload de création d’utilisateur (tous les champs d’identité/profil + mot de passe en clair)."""
    model_config = ConfigDict(extra="forbid", **_WIRE_CONFIG)

    username: str
    nom: str
    prenom: str
    email: str
    date_naissance: date
    photo_path: Optional[str] = Field(default=None, max_length=255)
    password: str
    role_id: Optional[int] = None

    @field_validator("username", "nom", "prenom", "email", mode="before")
    @classmethod
    def _strip_strings(cls, v: Any) -> Any:
        """Strip des champs texte (évite espaces en entrée)."""
        return _strip(v)

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        return _check_username(v)

    @field_validator("nom")
    @classmethod
    def _nom(cls, v: str) -> str:
        return _check_name(v, "nom")

    @field_validator("prenom")
    @classmethod
    def _prenom(cls, v: str) -> str:
        return _check_name(v, "prénom")

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("date_naissance")
    @classmethod
    def _date_naissance(cls, v: date) -> date:
        return _check_birth_date(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return _check_password(v)


class UserUpdate(BaseModel):
    """
    Payload de mise à jour partielle.

    - Tout champ est optionnel ; un champ absent (ou null) laisse la valeur stockée intacte.
    - password vide ("") = inchangé ; non vide = re-hashé par le service.
    - roleId absent = rôle inchangé.
    """
    model_config = ConfigDict(extra="forbid", **_WIRE_CONFIG)

    username: Optional[str] = None
    nom: Optional[str] = None
    prenom: Optional[str] = None
    email: Optional[str] = None
    date_naissance: Optional[date] = None
    photo_path: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = None
    role_id: Optional[int] = None

    @field_validator("username", "nom", "prenom", "email", mode="before")
    @classmethod
    def _strip_strings(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("username")
    @classmethod
    def _username(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_username(v)

    @field_validator("nom")
    @classmethod
    def _nom(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_name(v, "nom")

    @field_validator("prenom")
    @classmethod
    def _prenom(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_name(v, "prénom")

    @field_validator("email")
    @classmethod
    def _email(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_email(v)

    @field_validator("date_naissance")
    @classmethod
    def _date_naissance(cls, v: Optional[date]) -> Optional[date]:
        return None if v is None else _check_birth_date(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: Optional[str]) -> Optional[str]:
        # "" est accepté : le service le traite comme “mot de passe inchangé”
        if v is None or v == "":
            return v
        return _check_password(v)

    def provided(self, field: str) -> bool:
        """True si le champ a été envoyé avec une valeur non nulle."""
        return field in self.model_fields_set and getattr(self, field) is not None


class RoleResponse(BaseModel):
    """Vue minimale d’un rôle (id + nom)."""
    model_config = ConfigDict(from_attributes=True, **_WIRE_CONFIG)

    id: int
    name: str


class UserResponse(BaseModel):
    """Sortie API pour un utilisateur (sans mot de passe ni remember token)."""
    model_config = ConfigDict(from_attributes=True, **_WIRE_CONFIG)

    id: int
    username: str
    nom: str
    prenom: str
    email: str
    date_naissance: date
    photo_path: Optional[str] = None
    role: Optional[RoleResponse] = None
