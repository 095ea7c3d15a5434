from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.role import Role

"""
Model User.

Rôle (fonctionnel) :
- Représente un compte utilisateur (identité + profil + secret hashé).
- Porte exactement un rôle (N utilisateurs -> 1 rôle), chargé en jointure pour
  pouvoir l’exposer dans la réponse sans requête supplémentaire.

Contraintes :
- username et email uniques (contraintes en base : garantie faisant autorité).
- password_hash et remember_token ne sont jamais exposés côté API (voir app.schemas.users).
"""


class User(Base):
    __tablename__ = "users"

    # Identifiant technique (attribué par la base, immuable)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Identité
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # Profil
    nom: Mapped[str] = mapped_column(String(100), nullable=False)
    prenom: Mapped[str] = mapped_column(String(100), nullable=False)
    date_naissance: Mapped[date] = mapped_column(Date, nullable=False)

    # Référence opaque vers la photo (aucune validation de contenu)
    photo_path: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Secrets (jamais exposés)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    remember_token: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Rôle obligatoire
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("role.id"), nullable=False, index=True)
    role: Mapped[Role] = relationship(Role, lazy="joined")

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, username={self.username!r})"
