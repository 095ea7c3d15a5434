from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

"""
Model Role.

Rôle (fonctionnel) :
- Représente un rôle applicatif nommé (ex : UTILISATEUR, ADMINISTRATEUR).
- Les rôles sont provisionnés hors API (migration / script de seed) : le service
  utilisateurs ne fait que les résoudre (par id ou par nom).

Contraintes :
- name unique (garanti par la base).
"""


class Role(Base):
    __tablename__ = "role"

    # Identifiant technique (auto-incrément)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Nom unique du rôle
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"Role(id={self.id!r}, name={self.name!r})"
