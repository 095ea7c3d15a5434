"""
app.repositories

Accès aux données (ports + adaptateurs).

Rôle (fonctionnel) :
- Déclare des interfaces étroites (Protocol) consommées par les services :
  - UserRepository : CRUD par id + recherches/existence par email et username
  - RoleRepository : recherche par id et par nom
- Fournit les implémentations SQLAlchemy (AsyncSession) utilisées en production.
- Les tests remplacent ces implémentations par des fakes en mémoire.
"""

from app.repositories.roles import RoleRepository, SqlAlchemyRoleRepository
from app.repositories.users import SqlAlchemyUserRepository, UserRepository

__all__ = [
    "RoleRepository",
    "SqlAlchemyRoleRepository",
    "SqlAlchemyUserRepository",
    "UserRepository",
]
