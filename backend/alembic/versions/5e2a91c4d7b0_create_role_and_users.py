"""Création des tables role et users + rôles initiaux.

Rôle (fonctionnel) :
- role : rôles applicatifs (nom unique).
- users : comptes utilisateurs (username et email uniques, 1 rôle obligatoire).
- Insère les rôles UTILISATEUR (rôle par défaut) et ADMINISTRATEUR,
  pour qu’une base fraîchement migrée permette le démarrage de l’API.

Revision ID: 5e2a91c4d7b0
Revises:
Create Date: 2026-02-26
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Identifiants Alembic
revision: str = "5e2a91c4d7b0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SEED_ROLES = ("UTILISATEUR", "ADMINISTRATEUR")


def upgrade() -> None:
    """Application des changements de schéma."""
    role_table = op.create_table(
        "role",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_role"),
        sa.UniqueConstraint("name", name="uq_role_name"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("nom", sa.String(length=100), nullable=False),
        sa.Column("prenom", sa.String(length=100), nullable=False),
        sa.Column("date_naissance", sa.Date(), nullable=False),
        sa.Column("photo_path", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("remember_token", sa.String(length=100), nullable=True),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], name="fk_users_role_id_role"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_role_id", "users", ["role_id"], unique=False)

    # Rôles initiaux (le premier est le rôle par défaut)
    op.bulk_insert(role_table, [{"name": name} for name in SEED_ROLES])


def downgrade() -> None:
    """Retour arrière des changements de schéma."""
    op.drop_index("ix_users_role_id", table_name="users")
    op.drop_table("users")
    op.drop_table("role")
