# backend/scripts/seed_roles.py
from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

# Permet de lancer le script depuis backend/ sans souci d'import
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from app.core.security import password_hasher
from app.core.settings import settings
from app.models.role import Role
from app.models.user import User

"""
Seed des rôles (CLI).

Rôle (fonctionnel) :
- Insère les rôles applicatifs manquants (idempotent : relançable sans doublon).
- Option --with-demo-user : crée un compte de démonstration (mot de passe hashé Argon2)
  rattaché au rôle par défaut, s’il n’existe pas déjà.

Usage :
  python scripts/seed_roles.py
  python scripts/seed_roles.py --with-demo-user --demo-password 'Demo1234!'
"""

# Le rôle par défaut (settings) est toujours inclus
EXTRA_ROLES = ["ADMINISTRATEUR"]


def seed(with_demo_user: bool, demo_password: str) -> None:
    engine = create_engine(settings.DATABASE_URL_SYNC, future=True)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    role_names = [settings.DEFAULT_ROLE_NAME] + [r for r in EXTRA_ROLES if r != settings.DEFAULT_ROLE_NAME]

    with SessionLocal() as db:
        existing = set(db.scalars(select(Role.name).where(Role.name.in_(role_names))).all())
        created = [name for name in role_names if name not in existing]
        db.add_all([Role(name=name) for name in created])
        db.commit()

        print("✅ Rôles à jour.")
        print(f"   - Créés: {', '.join(created) if created else 'aucun'}")

        if not with_demo_user:
            return

        if db.scalar(select(User.id).where(User.username == "demo")) is not None:
            print("ℹ️  Compte demo déjà présent (inchangé).")
            return

        default_role = db.scalars(select(Role).where(Role.name == settings.DEFAULT_ROLE_NAME)).one()
        db.add(
            User(
                username="demo",
                nom="Demo",
                prenom="Compte",
                email="demo@squatrbnb.fr",
                date_naissance=date(1990, 1, 1),
                password_hash=password_hasher.hash(demo_password),
                role_id=default_role.id,
            )
        )
        db.commit()
        print("✅ Compte demo créé (username: demo).")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--with-demo-user", action="store_true", help="Crée aussi un compte de démonstration")
    parser.add_argument("--demo-password", default="Demo1234!", help="Mot de passe du compte demo")
    args = parser.parse_args()

    seed(with_demo_user=args.with_demo_user, demo_password=args.demo_password)


if __name__ == "__main__":
    main()
