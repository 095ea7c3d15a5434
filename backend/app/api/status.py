from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.settings import settings
from app.db.session import get_db
from app.models.role import Role
from app.models.user import User

"""
API System Status.

Rôle (fonctionnel) :
- Expose un endpoint de statut pour le monitoring.
- Vérifie la disponibilité de la base (requête simple).
- Vérifie que le rôle par défaut est bien provisionné.
- Donne le nombre d’utilisateurs enregistrés.
"""

router = APIRouter(prefix="/system", tags=["system"])
log = logging.getLogger("app.system")


@router.get("/status")
async def system_status(db: AsyncSession = Depends(get_db)):
    # 1) DB check (requête minimale)
    db_ok = True
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        log.warning("db_check_failed: %s", exc)
        db_ok = False

    # 2) Rôle par défaut + compteur utilisateurs (uniquement si la base répond)
    default_role_ok = False
    user_count = None
    if db_ok:
        try:
            role_id = await db.scalar(select(Role.id).where(Role.name == settings.DEFAULT_ROLE_NAME))
            default_role_ok = role_id is not None
            user_count = int(await db.scalar(select(func.count()).select_from(User)) or 0)
        except SQLAlchemyError as exc:
            log.warning("status_query_failed: %s", exc)

    # Réponse (format constant) pour monitoring / UI
    return {
        "ok": bool(db_ok and default_role_ok),
        "db": {"ok": db_ok},
        "default_role": {"name": settings.DEFAULT_ROLE_NAME, "ok": default_role_ok},
        "users": {"count": user_count},
        "ts": datetime.now(timezone.utc).isoformat(),
    }
