from fastapi import APIRouter

from app.core.settings import settings

from .health import router as health_router
from .status import router as status_router
from .users import router as users_router

"""
Router principal de l’API.

Rôle (fonctionnel) :
- Regroupe les routeurs par domaine (health, system, users).
- Les routes métier sont montées sous le préfixe API (par défaut /api).
- Sert de point d’entrée unique pour l’inclusion dans l’application FastAPI.
"""

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(status_router)
api_router.include_router(users_router, prefix=settings.API_PREFIX)
