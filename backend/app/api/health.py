from fastapi import APIRouter

from app.core.settings import settings

"""
API Health.

Rôle (fonctionnel) :
- Endpoint simple pour vérifier que l’API répond (sans accès base).
"""

router = APIRouter()


@router.get("/health")
def health():
    return {
        "status": "ok",
        "env": settings.ENV,
    }
