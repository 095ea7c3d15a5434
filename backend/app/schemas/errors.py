from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel

"""
Schema ErrorResponse (Pydantic).

Rôle (fonctionnel) :
- Documente (OpenAPI) le corps renvoyé pour toute réponse non-2xx.
- Le payload effectif est construit par app.core.errors.error_payload ;
  ce schéma en décrit la forme exacte pour les clients.
"""


class ErrorResponse(BaseModel):
    """Corps d’erreur uniforme (validationErrors présent uniquement pour ERR_VALIDATION)."""
    timestamp: datetime
    httpStatus: str
    httpStatusCode: int
    errorCode: str
    error: str
    message: str
    path: str
    validationErrors: Optional[Dict[str, str]] = None
