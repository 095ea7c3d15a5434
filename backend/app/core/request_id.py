from __future__ import annotations

import re
import uuid
from contextvars import ContextVar

"""
Core Request ID.

Rôle (fonctionnel) :
- Identifiant de corrélation (request_id) du contexte courant (ContextVar, sûr en async).
- Repris du header entrant X-Request-Id s’il est exploitable, sinon généré (UUID4),
  puis renvoyé au client dans le même header.
- Lu par app.core.logging pour enrichir chaque ligne de log.
"""

REQUEST_ID_HEADER = "X-Request-Id"

# Valeur entrante acceptée telle quelle : courte, sans espace ni caractère de contrôle
_SAFE_RID = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(rid: str | None) -> None:
    _request_id.set(rid)


def get_request_id() -> str | None:
    return _request_id.get()


def ensure_request_id(incoming: str | None = None) -> str:
    """Fixe le request_id du contexte : valeur entrante si sûre, UUID4 sinon."""
    candidate = (incoming or "").strip()
    rid = candidate if _SAFE_RID.match(candidate) else str(uuid.uuid4())
    set_request_id(rid)
    return rid
