from __future__ import annotations

import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.router import api_router
from app.core.settings import settings
from app.core.logging import setup_logging
from app.core.errors import AppError, ConfigurationError, classify, error_payload, log_error
from app.core.request_id import REQUEST_ID_HEADER, ensure_request_id, set_request_id
from app.db.session import AsyncSessionLocal, dispose_engine
from app.repositories.roles import SqlAlchemyRoleRepository
from app.services.user_service import ensure_default_role

"""
Application FastAPI (entrypoint).

Rôle (fonctionnel) :
- Configure l’application (settings, CORS, middlewares, routers).
- Vérifie au démarrage que le rôle par défaut existe (sinon refus de démarrer).
- Centralise l’observabilité :
  - request_id propagé (X-Request-Id)
  - logs structurés JSON (timing, status, client_ip)
  - seuil de “slow request”
- Uniformise les erreurs côté client (format error_payload, classification unique
  dans app.core.errors.classify).

Ce fichier ne contient pas de logique métier :
- La logique métier est dans app.services
- Les routes sont dans app.api
- Les composants transverses sont dans app.core
"""


# --- Force UTF-8 in Content-Type for JSON responses ---
class UTF8JSONResponse(JSONResponse):
    """Réponse JSON avec charset UTF-8 explicite (cohérent sur tous les endpoints)."""
    media_type = "application/json; charset=utf-8"


# --- Logging (niveau depuis .env si dispo) ---
setup_logging(settings.LOG_LEVEL)

# logger principal projet
log = logging.getLogger("app")

# logger dédié observabilité HTTP (séparé du métier)
http_log = logging.getLogger("app.http")

# seuil slow request (ms)
SLOW_MS = int(settings.SLOW_REQUEST_MS)


def _split_origins(value: str) -> list[str]:
    """Parse une liste d’origines CORS depuis une string 'a,b,c'."""
    if not value:
        return []
    return [o.strip() for o in value.split(",") if o.strip()]


# --- Cycle de vie : contrôle du rôle par défaut + fermeture du pool ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CHECK_DEFAULT_ROLE_ON_STARTUP:
        async with AsyncSessionLocal() as session:
            try:
                role = await ensure_default_role(SqlAlchemyRoleRepository(session), settings.DEFAULT_ROLE_NAME)
            except ConfigurationError as exc:
                log.critical("startup_aborted: %s", exc.message)
                raise
        log.info("default_role_ok", extra={"role_id": role.id})

    yield

    await dispose_engine()


app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    default_response_class=UTF8JSONResponse,
    lifespan=lifespan,
)

# --- CORS ---
origins = _split_origins(settings.CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
    max_age=3600,
)

# --- Routers ---
app.include_router(api_router)


# --- Middleware observabilité : request_id + timing + logs structurés ---
@app.middleware("http")
async def request_observability(request: Request, call_next):
    # Prend le header s’il existe, sinon génère un UUID
    rid = ensure_request_id(request.headers.get(REQUEST_ID_HEADER))
    request.state.request_id = rid

    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        return response
    except Exception as exc:
        # Exception non gérée : réponse construite ici, tant que le request_id est encore actif
        response = _error_response(request, exc)
        return response
    finally:
        duration_ms = int((time.perf_counter() - start) * 1000)

        # Toujours renvoyer le request id au client
        if response is not None:
            response.headers[REQUEST_ID_HEADER] = rid

        # Slow request => WARNING, sinon INFO
        level = logging.WARNING if duration_ms >= SLOW_MS else logging.INFO
        http_log.log(
            level,
            "request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": getattr(response, "status_code", None),
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else None,
            },
        )

        # Reset contextvar (propre en cas de réutilisation event loop / worker)
        set_request_id(None)


# --- Error handlers : format standard, pas de stacktrace côté client ---
def _error_response(request: Request, exc: Exception) -> UTF8JSONResponse:
    """Classe l’exception, la journalise, puis renvoie le payload standard."""
    method = request.method
    path = request.url.path
    classified = classify(exc, method=method, path=path)
    log_error(exc, classified, method=method, path=path)

    headers = None
    if isinstance(exc, StarletteHTTPException) and exc.headers:
        # ex : en-tête Allow sur un 405
        headers = dict(exc.headers)

    return UTF8JSONResponse(
        status_code=classified.status,
        content=error_payload(
            status=classified.status,
            error_code=classified.error_code,
            message=classified.message,
            path=path,
            validation_errors=classified.validation_errors,
        ),
        headers=headers,
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Erreurs métier typées (not found, conflit, configuration…) -> payload standard."""
    return _error_response(request, exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Erreurs HTTP natives (404 route inconnue, 405, etc.) -> payload standard."""
    return _error_response(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Erreurs de validation (corps, paramètres) -> 400 + validationErrors si champs."""
    return _error_response(request, exc)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Erreurs base : intégrité -> 409, autres -> 500 (détail uniquement dans les logs)."""
    return _error_response(request, exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Fallback (hors middleware observabilité) : toute exception non gérée -> 500 + log serveur."""
    return _error_response(request, exc)
