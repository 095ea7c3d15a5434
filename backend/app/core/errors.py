from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

"""
Core Errors.

Rôle (fonctionnel) :
- Définit la taxonomie fermée des erreurs de l’API (ErrorCode : code machine + titre lisible).
- Fournit les exceptions applicatives levées par les services (NotFoundError, ConflictError, …).
  Chaque exception porte explicitement sa sous-catégorie (ressource, champ en conflit) :
  aucune classification par inspection du message.
- Classe toute exception (métier, framework, base de données) en une réponse unique
  (`classify`) et construit le payload d’erreur homogène (`error_payload`).
- Journalise chaque erreur avec une sévérité cohérente avec sa catégorie (`log_error`).

Convention de réponse (exemple) :
{
  "timestamp": "2026-02-26T14:30:00+00:00",
  "httpStatus": "BAD_REQUEST",
  "httpStatusCode": 400,
  "errorCode": "ERR_VALIDATION",
  "error": "Données invalides",
  "message": "Les données du formulaire sont invalides. Veuillez corriger les champs indiqués.",
  "path": "/api/users",
  "validationErrors": {"email": "L'email doit être valide"}
}
"""

log = logging.getLogger("app.errors")


class ErrorCode(Enum):
    """Codes d’erreur métier stables (utilisables côté front pour brancher l’affichage)."""

    # --- Validation (400) ---
    VALIDATION_ERROR = ("ERR_VALIDATION", "Données invalides")
    INVALID_PASSWORD_FORMAT = ("ERR_PASSWORD_FORMAT", "Format du mot de passe invalide")
    INVALID_EMAIL_FORMAT = ("ERR_EMAIL_FORMAT", "Format de l'email invalide")
    INVALID_DATE = ("ERR_DATE", "Date invalide")
    MISSING_REQUIRED_FIELD = ("ERR_MISSING_FIELD", "Champ obligatoire manquant")
    INVALID_ARGUMENT = ("ERR_INVALID_ARGUMENT", "Argument invalide")

    # --- Conflit (409) ---
    EMAIL_ALREADY_EXISTS = ("ERR_EMAIL_EXISTS", "Email déjà utilisé")
    USERNAME_ALREADY_EXISTS = ("ERR_USERNAME_EXISTS", "Nom d'utilisateur déjà utilisé")
    DATA_CONFLICT = ("ERR_CONFLICT", "Conflit de données")

    # --- Non trouvé (404) ---
    USER_NOT_FOUND = ("ERR_USER_NOT_FOUND", "Utilisateur non trouvé")
    ROLE_NOT_FOUND = ("ERR_ROLE_NOT_FOUND", "Rôle non trouvé")
    RESOURCE_NOT_FOUND = ("ERR_NOT_FOUND", "Ressource non trouvée")

    # --- Méthode (405) ---
    METHOD_NOT_ALLOWED = ("ERR_METHOD_NOT_ALLOWED", "Méthode non autorisée")

    # --- Serveur (500) ---
    INTERNAL_ERROR = ("ERR_INTERNAL", "Erreur interne du serveur")
    DATABASE_ERROR = ("ERR_DATABASE", "Erreur de base de données")

    def __init__(self, code: str, title: str) -> None:
        self.code = code
        self.title = title


class Resource(str, Enum):
    """Ressource introuvable (porte le libellé utilisé dans le message)."""
    USER = "Utilisateur"
    ROLE = "Rôle"
    GENERIC = "Ressource"


class ConflictField(str, Enum):
    """Champ unique à l’origine d’un conflit."""
    EMAIL = "email"
    USERNAME = "username"
    GENERIC = "generic"


_NOT_FOUND_CODES = {
    Resource.USER: ErrorCode.USER_NOT_FOUND,
    Resource.ROLE: ErrorCode.ROLE_NOT_FOUND,
    Resource.GENERIC: ErrorCode.RESOURCE_NOT_FOUND,
}

_CONFLICT_CODES = {
    ConflictField.EMAIL: ErrorCode.EMAIL_ALREADY_EXISTS,
    ConflictField.USERNAME: ErrorCode.USERNAME_ALREADY_EXISTS,
    ConflictField.GENERIC: ErrorCode.DATA_CONFLICT,
}

GENERIC_INTERNAL_MESSAGE = (
    "Une erreur inattendue s'est produite. Veuillez réessayer ou contacter le support."
)


class AppError(Exception):
    """
    Exception applicative de base.

    Chaque sous-classe fixe son statut HTTP et son ErrorCode : la couche API n’a
    plus qu’à traduire (voir `classify`).
    """

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """Aucun enregistrement ne correspond (utilisateur, rôle, …)."""

    status_code = 404

    def __init__(self, resource: Resource, field: str, value: Any) -> None:
        super().__init__(f"{resource.value} non trouvé(e) avec {field} : '{value}'")
        self.resource = resource
        self.field = field
        self.value = value
        self.error_code = _NOT_FOUND_CODES[resource]


class ConflictError(AppError):
    """Violation d’unicité (détectée par pré-contrôle ou remontée par la base)."""

    status_code = 409

    def __init__(
        self,
        field: ConflictField,
        value: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        if message is None:
            if field is ConflictField.EMAIL:
                message = f"Email déjà utilisé: {value}"
            elif field is ConflictField.USERNAME:
                message = f"Username déjà utilisé: {value}"
            else:
                message = "Conflit de données"
        super().__init__(message)
        self.field = field
        self.value = value
        self.error_code = _CONFLICT_CODES[field]


class InvalidArgumentError(AppError, ValueError):
    """Argument invalide levé explicitement par le code applicatif."""

    status_code = 400
    error_code = ErrorCode.INVALID_ARGUMENT


class ConfigurationError(AppError):
    """
    Défaut de déploiement (ex : rôle par défaut absent de la base).

    Ce n’est pas une erreur client : le détail est journalisé, jamais renvoyé.
    """

    status_code = 500
    error_code = ErrorCode.INTERNAL_ERROR


@dataclass(frozen=True)
class ClassifiedError:
    """Résultat de la classification d’une exception (avant sérialisation)."""
    status: int
    error_code: ErrorCode
    message: str
    validation_errors: Optional[Dict[str, str]] = None


def now_iso() -> str:
    """Timestamp ISO-8601 en UTC (utilisé dans toutes les erreurs)."""
    return datetime.now(timezone.utc).isoformat()


def error_payload(
    *,
    status: int,
    error_code: ErrorCode,
    message: str,
    path: str,
    validation_errors: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Construit un payload d’erreur homogène pour l’API (sans stacktrace)."""
    payload: Dict[str, Any] = {
        "timestamp": now_iso(),
        "httpStatus": HTTPStatus(status).name,
        "httpStatusCode": status,
        "errorCode": error_code.code,
        "error": error_code.title,
        "message": message,
        "path": path,
    }
    if validation_errors is not None:
        payload["validationErrors"] = validation_errors
    return payload


# --- Validation (Pydantic / FastAPI) ---

_TYPE_NAMES = {
    "int_parsing": "int",
    "int_type": "int",
    "float_parsing": "float",
    "bool_parsing": "bool",
    "date_parsing": "date",
    "date_from_datetime_parsing": "date",
    "uuid_parsing": "UUID",
}

_PARAM_LOCATIONS = ("path", "query", "header", "cookie")


def _field_message(err: Dict[str, Any]) -> str:
    """Traduit une erreur Pydantic en message lisible (FR) pour un champ du corps."""
    etype = err.get("type", "")
    ctx = err.get("ctx") or {}

    if etype == "value_error" and "error" in ctx:
        # Message levé par nos field_validator (déjà rédigé)
        return str(ctx["error"])
    if etype == "missing":
        return "Ce champ est obligatoire"
    if etype == "string_too_short":
        return f"Doit contenir au moins {ctx.get('min_length')} caractère(s)"
    if etype == "string_too_long":
        return f"Ne peut pas dépasser {ctx.get('max_length')} caractères"
    if etype in ("date_parsing", "date_from_datetime_parsing", "date_type"):
        return "Date invalide (format attendu : yyyy-MM-dd)"
    if etype == "extra_forbidden":
        return "Champ non autorisé"
    return str(err.get("msg", "Valeur invalide"))


def classify_validation_error(exc: RequestValidationError) -> ClassifiedError:
    """
    Sépare les erreurs de validation FastAPI en catégories :
    - corps JSON illisible / absent          -> ERR_INVALID_ARGUMENT
    - paramètre (path/query/header) manquant -> ERR_MISSING_FIELD
    - paramètre de type incorrect            -> ERR_INVALID_ARGUMENT
    - champs du corps invalides              -> ERR_VALIDATION + validationErrors
    """
    errors = list(exc.errors())

    for err in errors:
        loc = tuple(err.get("loc") or ())
        etype = err.get("type", "")

        if etype == "json_invalid" or (loc == ("body",) and etype in ("missing", "model_attributes_type", "dict_type")):
            return ClassifiedError(
                400,
                ErrorCode.INVALID_ARGUMENT,
                "Le corps de la requête est invalide ou mal formaté.",
            )

        if loc and loc[0] in _PARAM_LOCATIONS:
            name = str(loc[-1])
            if etype == "missing":
                return ClassifiedError(
                    400,
                    ErrorCode.MISSING_REQUIRED_FIELD,
                    f"Le paramètre '{name}' est obligatoire.",
                )
            expected = _TYPE_NAMES.get(etype, "inconnu")
            return ClassifiedError(
                400,
                ErrorCode.INVALID_ARGUMENT,
                f"Le paramètre '{name}' doit être de type {expected}. Valeur reçue : '{err.get('input')}'.",
            )

    # Erreurs de champs : 1er message par champ, ordre conservé
    field_errors: Dict[str, str] = {}
    for err in errors:
        loc = [str(part) for part in (err.get("loc") or ()) if part != "body"]
        field = ".".join(loc) or "body"
        field_errors.setdefault(field, _field_message(err))

    return ClassifiedError(
        400,
        ErrorCode.VALIDATION_ERROR,
        "Les données du formulaire sont invalides. Veuillez corriger les champs indiqués.",
        field_errors,
    )


def classify(exc: Exception, *, method: str = "", path: str = "") -> ClassifiedError:
    """Point unique de traduction : exception -> (statut, code, message, détails)."""
    if isinstance(exc, ConfigurationError):
        return ClassifiedError(exc.status_code, exc.error_code, GENERIC_INTERNAL_MESSAGE)

    if isinstance(exc, AppError):
        return ClassifiedError(exc.status_code, exc.error_code, exc.message)

    if isinstance(exc, RequestValidationError):
        return classify_validation_error(exc)

    # ValueError levée hors validation (librairie, conversion) : argument invalide
    if isinstance(exc, ValueError) and not isinstance(exc, PydanticValidationError):
        return ClassifiedError(400, ErrorCode.INVALID_ARGUMENT, str(exc) or ErrorCode.INVALID_ARGUMENT.title)

    if isinstance(exc, StarletteHTTPException):
        if exc.status_code == 404:
            return ClassifiedError(
                404,
                ErrorCode.RESOURCE_NOT_FOUND,
                f"L'endpoint '{method} {path}' n'existe pas.",
            )
        if exc.status_code == 405:
            return ClassifiedError(
                405,
                ErrorCode.METHOD_NOT_ALLOWED,
                f"La méthode HTTP '{method}' n'est pas supportée sur cette route.",
            )
        if exc.status_code < 500:
            return ClassifiedError(exc.status_code, ErrorCode.INVALID_ARGUMENT, str(exc.detail))
        return ClassifiedError(exc.status_code, ErrorCode.INTERNAL_ERROR, GENERIC_INTERNAL_MESSAGE)

    if isinstance(exc, IntegrityError):
        return ClassifiedError(
            409,
            ErrorCode.DATA_CONFLICT,
            "Une contrainte d'intégrité a été violée (doublon ou référence invalide).",
        )

    if isinstance(exc, SQLAlchemyError):
        return ClassifiedError(
            500,
            ErrorCode.DATABASE_ERROR,
            "Une erreur de base de données s'est produite. Veuillez réessayer plus tard.",
        )

    return ClassifiedError(500, ErrorCode.INTERNAL_ERROR, GENERIC_INTERNAL_MESSAGE)


def log_error(exc: Exception, classified: ClassifiedError, *, method: str, path: str) -> None:
    """Journalise une erreur avec une sévérité adaptée à sa catégorie."""
    extra = {
        "method": method,
        "path": path,
        "status_code": classified.status,
        "error_code": classified.error_code.code,
    }

    if isinstance(exc, ConfigurationError):
        log.critical("Configuration invalide: %s", exc.message, extra=extra)
    elif isinstance(exc, IntegrityError):
        log.error("Violation d'intégrité de données: %s", exc.orig, extra=extra)
    elif classified.status >= 500:
        log.error(
            "Erreur inattendue [%s]: %s",
            type(exc).__name__,
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
            extra=extra,
        )
    elif classified.validation_errors is not None:
        log.warning("Erreur de validation: %s", classified.validation_errors, extra=extra)
    else:
        log.warning("%s", classified.message, extra=extra)
