"""Tests de la taxonomie d’erreurs et de la classification (app.core.errors)."""

import logging

import pytest
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import (
    GENERIC_INTERNAL_MESSAGE,
    ClassifiedError,
    ConfigurationError,
    ConflictError,
    ConflictField,
    ErrorCode,
    InvalidArgumentError,
    NotFoundError,
    Resource,
    classify,
    error_payload,
    log_error,
)

pytestmark = pytest.mark.unit


class TestExceptions:
    def test_not_found_codes_follow_resource(self):
        assert NotFoundError(Resource.USER, "id", 1).error_code is ErrorCode.USER_NOT_FOUND
        assert NotFoundError(Resource.ROLE, "id", 1).error_code is ErrorCode.ROLE_NOT_FOUND
        assert NotFoundError(Resource.GENERIC, "id", 1).error_code is ErrorCode.RESOURCE_NOT_FOUND

    def test_not_found_message(self):
        exc = NotFoundError(Resource.ROLE, "id", 42)

        assert exc.status_code == 404
        assert exc.message == "Rôle non trouvé(e) avec id : '42'"

    def test_conflict_default_messages(self):
        assert ConflictError(ConflictField.EMAIL, "a@x.com").message == "Email déjà utilisé: a@x.com"
        assert ConflictError(ConflictField.USERNAME, "bob").message == "Username déjà utilisé: bob"
        assert ConflictError(ConflictField.GENERIC).message == "Conflit de données"

    def test_conflict_custom_message(self):
        exc = ConflictError(ConflictField.EMAIL, "a@x.com", message="déjà pris")

        assert exc.message == "déjà pris"
        assert exc.status_code == 409

    def test_invalid_argument_is_value_error(self):
        exc = InvalidArgumentError("mauvais argument")

        assert isinstance(exc, ValueError)
        assert exc.status_code == 400


class TestClassify:
    def test_app_error_keeps_its_code_and_message(self):
        result = classify(ConflictError(ConflictField.USERNAME, "bob"))

        assert result == ClassifiedError(409, ErrorCode.USERNAME_ALREADY_EXISTS, "Username déjà utilisé: bob")

    def test_configuration_error_hides_detail(self):
        result = classify(ConfigurationError("Rôle par défaut 'UTILISATEUR' introuvable en base"))

        assert result.status == 500
        assert result.error_code is ErrorCode.INTERNAL_ERROR
        assert result.message == GENERIC_INTERNAL_MESSAGE

    def test_unknown_route(self):
        result = classify(StarletteHTTPException(404), method="GET", path="/api/nope")

        assert result.error_code is ErrorCode.RESOURCE_NOT_FOUND
        assert result.message == "L'endpoint 'GET /api/nope' n'existe pas."

    def test_method_not_allowed(self):
        result = classify(StarletteHTTPException(405), method="PATCH", path="/api/users/1")

        assert result.status == 405
        assert result.error_code is ErrorCode.METHOD_NOT_ALLOWED

    def test_integrity_error_is_conflict(self):
        exc = IntegrityError("INSERT", {}, Exception("duplicate"))

        result = classify(exc)

        assert result.status == 409
        assert result.error_code is ErrorCode.DATA_CONFLICT

    def test_other_database_error(self):
        result = classify(OperationalError("SELECT 1", {}, Exception("connection refused")))

        assert result.status == 500
        assert result.error_code is ErrorCode.DATABASE_ERROR

    def test_unexpected_error(self):
        result = classify(RuntimeError("boom"))

        assert result == ClassifiedError(500, ErrorCode.INTERNAL_ERROR, GENERIC_INTERNAL_MESSAGE)

    def test_value_error_is_invalid_argument(self):
        result = classify(ValueError("conversion impossible"))

        assert result == ClassifiedError(400, ErrorCode.INVALID_ARGUMENT, "conversion impossible")

    def test_invalid_argument_error_keeps_its_message(self):
        result = classify(InvalidArgumentError("mauvais argument"))

        assert result == ClassifiedError(400, ErrorCode.INVALID_ARGUMENT, "mauvais argument")

    def test_pydantic_validation_error_is_not_client_error(self):
        class _Model(BaseModel):
            n: int

        with pytest.raises(ValidationError) as excinfo:
            _Model.model_validate({"n": "abc"})

        result = classify(excinfo.value)

        assert result.status == 500
        assert result.error_code is ErrorCode.INTERNAL_ERROR


class TestValidationClassification:
    def test_invalid_json_body(self):
        exc = RequestValidationError(
            [{"type": "json_invalid", "loc": ("body", 1), "msg": "JSON decode error", "input": {}}]
        )

        result = classify(exc)

        assert result.error_code is ErrorCode.INVALID_ARGUMENT
        assert result.validation_errors is None

    def test_missing_query_parameter(self):
        exc = RequestValidationError(
            [{"type": "missing", "loc": ("query", "page"), "msg": "Field required", "input": None}]
        )

        result = classify(exc)

        assert result.error_code is ErrorCode.MISSING_REQUIRED_FIELD
        assert result.message == "Le paramètre 'page' est obligatoire."

    def test_path_type_mismatch(self):
        exc = RequestValidationError(
            [{"type": "int_parsing", "loc": ("path", "user_id"), "msg": "bad int", "input": "abc"}]
        )

        result = classify(exc)

        assert result.error_code is ErrorCode.INVALID_ARGUMENT
        assert result.message == "Le paramètre 'user_id' doit être de type int. Valeur reçue : 'abc'."

    def test_body_fields_first_message_wins_in_order(self):
        exc = RequestValidationError(
            [
                {"type": "missing", "loc": ("body", "nom"), "msg": "Field required", "input": {}},
                {
                    "type": "value_error",
                    "loc": ("body", "email"),
                    "msg": "Value error",
                    "input": "x",
                    "ctx": {"error": ValueError("L'email doit être valide")},
                },
                {"type": "string_too_long", "loc": ("body", "nom"), "msg": "too long", "input": "x",
                 "ctx": {"max_length": 100}},
            ]
        )

        result = classify(exc)

        assert result.error_code is ErrorCode.VALIDATION_ERROR
        assert list(result.validation_errors.items()) == [
            ("nom", "Ce champ est obligatoire"),
            ("email", "L'email doit être valide"),
        ]


class TestPayload:
    def test_payload_shape_without_validation_errors(self):
        payload = error_payload(
            status=404,
            error_code=ErrorCode.USER_NOT_FOUND,
            message="Utilisateur non trouvé(e) avec id : '9'",
            path="/api/users/9",
        )

        assert set(payload) == {"timestamp", "httpStatus", "httpStatusCode", "errorCode", "error", "message", "path"}
        assert payload["httpStatus"] == "NOT_FOUND"
        assert payload["httpStatusCode"] == 404
        assert payload["errorCode"] == "ERR_USER_NOT_FOUND"
        assert payload["error"] == "Utilisateur non trouvé"

    def test_payload_with_validation_errors(self):
        payload = error_payload(
            status=400,
            error_code=ErrorCode.VALIDATION_ERROR,
            message="invalide",
            path="/api/users",
            validation_errors={"email": "L'email doit être valide"},
        )

        assert payload["httpStatus"] == "BAD_REQUEST"
        assert payload["validationErrors"] == {"email": "L'email doit être valide"}


class TestLogging:
    def test_client_errors_are_warnings(self, caplog):
        exc = NotFoundError(Resource.USER, "id", 3)
        with caplog.at_level(logging.DEBUG, logger="app.errors"):
            log_error(exc, classify(exc), method="GET", path="/api/users/3")

        assert caplog.records[-1].levelno == logging.WARNING
        assert caplog.records[-1].error_code == "ERR_USER_NOT_FOUND"

    def test_configuration_error_is_critical(self, caplog):
        exc = ConfigurationError("rôle manquant")
        with caplog.at_level(logging.DEBUG, logger="app.errors"):
            log_error(exc, classify(exc), method="POST", path="/api/users")

        assert caplog.records[-1].levelno == logging.CRITICAL

    def test_unexpected_error_logged_with_traceback(self, caplog):
        try:
            raise RuntimeError("boom")
        except RuntimeError as exc:
            with caplog.at_level(logging.DEBUG, logger="app.errors"):
                log_error(exc, classify(exc), method="GET", path="/api/users")

        assert caplog.records[-1].levelno == logging.ERROR
        assert caplog.records[-1].exc_info is not None
