"""Tests des schémas Pydantic (contrat d’entrée / sortie)."""

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from app.schemas.users import PASSWORD_POLICY_MESSAGE, UserCreate, UserUpdate

pytestmark = pytest.mark.unit


def _messages(exc: ValidationError) -> dict:
    return {str(e["loc"][0]): str(e["ctx"]["error"]) for e in exc.errors() if "ctx" in e and "error" in e["ctx"]}


class TestUserCreate:
    def test_valid_payload_camel_case(self, make_payload):
        payload = UserCreate.model_validate(make_payload(photoPath="a.png", roleId=2))

        assert payload.date_naissance == date(1990, 1, 1)
        assert payload.photo_path == "a.png"
        assert payload.role_id == 2

    def test_snake_case_names_accepted(self):
        payload = UserCreate(
            username="johndoe",
            nom="Doe",
            prenom="John",
            email="john@x.com",
            date_naissance=date(1990, 1, 1),
            password="Password123!",
        )

        assert payload.role_id is None

    def test_text_fields_are_stripped(self, make_payload):
        payload = UserCreate.model_validate(make_payload(username="  johndoe  ", email=" john@x.com "))

        assert payload.username == "johndoe"
        assert payload.email == "john@x.com"

    @pytest.mark.parametrize(
        "password",
        ["password123!", "PASSWORD123!", "Password!!!", "Password1234", "Pa1!"],
    )
    def test_password_policy(self, make_payload, password):
        with pytest.raises(ValidationError) as excinfo:
            UserCreate.model_validate(make_payload(password=password))

        message = _messages(excinfo.value)["password"]
        if len(password) < 8:
            assert message == "Le mot de passe doit contenir au moins 8 caractères"
        else:
            assert message == PASSWORD_POLICY_MESSAGE

    def test_invalid_email(self, make_payload):
        with pytest.raises(ValidationError) as excinfo:
            UserCreate.model_validate(make_payload(email="pas-un-email"))

        assert _messages(excinfo.value)["email"] == "L'email doit être valide"

    def test_birth_date_must_be_past(self, make_payload):
        with pytest.raises(ValidationError) as excinfo:
            UserCreate.model_validate(make_payload(dateNaissance=date.today().isoformat()))

        assert _messages(excinfo.value)["dateNaissance"] == "La date de naissance doit être dans le passé"

    def test_blank_and_length_rules(self, make_payload):
        with pytest.raises(ValidationError) as excinfo:
            UserCreate.model_validate(make_payload(username="ab", nom="   ", prenom="x" * 101))

        messages = _messages(excinfo.value)
        assert messages["username"] == "Le nom d'utilisateur doit contenir entre 3 et 50 caractères"
        assert messages["nom"] == "Le nom est obligatoire"
        assert messages["prenom"] == "Le prénom ne peut pas dépasser 100 caractères"

    def test_any_role_id_accepted_for_lookup(self, make_payload):
        payload = UserCreate.model_validate(make_payload(roleId=0))

        assert payload.role_id == 0

    def test_unknown_field_rejected(self, make_payload):
        with pytest.raises(ValidationError) as excinfo:
            UserCreate.model_validate(make_payload(isAdmin=True))

        assert excinfo.value.errors()[0]["type"] == "extra_forbidden"


class TestUserUpdate:
    def test_everything_optional(self):
        payload = UserUpdate.model_validate({})

        assert payload.model_fields_set == set()
        assert not payload.provided("nom")

    def test_presence_tracking(self):
        payload = UserUpdate.model_validate({"nom": "Durand", "photoPath": None})

        assert payload.provided("nom")
        # envoyé mais null : considéré comme non fourni
        assert "photo_path" in payload.model_fields_set
        assert not payload.provided("photo_path")

    def test_empty_password_allowed(self):
        assert UserUpdate.model_validate({"password": ""}).password == ""

    def test_weak_password_rejected(self):
        with pytest.raises(ValidationError):
            UserUpdate.model_validate({"password": "faible"})

    def test_future_birth_date_rejected(self):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        with pytest.raises(ValidationError):
            UserUpdate.model_validate({"dateNaissance": tomorrow})
