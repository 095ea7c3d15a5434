from __future__ import annotations

from typing import Protocol

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

"""
Core Security (hash des mots de passe).

Rôle (fonctionnel) :
- Définit le contrat `CredentialHasher` consommé par le service utilisateurs :
  hash(plaintext) -> chaîne opaque salée, verify(plaintext, hash) -> bool.
- Fournit l’implémentation Argon2 utilisée en production.

Notes :
- Le service ne dépend que du Protocol : les tests injectent un hasher déterministe.
- Aucun mot de passe (clair ou hashé) ne doit apparaître dans les logs.
"""


class CredentialHasher(Protocol):
    """Fonction de hash à sens unique, salée, avec vérification."""

    def hash(self, plaintext: str) -> str:
        ...

    def verify(self, plaintext: str, hashed: str) -> bool:
        ...


class Argon2CredentialHasher:
    """Hasher Argon2 (paramètres par défaut d’argon2-cffi)."""

    def __init__(self, hasher: PasswordHasher | None = None) -> None:
        self._hasher = hasher or PasswordHasher()

    def hash(self, plaintext: str) -> str:
        return self._hasher.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return self._hasher.verify(hashed, plaintext)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False


# Instance partagée (sans état mutable)
password_hasher = Argon2CredentialHasher()
