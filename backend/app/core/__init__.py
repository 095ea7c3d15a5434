"""
app.core

Package “cœur” de l’application : il regroupe tout ce qui est transversal (cross-cutting concerns),
c’est-à-dire ce qui s’applique à plusieurs endpoints/services sans dépendre d’une règle métier.

On y trouve :

- settings
  Centralise la configuration (variables d’environnement, URLs DB, rôle par défaut, CORS…).

- errors
  Taxonomie fermée des erreurs (ErrorCode), exceptions applicatives (NotFoundError,
  ConflictError, …), classification unique exception -> réponse et payload homogène.

- logging
  Logs JSON (1 ligne = 1 event) enrichis du request_id.

- request_id
  Identifiant de corrélation propagé via X-Request-Id.

- security
  Hash des mots de passe (Argon2) derrière un contrat CredentialHasher.

En résumé :
- app.core = infrastructure + conventions (config, logs, erreurs, hash)
- app.api / app.services / app.repositories / app.models = endpoints + métier + persistance
"""
