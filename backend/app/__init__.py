"""
app

Package racine de l’application backend (gestion des utilisateurs Squatrbnb).

Rôle (fonctionnel) :
- Contient tout le code applicatif (API, logique métier, accès DB, schémas).
- Sert de point d’ancrage pour les imports : `from app...`

Organisation (haute-level) :
- app.api          : routes FastAPI (contrats HTTP, dépendances, sérialisation)
- app.core         : briques transverses (settings, errors, logs, request id, hash)
- app.db           : base SQLAlchemy + session async
- app.models       : modèles ORM (tables Postgres role / users)
- app.schemas      : schémas Pydantic (entrées/sorties API)
- app.repositories : accès aux données (interfaces + implémentations SQLAlchemy)
- app.services     : logique métier (UserService, mapper)
"""
