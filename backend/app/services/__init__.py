"""
app.services

Couche métier de l’application.

Rôle (fonctionnel) :
- Porte les règles métier des utilisateurs (unicité, résolution du rôle,
  hash du mot de passe, mise à jour partielle, not-found / conflit).
- Isole la logique des routes FastAPI (app.api) et de la persistance (app.repositories).

Contenu :
- user_mapper : conversions entité <-> schémas API
- user_service : UserService (opérations CRUD)
"""
