"""
app.schemas

Package des schémas API (Pydantic).

Rôle (fonctionnel) :
- Définit les modèles d’entrée/sortie utilisés par l’API (request/response).
- Sépare clairement :
  - les modèles ORM (app.models) = persistance DB
  - les schémas Pydantic (app.schemas) = contrat HTTP / validation structurelle
- N’expose que les champs autorisés côté client (jamais les secrets).
"""
