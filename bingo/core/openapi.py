"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) modifie le schéma généré par FastAPI pour :

ajouter une description détaillée (conventions de l'API bingo),

centraliser la personnalisation du Swagger.
"""

from fastapi.openapi.utils import get_openapi


def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=(
            "API du bingo à deux (FastAPI + SQLModel).\n\n"
            "### Conventions\n"
            "- Toutes les heures sont en UTC.\n"
            "- `Authorization: Bearer <token>` : identité (owner / partner d'une partie).\n"
            "- `X-Player-Token` : slot `him` / `her`, obtenu via `/auth/setup` ou `/auth/login`.\n"
            "- Les cases sont indexées de `0` à `grid_size² - 1`, ligne par ligne.\n"
        ),
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema
