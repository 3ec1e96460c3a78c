"""
Application FastAPI de VideoStore.

Initialise l'application web avec le Container DI, enregistre la traduction
des erreurs du catalogue et monte les routes d'enregistrement.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ..container import Container
from .errors import register_exception_handlers
from .routes.registration import router as registration_router


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Construit l'application.

    Args:
        container: Container déjà configuré (tests) ; un Container par défaut
            est créé au démarrage sinon
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise le Container DI au démarrage et le ferme à l'arrêt."""
        app.state.container = container if container is not None else Container()
        app.state.container.database.init()
        yield
        app.state.container.shutdown_resources()

    app = FastAPI(title="VideoStore", lifespan=lifespan)
    register_exception_handlers(app)
    app.include_router(registration_router)
    return app


app = create_app()
