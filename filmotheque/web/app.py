"""
Application FastAPI de Filmotheque.

Initialise l'application web avec le Container DI et monte les routes JSON.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ..container import Container
from ..logging_config import configure_logging_from_settings
from .deps import read_app_version
from .routes.classification import router as classification_router
from .routes.movies import router as movies_router
from .routes.status import router as status_router


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Construit l'application.

    Args:
        container: Container deja configure (tests) ; un nouveau est cree sinon
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise la base au démarrage et libère les ressources à l'arrêt."""
        app_container = container or Container()
        if container is None:
            configure_logging_from_settings(app_container.config())
        app_container.database.init()
        app.state.container = app_container
        yield
        await app_container.poster_client().close()
        app_container.database.shutdown()

    app = FastAPI(title="Filmothèque", version=read_app_version(), lifespan=lifespan)

    app.include_router(movies_router)
    app.include_router(status_router)
    app.include_router(classification_router)
    return app


app = create_app()
