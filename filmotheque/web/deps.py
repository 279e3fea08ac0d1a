"""
Dépendances partagées de l'application web.

Fournit l'accès au container DI et les services construits avec une
session de base de données propre à chaque requête.
"""

import tomllib
from collections.abc import Generator
from pathlib import Path

from fastapi import Request
from sqlmodel import Session

from ..container import Container
from ..services.classification import ClassificationController
from ..services.posters import PosterService
from ..services.streaming import StreamingService
from ..infrastructure.persistence.repositories import SQLModelMediaRepository

_PROJECT_ROOT = Path(__file__).parent.parent.parent


def read_app_version() -> str:
    """Version lue depuis pyproject.toml, affichée par /status."""
    try:
        with open(_PROJECT_ROOT / "pyproject.toml", "rb") as f:
            pyproject = tomllib.load(f)
    except FileNotFoundError:
        return "inconnue"
    return pyproject["project"]["version"]


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_session(request: Request) -> Generator[Session, None, None]:
    """Session SQLModel fermée à la fin de la requête."""
    with get_container(request).session() as session:
        yield session


def build_repository(request: Request, session: Session) -> SQLModelMediaRepository:
    return get_container(request).media_repository(session=session)


def build_streaming_service(request: Request, session: Session) -> StreamingService:
    container = get_container(request)
    return container.streaming_service(repository=build_repository(request, session))


def build_poster_service(request: Request, session: Session) -> PosterService:
    container = get_container(request)
    return container.poster_service(repository=build_repository(request, session))


def get_controller(request: Request) -> ClassificationController:
    return get_container(request).classification_controller()
