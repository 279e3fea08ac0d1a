"""
Fixtures pytest partagees pour les tests Filmotheque.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec chemins temporaires et base SQLite dediee
- Session et repository sur une base fraiche
- Doublures du lecteur de duree et du generateur de miniatures
- Container DI et client HTTP pour les routes web
"""

from pathlib import Path
from typing import Callable, Iterator, Optional
from unittest.mock import MagicMock

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from sqlmodel import Session

from filmotheque.config import Settings
from filmotheque.container import Container
from filmotheque.core.errors import ThumbnailGenerationFailed
from filmotheque.core.ports.file_system import IFileSystem
from filmotheque.core.ports.parser import IDurationReader, IThumbnailer
from filmotheque.infrastructure.persistence.database import create_db_engine, create_tables
from filmotheque.infrastructure.persistence.repositories import SQLModelMediaRepository
from filmotheque.web.app import create_app

# Duree par defaut des videos factices : 1 heure
DEFAULT_DURATION = 3600.0


class FakeDurationReader(IDurationReader):
    """
    Lecteur de duree pilote par nom de fichier.

    Les fichiers absents de durations ont DEFAULT_DURATION secondes ;
    une valeur None simule un fichier sans metadonnees.
    """

    def __init__(self, durations: Optional[dict[str, Optional[float]]] = None) -> None:
        self.durations = durations or {}
        self.calls: list[Path] = []

    def read_duration(self, file_path: Path) -> Optional[float]:
        self.calls.append(file_path)
        return self.durations.get(file_path.name, DEFAULT_DURATION)


class FailingThumbnailer(IThumbnailer):
    """Generateur de miniatures toujours en echec (ffmpeg absent des tests)."""

    async def generate(self, file_path: Path, duration_seconds: float) -> Path:
        raise ThumbnailGenerationFailed(file_path, "ffmpeg indisponible")


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec une base SQLite et des repertoires temporaires.

    Le fichier .env du projet est ignore.
    """
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'db' / 'test.db'}",
        thumbnails_dir=tmp_path / "thumbnails",
        posters_dir=tmp_path / "posters",
        log_file=tmp_path / "logs" / "test.log",
        min_duration_minutes=15,
        scan_workers=2,
        stream_chunk_size=64,
        offline_mode=True,
    )


@pytest.fixture
def engine(test_settings: Settings):
    """Engine sur une base fraiche, tables et migrations appliquees."""
    db_engine = create_db_engine(test_settings.database_url)
    create_tables(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def repository(session: Session) -> SQLModelMediaRepository:
    return SQLModelMediaRepository(session)


@pytest.fixture
def make_video(tmp_path: Path) -> Callable[..., Path]:
    """
    Fabrique de fichiers video factices.

    Usage:
        path = make_video("Films/Alien.mkv", size=1000)
    """

    def _make(relative: str, size: int = 1000, root: Optional[Path] = None) -> Path:
        path = (root or tmp_path / "videos") / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(bytes(i % 256 for i in range(size)))
        return path

    return _make


@pytest.fixture
def duration_reader() -> FakeDurationReader:
    return FakeDurationReader()


@pytest.fixture
def thumbnailer() -> FailingThumbnailer:
    return FailingThumbnailer()


@pytest.fixture
def mock_file_system() -> MagicMock:
    """
    Mock de IFileSystem pour les tests.

    Les valeurs de retour doivent etre configurees dans chaque test.
    """
    mock = MagicMock(spec=IFileSystem)
    mock.exists.return_value = True
    mock.is_dir.return_value = True
    mock.file_size.return_value = 700 * 1024 * 1024
    mock.walk_video_files.return_value = iter([])
    return mock


@pytest.fixture
def container(
    test_settings: Settings,
    duration_reader: FakeDurationReader,
    thumbnailer: FailingThumbnailer,
) -> Container:
    """Container DI configure pour les tests (mediainfo et ffmpeg remplaces)."""
    test_container = Container()
    test_container.config.override(providers.Object(test_settings))
    test_container.duration_reader.override(providers.Object(duration_reader))
    test_container.thumbnailer.override(providers.Object(thumbnailer))
    return test_container


@pytest.fixture
def client(container: Container) -> Iterator[TestClient]:
    """Client HTTP sur l'application, lifespan execute."""
    app = create_app(container)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def catalog_repository(client: TestClient, container: Container) -> Iterator[SQLModelMediaRepository]:
    """Repository sur la base de l'application web (apres initialisation)."""
    with container.session() as db_session:
        yield container.media_repository(session=db_session)
