"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web.
Les parametres sont charges une seule fois puis injectes explicitement :
aucun composant ne lit d'etat global.
"""

from dependency_injector import containers, providers
from sqlmodel import Session

from .adapters.api.poster_client import PosterHttpClient
from .adapters.file_system import FileSystemAdapter
from .adapters.parsing.mediainfo_extractor import MediaInfoDurationReader
from .adapters.thumbnails.ffmpeg_thumbnailer import FFmpegThumbnailer
from .config import Settings
from .infrastructure.persistence.database import create_db_engine, init_db
from .infrastructure.persistence.repositories import SQLModelMediaRepository
from .services.classification import ClassificationController
from .services.importer import CatalogImporter
from .services.posters import PosterService
from .services.prober import ProberService
from .services.scanner import ScannerService
from .services.streaming import StreamingService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Cree les tables et applique les migrations
        importer = container.catalog_importer()
        repo = container.media_repository()

    Dans les tests, les parametres se remplacent par :
        container.config.override(providers.Object(test_settings))
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Engine cree a partir de l'URL configuree
    engine = providers.Singleton(
        create_db_engine,
        database_url=config.provided.database_url,
    )

    # Database - Resource pour initialisation unique (tables + migrations)
    database = providers.Resource(init_db, engine=engine)

    # Session factory - nouvelle session a chaque appel
    session = providers.Factory(Session, engine)

    # Adapters - implementations concretes des ports
    file_system = providers.Singleton(FileSystemAdapter)
    duration_reader = providers.Singleton(MediaInfoDurationReader)
    thumbnailer = providers.Singleton(
        FFmpegThumbnailer,
        output_dir=config.provided.thumbnails_dir,
        size=config.provided.thumbnail_dimensions,
        position=config.provided.thumbnail_position,
        ffmpeg_binary=config.provided.ffmpeg_binary,
        timeout_seconds=config.provided.thumbnail_timeout_seconds,
    )
    poster_client = providers.Singleton(
        PosterHttpClient,
        timeout=config.provided.poster_timeout_seconds,
    )

    # Repository - Factory pour nouvelle instance avec session fraiche
    media_repository = providers.Factory(
        SQLModelMediaRepository,
        session=session,
    )

    # Services
    prober_service = providers.Factory(
        ProberService,
        file_system=file_system,
        duration_reader=duration_reader,
        thumbnailer=thumbnailer,
        settings=config,
    )
    scanner_service = providers.Factory(
        ScannerService,
        file_system=file_system,
        prober=prober_service,
        repository=media_repository,
        settings=config,
    )
    catalog_importer = providers.Factory(
        CatalogImporter,
        scanner=scanner_service,
        repository=media_repository,
    )
    streaming_service = providers.Factory(
        StreamingService,
        repository=media_repository,
        settings=config,
    )
    poster_service = providers.Factory(
        PosterService,
        repository=media_repository,
        client=poster_client,
        settings=config,
    )

    # Une seule session de classification par processus
    classification_controller = providers.Singleton(
        ClassificationController,
        scanner=scanner_service,
        repository=media_repository,
    )
