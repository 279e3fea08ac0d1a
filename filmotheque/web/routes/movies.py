"""
Routes JSON du catalogue : liste, scan, streaming, suppression,
statistiques et affiches.
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from sqlmodel import Session
from starlette.background import BackgroundTask

from ...container import Container
from ...core.entities.media import MediaRecord, display_category
from ...core.errors import (
    FileMissingOnDisk,
    FilmothequeError,
    OfflineModeError,
    PosterDownloadError,
    RangeNotSatisfiable,
    RecordNotFound,
    StoreIOError,
)
from ...utils.helpers import format_duration, format_file_size
from ..deps import (
    build_poster_service,
    build_repository,
    build_streaming_service,
    get_container,
    get_session,
)

router = APIRouter(prefix="/movies")

MOVIE_NOT_FOUND = "Film non trouvé"
FILE_NOT_ON_DISK = "Fichier vidéo introuvable sur le disque"
INVALID_DRIVE = "Chemin de lecteur invalide ou inaccessible"


class ScanRequest(BaseModel):
    """Corps de POST /movies/scan."""

    model_config = ConfigDict(populate_by_name=True)

    drive_path: Optional[str] = Field(default=None, alias="drivePath")


class PosterRequest(BaseModel):
    """Corps de POST /movies/download-poster."""

    model_config = ConfigDict(populate_by_name=True)

    movie_id: Optional[int] = Field(default=None, alias="movieId")
    poster_url: Optional[str] = Field(default=None, alias="posterUrl")


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
    )


def serialize_record(record: MediaRecord) -> dict:
    """Représentation JSON d'un enregistrement (colonnes historiques + champs formatés)."""
    return {
        "id": record.id,
        "title": record.title,
        "path": record.path,
        "format": record.format,
        "duration": record.duration_seconds,
        "size_bytes": record.size_bytes,
        "thumbnail": record.thumbnail_path,
        "local_poster": record.local_poster_path,
        "category": record.category,
        "categoryLabel": display_category(record.category),
        "year": record.year,
        "description": record.description,
        "last_scan": record.last_scan.isoformat() if record.last_scan else None,
        "formattedDuration": format_duration(record.duration_seconds),
        "formattedSize": format_file_size(record.size_bytes),
    }


@router.get("")
async def list_movies(request: Request, session: Session = Depends(get_session)):
    """Liste tous les films, triés par titre."""
    try:
        records = build_repository(request, session).list_all()
    except StoreIOError:
        return _error(500, "Erreur lors de la récupération des films")
    return {
        "success": True,
        "count": len(records),
        "movies": [serialize_record(record) for record in records],
    }


async def run_background_import(container: Container, root: Path) -> None:
    """Import lancé après la réponse HTTP, avec sa propre session."""
    with container.session() as session:
        repository = container.media_repository(session=session)
        scanner = container.scanner_service(repository=repository)
        importer = container.catalog_importer(scanner=scanner, repository=repository)
        try:
            report = await importer.import_directory(root)
        except FilmothequeError as e:
            logger.error("Erreur lors de la recherche de films", root=str(root), error=str(e))
            return
    logger.info(
        "Recherche de films terminée",
        root=str(root),
        created=report.created,
        failures=report.failures,
    )


@router.post("/scan")
async def scan_drive(
    request: Request,
    background_tasks: BackgroundTasks,
    payload: Optional[ScanRequest] = None,
):
    """Lance l'import d'un répertoire en tâche de fond."""
    container = get_container(request)
    drive_path = payload.drive_path if payload else None
    if not drive_path or not container.file_system().is_dir(Path(drive_path)):
        return _error(400, INVALID_DRIVE)

    background_tasks.add_task(run_background_import, container, Path(drive_path))
    return {
        "success": True,
        "message": "Recherche de films démarrée. Cela peut prendre du temps...",
    }


@router.get("/stats")
async def get_stats(request: Request, session: Session = Depends(get_session)):
    """Statistiques agrégées du catalogue."""
    try:
        stats = build_repository(request, session).get_stats()
    except StoreIOError:
        return _error(500, "Erreur lors de la récupération des statistiques")
    return {"success": True, "stats": stats.to_dict()}


@router.get("/stream/{record_id}")
async def stream_movie(
    record_id: int, request: Request, session: Session = Depends(get_session)
):
    """Diffuse un film en respectant l'en-tête Range."""
    service = build_streaming_service(request, session)
    try:
        plan = service.open_stream(record_id, request.headers.get("range"))
    except RecordNotFound:
        return _error(404, MOVIE_NOT_FOUND)
    except FileMissingOnDisk:
        return _error(404, FILE_NOT_ON_DISK)
    except RangeNotSatisfiable as e:
        return Response(
            status_code=416,
            headers={"Content-Range": f"bytes */{e.file_size}", "Accept-Ranges": "bytes"},
        )
    except StoreIOError:
        return _error(500, "Erreur lors de la récupération du film")

    return StreamingResponse(
        plan.body,
        status_code=plan.status_code,
        headers=plan.headers,
        media_type=plan.media_type,
        background=BackgroundTask(plan.body.aclose),
    )


@router.delete("/{record_id}")
async def delete_movie(
    record_id: int, request: Request, session: Session = Depends(get_session)
):
    """Supprime un film du catalogue (le fichier reste sur le disque)."""
    try:
        deleted = build_repository(request, session).delete(record_id)
    except StoreIOError:
        return _error(500, "Erreur lors de la suppression du film")
    if not deleted:
        return _error(404, MOVIE_NOT_FOUND)
    return {"success": True, "message": "Film supprimé avec succès"}


@router.post("/download-poster")
async def download_poster(
    request: Request,
    payload: Optional[PosterRequest] = None,
    session: Session = Depends(get_session),
):
    """Télécharge une affiche et l'associe au film."""
    if payload is None or not payload.movie_id or not payload.poster_url:
        return _error(400, "ID du film et URL de l'affiche requis")

    service = build_poster_service(request, session)
    try:
        local_path = await service.download_poster(payload.movie_id, payload.poster_url)
    except OfflineModeError:
        return _error(
            503,
            "Fonctionnalité de téléchargement d'affiches désactivée en mode hors ligne",
            offline=True,
        )
    except RecordNotFound:
        return _error(404, MOVIE_NOT_FOUND)
    except PosterDownloadError as e:
        logger.error("Erreur lors du téléchargement de l'affiche", error=str(e))
        return _error(500, "Erreur lors du téléchargement de l'affiche")
    except StoreIOError:
        return _error(500, "Affiche téléchargée mais erreur de mise à jour BDD")

    return {
        "success": True,
        "message": "Affiche téléchargée et sauvegardée avec succès",
        "localPath": str(local_path),
    }
