"""
Routes JSON du workflow de classification.

Surface HTTP du ClassificationController : chaque action retourne l'état
de la session. Une action interdite à l'étape courante répond 409, un
index ou une valeur invalide répond 400.
"""

from pathlib import Path
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...core.entities.candidate import CandidateFile
from ...core.entities.media import display_category
from ...core.errors import WorkflowStateError
from ...services.classification import (
    ClassificationController,
    CommitReport,
    EventKind,
    ScanMode,
    WorkflowEvent,
)
from ...utils.helpers import format_duration, format_file_size
from ..deps import get_controller

router = APIRouter(prefix="/classification")


class ScanTargetRequest(BaseModel):
    target: str
    mode: ScanMode = ScanMode.FOLDER


class CandidateRequest(BaseModel):
    index: int


class ClassifyRequest(BaseModel):
    index: int
    category: str


class DetailsRequest(BaseModel):
    index: int
    title: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None


def serialize_candidate(index: int, candidate: CandidateFile) -> dict:
    return {
        "index": index,
        "path": str(candidate.path),
        "filename": candidate.path.name,
        "title": candidate.title,
        "format": candidate.format,
        "duration": candidate.duration_seconds,
        "formattedDuration": format_duration(candidate.duration_seconds),
        "size": candidate.size_bytes,
        "formattedSize": format_file_size(candidate.size_bytes),
        "thumbnail": str(candidate.thumbnail_path) if candidate.thumbnail_path else None,
        "classification": candidate.classification,
        "categoryLabel": (
            display_category(candidate.classification) if candidate.is_classified else None
        ),
        "details": {
            "title": candidate.details.title,
            "year": candidate.details.year,
            "description": candidate.details.description,
        },
    }


def serialize_state(controller: ClassificationController) -> dict:
    """État courant du contrôleur (stage None si inactif)."""
    session = controller.session
    stage = controller.stage
    if session is None:
        return {"active": controller.is_active, "stage": stage.value if stage else None}
    return {
        "active": True,
        "stage": stage.value,
        "total": session.total,
        "classifiedCount": session.classified_count,
        "canProceed": controller.can_proceed,
        "candidates": [
            serialize_candidate(index, candidate)
            for index, candidate in enumerate(session.candidates)
        ],
    }


def serialize_report(report: CommitReport) -> dict:
    return {
        "succeeded": report.succeeded,
        "failed": report.failed,
        "messages": report.messages,
        "summary": report.summary(),
        "created": [record.id for record in report.created],
    }


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _state_response(controller: ClassificationController, **extra: Any) -> dict:
    return {"success": True, "state": serialize_state(controller), **extra}


def _apply(controller: ClassificationController, action: Callable[[], Any]):
    """Exécute une action synchrone et traduit les erreurs de workflow."""
    try:
        action()
    except WorkflowStateError as e:
        return _error(409, str(e))
    except (IndexError, ValueError) as e:
        return _error(400, str(e))
    return _state_response(controller)


@router.get("/state")
async def get_state(controller: ClassificationController = Depends(get_controller)):
    return _state_response(controller)


@router.post("/scan")
async def start_scan(
    payload: ScanTargetRequest,
    controller: ClassificationController = Depends(get_controller),
):
    """Scanne un dossier ou un fichier et ouvre une session."""
    notices: list[WorkflowEvent] = []

    def collect(event: WorkflowEvent) -> None:
        if event.kind in (EventKind.SCAN_EMPTY, EventKind.SCAN_FAILED):
            notices.append(event)

    unsubscribe = controller.subscribe(collect)
    try:
        started = await controller.start_scan(Path(payload.target).expanduser(), payload.mode)
    except WorkflowStateError as e:
        return _error(409, str(e))
    finally:
        unsubscribe()

    if not started:
        notice = notices[-1] if notices else None
        return {
            "success": False,
            "notice": notice.kind.value if notice else None,
            "message": notice.message if notice else None,
            "state": serialize_state(controller),
        }
    return _state_response(controller)


@router.post("/classify")
async def classify(
    payload: ClassifyRequest,
    controller: ClassificationController = Depends(get_controller),
):
    return _apply(controller, lambda: controller.classify(payload.index, payload.category))


@router.post("/skip")
async def skip(
    payload: CandidateRequest,
    controller: ClassificationController = Depends(get_controller),
):
    return _apply(controller, lambda: controller.skip(payload.index))


@router.post("/skip-all")
async def skip_all(controller: ClassificationController = Depends(get_controller)):
    return _apply(controller, controller.skip_all)


@router.post("/proceed")
async def proceed(controller: ClassificationController = Depends(get_controller)):
    """Passe à DETAILING, ou enregistre directement si tout est non trié."""
    try:
        report = await controller.proceed()
    except WorkflowStateError as e:
        return _error(409, str(e))
    if report is None:
        return _state_response(controller)
    return _state_response(controller, report=serialize_report(report))


@router.post("/details")
async def set_details(
    payload: DetailsRequest,
    controller: ClassificationController = Depends(get_controller),
):
    return _apply(
        controller,
        lambda: controller.set_details(
            payload.index,
            title=payload.title,
            year=payload.year,
            description=payload.description,
        ),
    )


@router.post("/auto-fill")
async def auto_fill(
    payload: CandidateRequest,
    controller: ClassificationController = Depends(get_controller),
):
    return _apply(controller, lambda: controller.auto_fill(payload.index))


@router.post("/back")
async def back(controller: ClassificationController = Depends(get_controller)):
    return _apply(controller, controller.back_to_classification)


@router.post("/keep-defaults")
async def keep_defaults(controller: ClassificationController = Depends(get_controller)):
    try:
        report = await controller.keep_defaults()
    except WorkflowStateError as e:
        return _error(409, str(e))
    return _state_response(controller, report=serialize_report(report))


@router.post("/save")
async def save(controller: ClassificationController = Depends(get_controller)):
    try:
        report = await controller.save_details()
    except WorkflowStateError as e:
        return _error(409, str(e))
    return _state_response(controller, report=serialize_report(report))


@router.post("/cancel")
async def cancel(controller: ClassificationController = Depends(get_controller)):
    controller.cancel()
    return _state_response(controller)
