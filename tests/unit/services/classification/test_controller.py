"""
Tests du ClassificationController.

Le scan utilise le vrai ScannerService sur tmp_path ; mediainfo et ffmpeg
sont remplaces par les doublures du conftest.
"""

from pathlib import Path
from typing import Callable

import pytest

from filmotheque.adapters.file_system import FileSystemAdapter
from filmotheque.config import Settings
from filmotheque.core.entities.media import UNSORTED
from filmotheque.core.errors import WorkflowStateError
from filmotheque.infrastructure.persistence.repositories import SQLModelMediaRepository
from filmotheque.services.classification import (
    ClassificationController,
    ClassificationStage,
    EventKind,
    ScanMode,
    WorkflowEvent,
)
from filmotheque.services.prober import ProberService
from filmotheque.services.scanner import ScannerService


@pytest.fixture
def controller(
    repository: SQLModelMediaRepository,
    duration_reader,
    thumbnailer,
    test_settings: Settings,
) -> ClassificationController:
    file_system = FileSystemAdapter()
    prober = ProberService(file_system, duration_reader, thumbnailer, test_settings)
    scanner = ScannerService(file_system, prober, repository, test_settings)
    return ClassificationController(scanner, repository)


@pytest.fixture
def events(controller: ClassificationController) -> list[WorkflowEvent]:
    received: list[WorkflowEvent] = []
    controller.subscribe(received.append)
    return received


@pytest.fixture
def folder(make_video: Callable[..., Path], tmp_path: Path) -> Path:
    for name in ("Alien.1979.mkv", "Le.Grand.Bleu.1988.mp4", "Marnie.avi"):
        make_video(name)
    return tmp_path / "videos"


def _kinds(events: list[WorkflowEvent]) -> list[EventKind]:
    return [event.kind for event in events]


class TestStartScan:
    """Tests de l'ouverture d'une session."""

    @pytest.mark.asyncio
    async def test_opens_session(
        self, controller: ClassificationController, folder: Path, events: list
    ) -> None:
        assert controller.stage is None

        started = await controller.start_scan(folder)

        assert started is True
        assert controller.stage == ClassificationStage.CLASSIFYING
        assert controller.session.total == 3
        assert [e.stage for e in events] == [
            ClassificationStage.SCANNING,
            ClassificationStage.CLASSIFYING,
        ]

    @pytest.mark.asyncio
    async def test_empty_folder(
        self, controller: ClassificationController, tmp_path: Path, events: list
    ) -> None:
        (tmp_path / "vide").mkdir()

        started = await controller.start_scan(tmp_path / "vide")

        assert started is False
        assert controller.is_active is False
        assert events[-1].kind == EventKind.SCAN_EMPTY
        assert events[-1].message == "Aucun nouveau fichier vidéo trouvé"

    @pytest.mark.asyncio
    async def test_missing_folder(
        self, controller: ClassificationController, tmp_path: Path, events: list
    ) -> None:
        started = await controller.start_scan(tmp_path / "absent")

        assert started is False
        assert events[-1].kind == EventKind.SCAN_FAILED
        assert controller.is_active is False

    @pytest.mark.asyncio
    async def test_single_file_mode(
        self, controller: ClassificationController, folder: Path
    ) -> None:
        started = await controller.start_scan(folder / "Marnie.avi", ScanMode.FILE)

        assert started is True
        assert [c.path.name for c in controller.session.candidates] == ["Marnie.avi"]

    @pytest.mark.asyncio
    async def test_one_session_at_a_time(
        self, controller: ClassificationController, folder: Path
    ) -> None:
        await controller.start_scan(folder)

        with pytest.raises(WorkflowStateError):
            await controller.start_scan(folder)


class TestClassifying:
    """Tests de l'etape CLASSIFYING."""

    @pytest.mark.asyncio
    async def test_gate_requires_all_classified(
        self, controller: ClassificationController, folder: Path
    ) -> None:
        """Impossible de continuer tant qu'un candidat n'est pas classe."""
        await controller.start_scan(folder)
        controller.classify(0, "films")
        controller.skip(1)

        assert controller.can_proceed is False
        with pytest.raises(WorkflowStateError):
            await controller.proceed()

        controller.classify(2, "documentaires")
        assert controller.can_proceed is True

    @pytest.mark.asyncio
    async def test_invalid_index_and_category(
        self, controller: ClassificationController, folder: Path
    ) -> None:
        await controller.start_scan(folder)

        with pytest.raises(IndexError):
            controller.classify(10, "films")
        with pytest.raises(ValueError):
            controller.classify(0, "")

    def test_actions_without_session(self, controller: ClassificationController) -> None:
        with pytest.raises(WorkflowStateError):
            controller.skip_all()

    @pytest.mark.asyncio
    async def test_skip_all_commits_directly(
        self,
        controller: ClassificationController,
        repository: SQLModelMediaRepository,
        folder: Path,
        events: list,
    ) -> None:
        """Tout non trie : pas d'etape DETAILING, enregistrement immediat."""
        await controller.start_scan(folder)
        controller.skip_all()

        report = await controller.proceed()

        assert report is not None
        assert report.succeeded == 3
        assert report.failed == 0
        assert {r.category for r in repository.list_all()} == {UNSORTED}
        assert controller.session is None
        assert _kinds(events)[-2:] == [EventKind.DONE, EventKind.CATALOG_CHANGED]
        assert events[-2].message == "3 enregistré(s), 0 échec(s)"


class TestDetailing:
    """Tests de l'etape DETAILING et du commit."""

    async def _to_detailing(self, controller: ClassificationController, folder: Path) -> int:
        await controller.start_scan(folder)
        session = controller.session
        index = next(
            i for i, c in enumerate(session.candidates) if c.path.name == "Le.Grand.Bleu.1988.mp4"
        )
        controller.skip_all()
        controller.classify(index, "films")
        assert await controller.proceed() is None
        assert controller.stage == ClassificationStage.DETAILING
        return index

    @pytest.mark.asyncio
    async def test_save_details(
        self,
        controller: ClassificationController,
        repository: SQLModelMediaRepository,
        folder: Path,
    ) -> None:
        index = await self._to_detailing(controller, folder)
        controller.set_details(index, title="  Le Grand Bleu ", year=1988, description="Apnée")

        report = await controller.save_details()

        assert report.succeeded == 3
        films = repository.list_by_category("films")
        assert len(films) == 1
        assert films[0].title == "Le Grand Bleu"
        assert films[0].year == 1988
        assert films[0].description == "Apnée"

    @pytest.mark.asyncio
    async def test_auto_fill(self, controller: ClassificationController, folder: Path) -> None:
        index = await self._to_detailing(controller, folder)

        candidate = controller.auto_fill(index)

        assert candidate.details.title == "Le Grand Bleu"
        assert candidate.details.year == 1988

    @pytest.mark.asyncio
    async def test_unsorted_has_no_details(
        self, controller: ClassificationController, folder: Path
    ) -> None:
        index = await self._to_detailing(controller, folder)
        unsorted_index = 0 if index != 0 else 1

        with pytest.raises(WorkflowStateError):
            controller.set_details(unsorted_index, title="Titre")

    @pytest.mark.asyncio
    async def test_back_keeps_choices(
        self, controller: ClassificationController, folder: Path
    ) -> None:
        index = await self._to_detailing(controller, folder)
        controller.set_details(index, title="Le Grand Bleu")

        controller.back_to_classification()

        assert controller.stage == ClassificationStage.CLASSIFYING
        candidate = controller.session.candidates[index]
        assert candidate.classification == "films"
        assert candidate.details.title == "Le Grand Bleu"

    @pytest.mark.asyncio
    async def test_keep_defaults_commits_autofilled_details(
        self,
        controller: ClassificationController,
        repository: SQLModelMediaRepository,
        folder: Path,
    ) -> None:
        index = await self._to_detailing(controller, folder)
        controller.auto_fill(index)

        await controller.keep_defaults()

        [film] = repository.list_by_category("films")
        assert (film.title, film.year) == ("Le Grand Bleu", 1988)

    @pytest.mark.asyncio
    async def test_keep_defaults_without_details_uses_scan_title(
        self,
        controller: ClassificationController,
        repository: SQLModelMediaRepository,
        folder: Path,
    ) -> None:
        await self._to_detailing(controller, folder)

        await controller.keep_defaults()

        [film] = repository.list_by_category("films")
        assert film.title == "Le.Grand.Bleu.1988"
        assert film.year is None

    @pytest.mark.asyncio
    async def test_partial_commit(
        self,
        controller: ClassificationController,
        repository: SQLModelMediaRepository,
        make_video,
        tmp_path: Path,
    ) -> None:
        """Sur 5 candidats dont 2 inseres entre-temps : 3 succes, 2 echecs."""
        for index in range(5):
            make_video(f"Film {index}.mkv")
        await controller.start_scan(tmp_path / "videos")
        for candidate in controller.session.candidates[:2]:
            repository.create(candidate.to_record())
        controller.skip_all()

        report = await controller.proceed()

        assert report.succeeded == 3
        assert report.failed == 2
        assert len(report.messages) == 2
        assert "3 enregistré(s), 2 échec(s)" in report.summary()
        assert len(repository.list_all()) == 5


class TestSubscriptions:
    """Tests des abonnements et de l'annulation."""

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_workflow(
        self, controller: ClassificationController, folder: Path
    ) -> None:
        def broken(event: WorkflowEvent) -> None:
            raise RuntimeError("abonne defaillant")

        controller.subscribe(broken)

        assert await controller.start_scan(folder) is True

    @pytest.mark.asyncio
    async def test_unsubscribe(self, controller: ClassificationController, folder: Path) -> None:
        received: list[WorkflowEvent] = []
        unsubscribe = controller.subscribe(received.append)
        unsubscribe()

        await controller.start_scan(folder)

        assert received == []

    @pytest.mark.asyncio
    async def test_cancel(
        self,
        controller: ClassificationController,
        repository: SQLModelMediaRepository,
        folder: Path,
        events: list,
    ) -> None:
        await controller.start_scan(folder)

        controller.cancel()

        assert controller.is_active is False
        assert events[-1].kind == EventKind.CANCELLED
        assert repository.list_all() == []
