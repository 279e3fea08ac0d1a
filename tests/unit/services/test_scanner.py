"""
Tests du ScannerService et du CatalogImporter.

Le parcours utilise le vrai FileSystemAdapter sur tmp_path et une vraie
base SQLite ; seuls mediainfo et ffmpeg sont remplaces.
"""

from contextlib import aclosing
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from filmotheque.adapters.file_system import FileSystemAdapter
from filmotheque.config import Settings
from filmotheque.core.entities.media import UNSORTED
from filmotheque.infrastructure.persistence.repositories import SQLModelMediaRepository
from filmotheque.services.importer import CatalogImporter, ImportDecision
from filmotheque.services.prober import ProberService
from filmotheque.services.scanner import ScannerService, ScanReport


@pytest.fixture
def prober(duration_reader, thumbnailer, test_settings: Settings) -> ProberService:
    return ProberService(FileSystemAdapter(), duration_reader, thumbnailer, test_settings)


@pytest.fixture
def scanner(
    prober: ProberService,
    repository: SQLModelMediaRepository,
    test_settings: Settings,
) -> ScannerService:
    return ScannerService(FileSystemAdapter(), prober, repository, test_settings)


@pytest.fixture
def importer(scanner: ScannerService, repository: SQLModelMediaRepository) -> CatalogImporter:
    return CatalogImporter(scanner, repository)


@pytest.fixture
def library(make_video: Callable[..., Path], tmp_path: Path, duration_reader) -> Path:
    """
    Arborescence de test :
    - 3 films longs (dont un dans un sous-repertoire)
    - 1 bande-annonce trop courte
    - 1 fichier texte
    """
    make_video("Alien.mkv")
    make_video("Drames/Le Grand Bleu.mp4")
    make_video("Drames/Classiques/Marnie.avi")
    make_video("Bande-annonce.mkv")
    make_video("notes.txt")
    duration_reader.durations["Bande-annonce.mkv"] = 120.0
    return tmp_path / "videos"


async def _collect(scanner: ScannerService, root: Path, report: ScanReport) -> list:
    async with aclosing(scanner.scan(root, report)) as stream:
        return [candidate async for candidate in stream]


class TestScan:
    """Tests du scan d'un repertoire."""

    @pytest.mark.asyncio
    async def test_yields_long_videos(self, scanner: ScannerService, library: Path) -> None:
        report = ScanReport(root=library)

        candidates = await _collect(scanner, library, report)

        assert sorted(c.path.name for c in candidates) == [
            "Alien.mkv", "Le Grand Bleu.mp4", "Marnie.avi",
        ]
        assert report.discovered == 4
        assert report.too_short == 1
        assert report.candidates == 3
        assert all(c.classification is None for c in candidates)

    @pytest.mark.asyncio
    async def test_skips_cataloged_paths(
        self,
        scanner: ScannerService,
        repository: SQLModelMediaRepository,
        library: Path,
        duration_reader,
    ) -> None:
        """Un chemin deja catalogue n'est meme pas analyse."""
        candidates = await _collect(scanner, library, ScanReport(root=library))
        repository.create(next(c for c in candidates if c.path.name == "Alien.mkv").to_record())
        duration_reader.calls.clear()

        report = ScanReport(root=library)
        second = await _collect(scanner, library, report)

        assert "Alien.mkv" not in {c.path.name for c in second}
        assert report.already_cataloged == 1
        assert all(path.name != "Alien.mkv" for path in duration_reader.calls)

    @pytest.mark.asyncio
    async def test_unreadable_root(self, scanner: ScannerService, tmp_path: Path) -> None:
        report = ScanReport(root=tmp_path / "absent")

        candidates = await _collect(scanner, tmp_path / "absent", report)

        assert candidates == []
        assert len(report.errors) == 1

    @pytest.mark.asyncio
    async def test_early_close(self, scanner: ScannerService, library: Path) -> None:
        """Fermer l'iterateur apres le premier candidat annule proprement le scan."""
        async with aclosing(scanner.scan(library)) as stream:
            async for _ in stream:
                break

    @pytest.mark.asyncio
    async def test_walker_error_propagates(
        self,
        mock_file_system: MagicMock,
        prober: ProberService,
        repository: SQLModelMediaRepository,
        test_settings: Settings,
    ) -> None:
        def broken_walk(*args, **kwargs):
            raise RuntimeError("parcours interrompu")
            yield  # pragma: no cover

        mock_file_system.walk_video_files.side_effect = broken_walk
        scanner = ScannerService(mock_file_system, prober, repository, test_settings)

        with pytest.raises(RuntimeError, match="parcours interrompu"):
            await _collect(scanner, Path("/videos"), ScanReport(root=Path("/videos")))


class TestScanFile:
    """Tests du mode fichier unique."""

    @pytest.mark.asyncio
    async def test_single_file(self, scanner: ScannerService, make_video) -> None:
        path = make_video("Alien.mkv")

        candidates = await scanner.scan_file(path)

        assert [c.path for c in candidates] == [path]

    @pytest.mark.asyncio
    async def test_single_file_unsupported(self, scanner: ScannerService, make_video) -> None:
        report = ScanReport(root=Path("notes.txt"))

        assert await scanner.scan_file(make_video("notes.txt"), report) == []
        assert report.unsupported == 1

    @pytest.mark.asyncio
    async def test_single_file_already_cataloged(
        self, scanner: ScannerService, repository: SQLModelMediaRepository, make_video
    ) -> None:
        path = make_video("Alien.mkv")
        [candidate] = await scanner.scan_file(path)
        repository.create(candidate.to_record())

        assert await scanner.scan_file(path) == []


class TestImporter:
    """Tests de l'import direct d'un repertoire."""

    @pytest.mark.asyncio
    async def test_import_creates_unsorted_records(
        self,
        importer: CatalogImporter,
        repository: SQLModelMediaRepository,
        library: Path,
    ) -> None:
        report = await importer.import_directory(library)

        assert report.created == 3
        assert report.failures == 0
        records = repository.list_all()
        assert [r.title for r in records] == ["Alien", "Le Grand Bleu", "Marnie"]
        assert {r.category for r in records} == {UNSORTED}
        assert all(r.id for r in records)

    @pytest.mark.asyncio
    async def test_rescan_is_idempotent(
        self,
        importer: CatalogImporter,
        repository: SQLModelMediaRepository,
        library: Path,
    ) -> None:
        """Relancer l'import sur le meme repertoire ne cree aucun doublon."""
        await importer.import_directory(library)

        second = await importer.import_directory(library)

        assert second.created == 0
        assert second.scan.already_cataloged == 3
        assert len(repository.list_all()) == 3

    @pytest.mark.asyncio
    async def test_concurrent_insert_counted_as_duplicate(
        self,
        importer: CatalogImporter,
        repository: SQLModelMediaRepository,
        scanner: ScannerService,
        make_video,
    ) -> None:
        path = make_video("Alien.mkv")
        [candidate] = await scanner.scan_file(path)
        repository.create(candidate.to_record())

        result = importer._import_candidate(candidate)

        assert result.decision == ImportDecision.DUPLICATE
