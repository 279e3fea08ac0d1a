"""
Service de scan des repertoires.

Parcourt un sous-arbre, filtre les fichiers video, ecarte ceux deja catalogues
et fait analyser les autres par un pool borne de workers asyncio. Les
candidats sont produits au fil de l'eau par un iterateur asynchrone.
"""

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

from filmotheque.config import Settings
from filmotheque.core.entities.candidate import CandidateFile
from filmotheque.core.errors import ProbeError, ScanIOError, TooShort, UnsupportedFormat
from filmotheque.core.ports.file_system import IFileSystem
from filmotheque.core.ports.repositories import IMediaRepository
from filmotheque.core.value_objects import ProbedMedia
from filmotheque.services.prober import ProberService

# Marqueur de fin de flux dans les files internes
_DONE = object()


@dataclass
class ScanReport:
    """
    Compteurs d'un scan.

    Attributs:
        root: Racine scannee (ou fichier, en mode fichier unique)
        discovered: Fichiers video trouves par le parcours
        already_cataloged: Fichiers ecartes car deja presents dans le catalogue
        too_short: Fichiers ecartes car sous la duree minimale
        unsupported: Fichiers ecartes pour format non supporte
        probe_failures: Autres echecs de probe (fichier disparu, mediainfo muet)
        candidates: Candidats produits
        errors: Erreurs d'acces rencontrees pendant le parcours
    """

    root: Path
    discovered: int = 0
    already_cataloged: int = 0
    too_short: int = 0
    unsupported: int = 0
    probe_failures: int = 0
    candidates: int = 0
    errors: list[ScanIOError] = field(default_factory=list)

    def add_error(self, error: ScanIOError) -> None:
        self.errors.append(error)


def candidate_from_probed(probed: ProbedMedia) -> CandidateFile:
    """Construit un candidat non classe a partir d'un resultat de probe."""
    return CandidateFile(
        path=probed.path,
        title=probed.title,
        format=probed.format,
        duration_seconds=probed.duration_seconds,
        size_bytes=probed.size_bytes,
        thumbnail_path=probed.thumbnail_path,
    )


class ScannerService:
    """
    Service orchestrant le scan d'un repertoire ou d'un fichier.

    Coordonne:
    - Le systeme de fichiers (IFileSystem) pour le parcours
    - Le repository (IMediaRepository) pour le dedoublonnage par chemin
    - Le prober (ProberService) pour la validation et les metadonnees

    Un walker unique alimente une file bornee (2 x scan_workers) consommee
    par scan_workers taches de probe. Un consommateur lent ralentit donc
    le probe puis le parcours.
    """

    def __init__(
        self,
        file_system: IFileSystem,
        prober: ProberService,
        repository: IMediaRepository,
        settings: Settings,
    ) -> None:
        self._file_system = file_system
        self._prober = prober
        self._repository = repository
        self._settings = settings

    async def scan(
        self, root: Path, report: Optional[ScanReport] = None
    ) -> AsyncIterator[CandidateFile]:
        """
        Scanne root et produit les candidats, dans l'ordre de fin de probe.

        Chaque appel reparcourt tout le sous-arbre. Fermer l'iterateur avant
        la fin annule le walker et les workers.

        Args:
            root: Repertoire a scanner
            report: Rapport a completer (un nouveau est cree sinon)

        Yields:
            CandidateFile non classes
        """
        if report is None:
            report = ScanReport(root=root)
        workers = self._settings.scan_workers
        paths: asyncio.Queue = asyncio.Queue(maxsize=2 * workers)
        results: asyncio.Queue = asyncio.Queue(maxsize=2 * workers)

        walker = asyncio.create_task(self._feed(root, paths, report, workers))
        pool = [
            asyncio.create_task(self._probe_worker(paths, results, report))
            for _ in range(workers)
        ]
        tasks = [walker, *pool]

        try:
            finished = 0
            while finished < workers:
                item = await results.get()
                if item is _DONE:
                    finished += 1
                    continue
                report.candidates += 1
                yield item
            # Remonte une eventuelle erreur du walker ou d'un worker
            await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        logger.info(
            "Scan termine",
            root=str(root),
            discovered=report.discovered,
            candidates=report.candidates,
            already_cataloged=report.already_cataloged,
            errors=len(report.errors),
        )

    async def scan_file(
        self, path: Path, report: Optional[ScanReport] = None
    ) -> list[CandidateFile]:
        """
        Mode fichier unique : meme filtre, dedoublonnage et probe.

        Returns:
            Liste de zero ou un candidat
        """
        if report is None:
            report = ScanReport(root=path)
        if not self._prober.is_supported(path):
            report.unsupported += 1
            logger.debug("Format non supporte", path=str(path))
            return []

        report.discovered += 1
        if self._repository.get_by_path(path) is not None:
            report.already_cataloged += 1
            return []

        candidate = await self._probe_candidate(path, report)
        if candidate is None:
            return []
        report.candidates += 1
        return [candidate]

    async def _feed(
        self, root: Path, paths: asyncio.Queue, report: ScanReport, workers: int
    ) -> None:
        """Alimente la file des chemins puis signale la fin a chaque worker."""
        error: Optional[Exception] = None
        try:
            await self._walk(root, paths, report)
        except Exception as e:
            error = e
        for _ in range(workers):
            await paths.put(_DONE)
        if error is not None:
            raise error

    async def _walk(self, root: Path, paths: asyncio.Queue, report: ScanReport) -> None:
        iterator = self._file_system.walk_video_files(
            root, self._settings.supported_formats, on_error=report.add_error
        )
        while True:
            # Lecture des repertoires hors de la boucle d'evenements
            path = await asyncio.to_thread(next, iterator, None)
            if path is None:
                return
            report.discovered += 1
            if self._repository.get_by_path(path) is not None:
                report.already_cataloged += 1
                logger.debug("Deja catalogue", path=str(path))
                continue
            await paths.put(path)

    async def _probe_worker(
        self, paths: asyncio.Queue, results: asyncio.Queue, report: ScanReport
    ) -> None:
        error: Optional[Exception] = None
        try:
            while True:
                path = await paths.get()
                if path is _DONE:
                    break
                candidate = await self._probe_candidate(path, report)
                if candidate is not None:
                    await results.put(candidate)
        except Exception as e:
            error = e
        await results.put(_DONE)
        if error is not None:
            raise error

    async def _probe_candidate(
        self, path: Path, report: ScanReport
    ) -> Optional[CandidateFile]:
        try:
            probed = await self._prober.probe(path)
        except TooShort as e:
            report.too_short += 1
            logger.debug("Fichier trop court ignore", path=str(path), duration=e.duration_seconds)
            return None
        except UnsupportedFormat:
            report.unsupported += 1
            logger.debug("Format non supporte", path=str(path))
            return None
        except ProbeError as e:
            report.probe_failures += 1
            logger.warning("Echec du probe", path=str(path), error=str(e))
            return None
        return candidate_from_probed(probed)
