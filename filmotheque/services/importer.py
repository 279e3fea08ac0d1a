"""
Service d'import direct d'un repertoire dans le catalogue.

Enchaine scan, probe et insertion sans passer par la classification :
chaque candidat devient un enregistrement "unsorted". Utilise par
POST /movies/scan et la commande CLI scan.
"""

from contextlib import aclosing
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from loguru import logger

from filmotheque.core.entities.candidate import CandidateFile
from filmotheque.core.errors import CatalogError, DuplicatePath
from filmotheque.core.ports.repositories import IMediaRepository
from filmotheque.services.scanner import ScannerService, ScanReport


class ImportDecision(Enum):
    """Decision prise pour un candidat lors de l'import."""

    CREATED = "created"  # Nouvel enregistrement
    DUPLICATE = "duplicate"  # Chemin insere entre-temps
    ERROR = "error"  # Erreur de stockage


@dataclass
class ImportResult:
    """
    Resultat de l'import d'un candidat.

    Attributs:
        path: Chemin du fichier traite
        decision: Decision prise
        record_id: Id attribue si decision == CREATED
        error_message: Message d'erreur si decision == ERROR
    """

    path: Path
    decision: ImportDecision
    record_id: Optional[int] = None
    error_message: Optional[str] = None


@dataclass
class ImportReport:
    """Bilan d'un import : resultats par fichier et rapport de scan."""

    scan: ScanReport
    results: list[ImportResult] = field(default_factory=list)

    def _count(self, decision: ImportDecision) -> int:
        return sum(1 for result in self.results if result.decision == decision)

    @property
    def created(self) -> int:
        return self._count(ImportDecision.CREATED)

    @property
    def duplicates(self) -> int:
        return self._count(ImportDecision.DUPLICATE)

    @property
    def failures(self) -> int:
        return self._count(ImportDecision.ERROR)


class CatalogImporter:
    """
    Import d'un repertoire entier dans le catalogue.

    Relancer l'import sur le meme repertoire ne cree aucun doublon :
    le scanner ecarte deja les chemins catalogues, et une insertion
    concurrente est comptee comme doublon.
    """

    def __init__(self, scanner: ScannerService, repository: IMediaRepository) -> None:
        self._scanner = scanner
        self._repository = repository

    async def import_directory(self, root: Path) -> ImportReport:
        """
        Scanne root et cree un enregistrement pour chaque candidat.

        Args:
            root: Repertoire a importer

        Returns:
            ImportReport avec les decisions par fichier
        """
        report = ImportReport(scan=ScanReport(root=root))
        logger.info("Import du repertoire", root=str(root))

        async with aclosing(self._scanner.scan(root, report.scan)) as candidates:
            async for candidate in candidates:
                report.results.append(self._import_candidate(candidate))

        logger.info(
            "Import termine",
            root=str(root),
            created=report.created,
            duplicates=report.duplicates,
            failures=report.failures,
        )
        return report

    def _import_candidate(self, candidate: CandidateFile) -> ImportResult:
        try:
            record = self._repository.create(candidate.to_record())
        except DuplicatePath:
            return ImportResult(path=candidate.path, decision=ImportDecision.DUPLICATE)
        except CatalogError as e:
            logger.error("Echec d'insertion", path=str(candidate.path), error=str(e))
            return ImportResult(
                path=candidate.path,
                decision=ImportDecision.ERROR,
                error_message=str(e),
            )
        return ImportResult(
            path=candidate.path,
            decision=ImportDecision.CREATED,
            record_id=record.id,
        )
