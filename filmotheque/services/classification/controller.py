"""
Contrôleur du workflow de classification.

Machine à états transformant le résultat éphémère d'un scan en
enregistrements du catalogue :

    SCANNING -> CLASSIFYING -> (DETAILING | COMMITTING) -> DONE
                     ^              |
                     +--- retour ---+

Le contrôleur ne fait aucun rendu : la présentation (routes web, CLI)
appelle ses actions et s'abonne à ses notifications. Une action interdite
dans l'étape courante lève WorkflowStateError.
"""

import asyncio
from contextlib import aclosing
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from filmotheque.core.entities.candidate import CandidateDetails, CandidateFile
from filmotheque.core.entities.media import UNSORTED
from filmotheque.core.errors import CatalogError, FilmothequeError, WorkflowStateError
from filmotheque.core.ports.repositories import IMediaRepository
from filmotheque.services.scanner import ScannerService, ScanReport
from filmotheque.utils.helpers import clean_title

from .autofill import guess_title_and_year
from .dataclasses import (
    ClassificationSession,
    ClassificationStage,
    CommitReport,
    EventKind,
    ScanMode,
    WorkflowEvent,
)

Listener = Callable[[WorkflowEvent], None]

NO_NEW_FILES_MESSAGE = "Aucun nouveau fichier vidéo trouvé"


class ClassificationController:
    """
    Contrôleur d'une session de classification.

    Au plus une session à la fois. Les actions asynchrones (scan, passage
    à l'étape suivante, commit) sont sérialisées par un asyncio.Lock ; les
    actions synchrones n'ont aucun point de suspension.

    Utilisation typique:
        controller = ClassificationController(scanner, repository)
        unsubscribe = controller.subscribe(print)
        if await controller.start_scan(Path("/videos")):
            controller.skip_all()
            report = await controller.proceed()
    """

    def __init__(self, scanner: ScannerService, repository: IMediaRepository) -> None:
        self._scanner = scanner
        self._repository = repository
        self._session: Optional[ClassificationSession] = None
        self._listeners: list[Listener] = []
        self._lock = asyncio.Lock()
        self._scanning = False
        self.last_scan_report: Optional[ScanReport] = None

    # --- Etat et abonnements -------------------------------------------------

    @property
    def session(self) -> Optional[ClassificationSession]:
        return self._session

    @property
    def stage(self) -> Optional[ClassificationStage]:
        """Étape courante, ou None si le contrôleur est inactif."""
        if self._scanning:
            return ClassificationStage.SCANNING
        if self._session is None:
            return None
        return self._session.stage

    @property
    def is_active(self) -> bool:
        return self._scanning or self._session is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Abonne un rappel aux notifications.

        Returns:
            Fonction de désabonnement
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: WorkflowEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # Un abonné défaillant ne doit pas bloquer la machine à états
                logger.exception("Erreur dans un abonné du workflow", kind=event.kind.value)

    def _set_stage(self, session: ClassificationSession, stage: ClassificationStage) -> None:
        session.stage = stage
        self._emit(WorkflowEvent(kind=EventKind.STAGE_CHANGED, stage=stage))

    def _require(self, *stages: ClassificationStage) -> ClassificationSession:
        session = self._session
        if session is None:
            raise WorkflowStateError("Aucune session de classification en cours")
        if session.stage not in stages:
            allowed = ", ".join(stage.value for stage in stages)
            raise WorkflowStateError(
                f"Action impossible à l'étape {session.stage.value} (attendu : {allowed})"
            )
        return session

    def _candidate(self, session: ClassificationSession, index: int) -> CandidateFile:
        if not 0 <= index < len(session.candidates):
            raise IndexError(f"Index de candidat invalide: {index}")
        return session.candidates[index]

    # --- SCANNING ----------------------------------------------------------

    async def start_scan(self, target: Path, mode: ScanMode = ScanMode.FOLDER) -> bool:
        """
        Scanne la cible et ouvre une session si des candidats sont trouvés.

        Returns:
            True si une session CLASSIFYING a été créée, False sinon
            (les abonnés reçoivent alors SCAN_EMPTY ou SCAN_FAILED)

        Raises:
            WorkflowStateError: une session est déjà active
        """
        async with self._lock:
            if self.is_active:
                raise WorkflowStateError("Une session de classification est déjà en cours")

            self._scanning = True
            self._emit(
                WorkflowEvent(kind=EventKind.STAGE_CHANGED, stage=ClassificationStage.SCANNING)
            )
            try:
                candidates = await self._collect(target, mode)
            except (FilmothequeError, OSError) as e:
                logger.warning("Échec du scan", target=str(target), error=str(e))
                self._emit(WorkflowEvent(kind=EventKind.SCAN_FAILED, message=str(e)))
                return False
            finally:
                self._scanning = False

            if not candidates:
                self._emit(WorkflowEvent(kind=EventKind.SCAN_EMPTY, message=NO_NEW_FILES_MESSAGE))
                return False

            self._session = ClassificationSession(candidates=candidates)
            logger.info("Session de classification ouverte", candidates=len(candidates))
            self._emit(
                WorkflowEvent(kind=EventKind.STAGE_CHANGED, stage=ClassificationStage.CLASSIFYING)
            )
            return True

    async def _collect(self, target: Path, mode: ScanMode) -> list[CandidateFile]:
        report = ScanReport(root=target)
        self.last_scan_report = report

        if mode == ScanMode.FILE:
            if not target.is_file():
                raise FileNotFoundError(f"Fichier introuvable: {target}")
            return await self._scanner.scan_file(target, report)

        if not target.is_dir():
            raise NotADirectoryError(f"Dossier introuvable: {target}")
        async with aclosing(self._scanner.scan(target, report)) as stream:
            return [candidate async for candidate in stream]

    # --- CLASSIFYING -------------------------------------------------------

    def classify(self, index: int, category_id: str) -> CandidateFile:
        """Affecte une catégorie (ou UNSORTED) à un candidat."""
        session = self._require(ClassificationStage.CLASSIFYING)
        if not category_id:
            raise ValueError("Catégorie vide")
        candidate = self._candidate(session, index)
        candidate.classification = category_id
        return candidate

    def skip(self, index: int) -> CandidateFile:
        """Marque un candidat comme non trié."""
        return self.classify(index, UNSORTED)

    def skip_all(self) -> None:
        """Marque tous les candidats comme non triés."""
        session = self._require(ClassificationStage.CLASSIFYING)
        for candidate in session.candidates:
            candidate.classification = UNSORTED

    @property
    def can_proceed(self) -> bool:
        session = self._session
        return (
            session is not None
            and session.stage == ClassificationStage.CLASSIFYING
            and session.can_proceed
        )

    async def proceed(self) -> Optional[CommitReport]:
        """
        Termine la classification.

        Si au moins un candidat a une vraie catégorie, passe à DETAILING
        et retourne None. Si tout est non trié, enregistre directement.

        Raises:
            WorkflowStateError: un candidat n'est pas encore classé
        """
        async with self._lock:
            session = self._require(ClassificationStage.CLASSIFYING)
            if not session.can_proceed:
                raise WorkflowStateError(
                    f"Classez tous les fichiers avant de continuer "
                    f"({session.classified_count}/{session.total})"
                )
            if session.to_detail:
                self._set_stage(session, ClassificationStage.DETAILING)
                return None
            return await self._commit(session)

    # --- DETAILING ---------------------------------------------------------

    def set_details(
        self,
        index: int,
        title: Optional[str] = None,
        year: Optional[int] = None,
        description: Optional[str] = None,
    ) -> CandidateFile:
        """
        Saisit titre, année et description d'un candidat catégorisé.

        Raises:
            WorkflowStateError: candidat non trié (pas de détails à saisir)
        """
        session = self._require(ClassificationStage.DETAILING)
        candidate = self._candidate(session, index)
        if candidate.is_unsorted:
            raise WorkflowStateError("Les fichiers non triés n'ont pas de détails")
        candidate.details = CandidateDetails(
            title=clean_title(title),
            year=year,
            description=clean_title(description),
        )
        return candidate

    def auto_fill(self, index: int) -> CandidateFile:
        """Déduit titre et année du nom de fichier."""
        session = self._require(ClassificationStage.DETAILING)
        candidate = self._candidate(session, index)
        if candidate.is_unsorted:
            raise WorkflowStateError("Les fichiers non triés n'ont pas de détails")
        title, year = guess_title_and_year(candidate.path.name)
        if title:
            candidate.details.title = title
        if year is not None:
            candidate.details.year = year
        return candidate

    def back_to_classification(self) -> None:
        """Revient à CLASSIFYING en conservant classifications et détails."""
        session = self._require(ClassificationStage.DETAILING)
        self._set_stage(session, ClassificationStage.CLASSIFYING)

    async def keep_defaults(self) -> CommitReport:
        """Enregistre le lot tel quel, détails auto-remplis ou laissés vides compris."""
        async with self._lock:
            session = self._require(ClassificationStage.DETAILING)
            return await self._commit(session)

    async def save_details(self) -> CommitReport:
        """Enregistre le lot avec les détails saisis."""
        async with self._lock:
            session = self._require(ClassificationStage.DETAILING)
            return await self._commit(session)

    # --- COMMITTING / DONE -------------------------------------------------

    async def _commit(self, session: ClassificationSession) -> CommitReport:
        self._set_stage(session, ClassificationStage.COMMITTING)

        outcomes = await asyncio.gather(
            *(self._commit_one(candidate) for candidate in session.candidates)
        )
        report = CommitReport()
        for record, message in outcomes:
            if record is not None:
                report.add_success(record)
            else:
                report.add_failure(message)

        logger.info(
            "Classification enregistrée",
            succeeded=report.succeeded,
            failed=report.failed,
        )
        session.stage = ClassificationStage.DONE
        self._session = None
        self._emit(
            WorkflowEvent(
                kind=EventKind.DONE,
                stage=ClassificationStage.DONE,
                message=report.summary(),
                report=report,
            )
        )
        self._emit(WorkflowEvent(kind=EventKind.CATALOG_CHANGED))
        return report

    async def _commit_one(self, candidate: CandidateFile):
        try:
            return self._repository.create(candidate.to_record()), None
        except CatalogError as e:
            logger.warning("Échec d'enregistrement", path=str(candidate.path), error=str(e))
            return None, str(e)

    # --- Annulation ---------------------------------------------------------

    def cancel(self) -> None:
        """Abandonne la session en cours sans rien enregistrer."""
        had_session = self._session is not None
        self._session = None
        if had_session:
            logger.info("Session de classification annulée")
        self._emit(WorkflowEvent(kind=EventKind.CANCELLED))

    def reset(self) -> None:
        """Remet le contrôleur à l'état inactif."""
        self.cancel()
