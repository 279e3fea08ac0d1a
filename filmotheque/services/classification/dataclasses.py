"""
Dataclasses et enums du workflow de classification.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from filmotheque.core.entities.candidate import CandidateFile
from filmotheque.core.entities.media import MediaRecord


class ClassificationStage(str, Enum):
    """Étapes d'une session de classification."""

    SCANNING = "scanning"
    CLASSIFYING = "classifying"
    DETAILING = "detailing"
    COMMITTING = "committing"
    DONE = "done"


class ScanMode(str, Enum):
    """Cible du scan : un dossier entier ou un fichier unique."""

    FOLDER = "folder"
    FILE = "file"


class EventKind(str, Enum):
    """Notifications envoyées aux abonnés du contrôleur."""

    STAGE_CHANGED = "stage_changed"
    SCAN_EMPTY = "scan_empty"
    SCAN_FAILED = "scan_failed"
    DONE = "done"
    CATALOG_CHANGED = "catalog_changed"
    CANCELLED = "cancelled"


@dataclass
class CommitReport:
    """
    Bilan du commit d'un lot de candidats.

    Chaque candidat est enregistré indépendamment : un échec n'empêche
    pas les autres insertions.

    Attributs :
        succeeded : Nombre d'enregistrements créés
        failed : Nombre d'échecs
        messages : Messages d'erreur distincts, dans l'ordre d'apparition
        created : Enregistrements créés
    """

    succeeded: int = 0
    failed: int = 0
    messages: list[str] = field(default_factory=list)
    created: list[MediaRecord] = field(default_factory=list)

    def add_success(self, record: MediaRecord) -> None:
        self.succeeded += 1
        self.created.append(record)

    def add_failure(self, message: str) -> None:
        self.failed += 1
        if message not in self.messages:
            self.messages.append(message)

    def summary(self) -> str:
        """Résumé lisible : « 3 enregistré(s), 2 échec(s) : ... »."""
        text = f"{self.succeeded} enregistré(s), {self.failed} échec(s)"
        if self.messages:
            text = f"{text} : {'; '.join(self.messages)}"
        return text


@dataclass
class WorkflowEvent:
    """Notification émise par le contrôleur."""

    kind: EventKind
    stage: Optional[ClassificationStage] = None
    message: Optional[str] = None
    report: Optional[CommitReport] = None


@dataclass
class ClassificationSession:
    """
    Session de classification en cours (au plus une par contrôleur).

    Les candidats gardent l'ordre du scan.
    """

    candidates: list[CandidateFile]
    stage: ClassificationStage = ClassificationStage.CLASSIFYING

    @property
    def total(self) -> int:
        return len(self.candidates)

    @property
    def classified_count(self) -> int:
        return sum(1 for candidate in self.candidates if candidate.is_classified)

    @property
    def can_proceed(self) -> bool:
        """Vrai seulement quand chaque candidat a une classification."""
        return all(candidate.is_classified for candidate in self.candidates)

    @property
    def to_detail(self) -> list[CandidateFile]:
        """Candidats avec une vraie catégorie, proposés à l'étape DETAILING."""
        return [
            candidate
            for candidate in self.candidates
            if candidate.is_classified and not candidate.is_unsorted
        ]

    @property
    def unsorted(self) -> list[CandidateFile]:
        return [candidate for candidate in self.candidates if candidate.is_unsorted]
