"""
Entites ephemeres du scan et de la classification.

Un CandidateFile est un fichier decouvert par le scan, deja passe par le probe,
mais pas encore enregistre dans le catalogue. Il n'est jamais persiste
directement : il devient un MediaRecord au commit du workflow de classification.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from filmotheque.core.entities.media import UNSORTED, MediaRecord


@dataclass
class CandidateDetails:
    """
    Surcharges saisies pendant l'etape DETAILING.

    Tous les champs sont optionnels : un champ absent retombe sur la valeur
    inferee au scan.
    """

    title: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None


@dataclass
class CandidateFile:
    """
    Fichier video candidat a l'entree dans le catalogue.

    Attributs :
        path : Chemin absolu du fichier
        title : Titre infere depuis le nom de fichier (sans extension)
        format : Extension en minuscules, sans le point
        duration_seconds : Duree mesuree au probe
        size_bytes : Taille du fichier
        thumbnail_path : Miniature d'apercu (None si la generation a echoue)
        classification : Categorie choisie, UNSORTED, ou None si pas encore classe
        details : Surcharges titre/annee/description
    """

    path: Path
    title: str
    format: str
    duration_seconds: int
    size_bytes: int
    thumbnail_path: Optional[Path] = None
    classification: Optional[str] = None
    details: CandidateDetails = field(default_factory=CandidateDetails)

    @property
    def is_classified(self) -> bool:
        return self.classification is not None

    @property
    def is_unsorted(self) -> bool:
        return self.classification == UNSORTED

    @property
    def final_title(self) -> str:
        """Titre retenu au commit : saisie utilisateur, sinon titre infere."""
        return self.details.title or self.title

    def to_record(self) -> MediaRecord:
        """
        Construit le MediaRecord a creer au commit.

        Un candidat non classe est enregistre comme UNSORTED.
        """
        return MediaRecord(
            path=str(self.path),
            title=self.final_title,
            format=self.format,
            duration_seconds=self.duration_seconds,
            size_bytes=self.size_bytes,
            thumbnail_path=str(self.thumbnail_path) if self.thumbnail_path else None,
            category=self.classification or UNSORTED,
            year=self.details.year,
            description=self.details.description,
        )
