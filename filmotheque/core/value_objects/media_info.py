"""
Objets valeur pour les informations media.

Objets valeur immutables representant le resultat du probe d'un fichier video.
Tous les objets valeur utilisent @dataclass(frozen=True) pour garantir l'immutabilite.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ProbedMedia:
    """
    Metadonnees validees d'un fichier video.

    Produit par le prober une fois les controles de format et de duree
    minimale passes.

    Attributs :
        path : Chemin absolu du fichier
        title : Titre par defaut (nom du fichier sans extension)
        format : Extension en minuscules, sans le point
        duration_seconds : Duree arrondie en secondes
        size_bytes : Taille lue sur le systeme de fichiers
        thumbnail_path : Miniature generee, ou None si la generation a echoue
    """

    path: Path
    title: str
    format: str
    duration_seconds: int
    size_bytes: int
    thumbnail_path: Optional[Path] = None

    @property
    def duration_minutes(self) -> int:
        return self.duration_seconds // 60
