"""
Interfaces ports pour l'extraction de métadonnées vidéo.

Interfaces abstraites (ports) definissant les contrats pour la lecture
de la duree et la generation des miniatures.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class IDurationReader(ABC):
    """
    Interface pour la lecture de la duree d'un fichier video.
    """

    @abstractmethod
    def read_duration(self, file_path: Path) -> Optional[float]:
        """
        Lit la duree du conteneur.

        Args :
            file_path : Chemin vers le fichier video

        Retourne :
            Duree en secondes, ou None si le fichier n'est pas lisible
        """
        ...


class IThumbnailer(ABC):
    """
    Interface pour la generation de miniatures.
    """

    @abstractmethod
    async def generate(self, file_path: Path, duration_seconds: float) -> Path:
        """
        Capture une image du fichier video.

        Args :
            file_path : Chemin vers le fichier video
            duration_seconds : Duree connue du fichier (positionne la capture)

        Retourne :
            Chemin de la miniature ecrite

        Leve :
            ThumbnailGenerationFailed si la capture echoue
        """
        ...
