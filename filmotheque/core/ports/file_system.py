"""
Interfaces ports pour le système de fichiers.

Interfaces abstraites (ports) définissant les contrats pour le parcours
des répertoires à la recherche de fichiers vidéo.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from filmotheque.core.errors import ScanIOError


class IFileSystem(ABC):
    """
    Interface pour les opérations de base sur les fichiers.
    """

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Vérifie si un chemin existe."""
        ...

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Vérifie si un chemin est un répertoire lisible."""
        ...

    @abstractmethod
    def file_size(self, path: Path) -> int:
        """Retourne la taille du fichier en octets (OSError si illisible)."""
        ...

    @abstractmethod
    def walk_video_files(
        self,
        root: Path,
        extensions: Iterable[str],
        on_error: Optional[Callable[[ScanIOError], None]] = None,
    ) -> Iterator[Path]:
        """
        Parcourt récursivement root et produit les fichiers vidéo trouvés.

        Les liens symboliques ne sont pas suivis. Une erreur sur une entrée
        est transmise à on_error et le parcours continue.

        Args :
            root : Répertoire racine du parcours
            extensions : Extensions acceptées (minuscules, avec le point)
            on_error : Rappel appelé pour chaque entrée illisible

        Retourne :
            Itérateur de chemins absolus
        """
        ...
