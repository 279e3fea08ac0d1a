"""
Adaptateur pour les operations sur le systeme de fichiers.

Implementation concrete de IFileSystem pour le parcours des repertoires
a la recherche de fichiers video.
"""

import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from loguru import logger

from filmotheque.core.errors import ScanIOError
from filmotheque.core.ports.file_system import IFileSystem

# Extensions video supportees par defaut (surchargees par Settings.supported_formats)
VIDEO_EXTENSIONS: frozenset[str] = frozenset({
    ".mp4", ".mkv", ".avi", ".mov", ".wmv", ".flv", ".webm"
})

ErrorCallback = Callable[[ScanIOError], None]


class FileSystemAdapter(IFileSystem):
    """
    Implementation de IFileSystem pour le systeme de fichiers reel.

    Le parcours est en profondeur d'abord, dans l'ordre d'enumeration de
    chaque repertoire. Les liens symboliques (repertoires et fichiers) ne sont
    jamais suivis, et chaque repertoire n'est visite qu'une fois, identifie
    par (st_dev, st_ino).
    """

    def exists(self, path: Path) -> bool:
        """Verifie si un chemin existe."""
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        """Verifie si le chemin est un repertoire lisible."""
        return path.is_dir() and os.access(path, os.R_OK | os.X_OK)

    def file_size(self, path: Path) -> int:
        """Recupere la taille du fichier en octets."""
        return path.stat().st_size

    def walk_video_files(
        self,
        root: Path,
        extensions: Iterable[str] = VIDEO_EXTENSIONS,
        on_error: Optional[ErrorCallback] = None,
    ) -> Iterator[Path]:
        """
        Parcourt recursivement root et produit les fichiers video.

        Une racine illisible produit zero fichier et une seule erreur.

        Args :
            root : Repertoire racine
            extensions : Extensions acceptees, comparees sans tenir compte de la casse
            on_error : Rappel pour chaque entree en echec (ScanIOError)

        Yields :
            Chemins absolus des fichiers video
        """
        allowed = {ext.lower() for ext in extensions}
        visited: set[tuple[int, int]] = set()
        yield from self._walk(Path(root).absolute(), allowed, visited, on_error)

    def _walk(
        self,
        directory: Path,
        allowed: set[str],
        visited: set[tuple[int, int]],
        on_error: Optional[ErrorCallback],
    ) -> Iterator[Path]:
        try:
            stat = directory.stat()
            key = (stat.st_dev, stat.st_ino)
            if key in visited:
                logger.debug("Repertoire deja visite", path=str(directory))
                return
            visited.add(key)
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            self._report(directory, e, on_error)
            return

        for entry in entries:
            entry_path = Path(entry.path)
            try:
                if entry.is_symlink():
                    logger.debug("Lien symbolique ignore", path=entry.path)
                    continue
                if entry.is_dir(follow_symlinks=False):
                    is_dir = True
                else:
                    is_dir = False
                    is_video = (
                        entry.is_file(follow_symlinks=False)
                        and entry_path.suffix.lower() in allowed
                    )
            except OSError as e:
                self._report(entry_path, e, on_error)
                continue

            if is_dir:
                yield from self._walk(entry_path, allowed, visited, on_error)
            elif is_video:
                yield entry_path

    def _report(
        self, path: Path, error: OSError, on_error: Optional[ErrorCallback]
    ) -> None:
        scan_error = ScanIOError(path, error.strerror or str(error))
        logger.warning("Entree illisible ignoree", path=str(path), reason=scan_error.reason)
        if on_error is not None:
            on_error(scan_error)

