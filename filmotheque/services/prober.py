"""
Service de probe des fichiers video.

Valide un fichier candidat (existence, format, duree minimale) et produit
ses metadonnees, avec une miniature si ffmpeg y parvient. Ne touche jamais
au catalogue.
"""

import asyncio
from pathlib import Path

from loguru import logger

from filmotheque.config import Settings
from filmotheque.core.errors import (
    MetadataUnavailable,
    SourceFileMissing,
    ThumbnailGenerationFailed,
    TooShort,
    UnsupportedFormat,
)
from filmotheque.core.ports.file_system import IFileSystem
from filmotheque.core.ports.parser import IDurationReader, IThumbnailer
from filmotheque.core.value_objects import ProbedMedia


class ProberService:
    """
    Service produisant un ProbedMedia valide a partir d'un chemin.

    Coordonne:
    - Le systeme de fichiers (IFileSystem) pour l'existence et la taille
    - Le lecteur de duree (IDurationReader), execute dans un thread
    - Le generateur de miniatures (IThumbnailer), dont l'echec n'est pas fatal
    """

    def __init__(
        self,
        file_system: IFileSystem,
        duration_reader: IDurationReader,
        thumbnailer: IThumbnailer,
        settings: Settings,
    ) -> None:
        self._file_system = file_system
        self._duration_reader = duration_reader
        self._thumbnailer = thumbnailer
        self._settings = settings

    def is_supported(self, path: Path) -> bool:
        """Verifie si l'extension fait partie des formats supportes."""
        return path.suffix.lower() in self._settings.supported_formats

    async def probe(self, path: Path) -> ProbedMedia:
        """
        Analyse un fichier video.

        Args:
            path: Chemin du fichier candidat

        Returns:
            ProbedMedia avec duree arrondie, taille, format et miniature eventuelle

        Raises:
            SourceFileMissing: le fichier n'existe pas
            UnsupportedFormat: extension hors de la liste configuree
            MetadataUnavailable: mediainfo ne fournit pas de duree
            TooShort: duree inferieure au minimum configure
        """
        if not self._file_system.exists(path):
            raise SourceFileMissing(path)
        if not self.is_supported(path):
            raise UnsupportedFormat(path)

        duration = await asyncio.to_thread(self._duration_reader.read_duration, path)
        if duration is None:
            raise MetadataUnavailable(path)

        minimum = self._settings.min_duration_seconds
        if duration < minimum:
            raise TooShort(path, duration, minimum)

        try:
            size_bytes = self._file_system.file_size(path)
        except OSError as e:
            raise MetadataUnavailable(path, str(e)) from e

        thumbnail_path = None
        try:
            thumbnail_path = await self._thumbnailer.generate(path, duration)
        except ThumbnailGenerationFailed as e:
            logger.warning("Miniature non generee", path=str(path), reason=e.reason)

        return ProbedMedia(
            path=path,
            title=path.stem,
            format=path.suffix.lower().lstrip("."),
            duration_seconds=round(duration),
            size_bytes=size_bytes,
            thumbnail_path=thumbnail_path,
        )
