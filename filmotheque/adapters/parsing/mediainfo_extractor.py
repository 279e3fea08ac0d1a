"""
Lecture de la duree des fichiers video avec pymediainfo.

Ce module fournit MediaInfoDurationReader qui implemente IDurationReader.
La lecture est synchrone : le prober l'execute dans un thread.
"""

from pathlib import Path
from typing import Optional

from loguru import logger
from pymediainfo import MediaInfo as PyMediaInfo

from filmotheque.core.ports.parser import IDurationReader


class MediaInfoDurationReader(IDurationReader):
    """
    Lecteur de duree utilisant la piste generale de mediainfo.
    """

    def read_duration(self, file_path: Path) -> Optional[float]:
        """
        Lit la duree du conteneur.

        Args:
            file_path: Chemin complet vers le fichier video

        Returns:
            Duree en secondes (non arrondie), ou None si mediainfo ne
            fournit pas de duree (fichier non video, corrompu, etc.)
        """
        if not file_path.exists():
            return None

        try:
            media_info = PyMediaInfo.parse(str(file_path))
        except (OSError, RuntimeError) as e:
            logger.warning("Echec mediainfo", path=str(file_path), error=str(e))
            return None

        general_tracks = [
            track for track in media_info.tracks if track.track_type == "General"
        ]
        return self._extract_duration(general_tracks)

    def _extract_duration(self, general_tracks: list) -> Optional[float]:
        """
        Extrait la duree en SECONDES depuis la piste generale.

        CRITICAL: pymediainfo retourne la duree en millisecondes!
        """
        if not general_tracks:
            return None

        duration_ms = general_tracks[0].duration
        if duration_ms is None:
            return None

        try:
            return float(duration_ms) / 1000
        except (TypeError, ValueError):
            return None
