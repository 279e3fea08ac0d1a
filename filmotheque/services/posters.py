"""
Service de telechargement des affiches.

Telecharge une affiche distante et l'associe a un enregistrement du
catalogue. Refuse tout acces reseau en mode hors ligne.
"""

import hashlib
from pathlib import Path
from urllib.parse import urlparse

from loguru import logger

from filmotheque.adapters.api.poster_client import PosterHttpClient
from filmotheque.config import Settings
from filmotheque.core.errors import OfflineModeError, RecordNotFound
from filmotheque.core.ports.repositories import IMediaRepository

POSTER_FEATURE = "download-poster"


def poster_filename(record_id: int, url: str) -> str:
    """
    Nom du fichier local d'une affiche.

    poster_<id>_<md5(url)[:8]><ext>, l'extension etant prise dans le chemin
    de l'URL (.jpg par defaut).
    """
    digest = hashlib.md5(url.encode("utf-8")).hexdigest()[:8]
    extension = Path(urlparse(url).path).suffix.lower() or ".jpg"
    return f"poster_{record_id}_{digest}{extension}"


class PosterService:
    """
    Telechargement et association des affiches.

    Un fichier deja present pour la meme URL est reutilise sans nouveau
    telechargement.
    """

    def __init__(
        self,
        repository: IMediaRepository,
        client: PosterHttpClient,
        settings: Settings,
    ) -> None:
        self._repository = repository
        self._client = client
        self._settings = settings

    async def download_poster(self, record_id: int, url: str) -> Path:
        """
        Telecharge l'affiche et met a jour l'enregistrement.

        Returns:
            Chemin local de l'affiche

        Raises:
            OfflineModeError: mode hors ligne actif (aucune E/S effectuee)
            RecordNotFound: id inconnu
            PosterDownloadError: echec du transfert
        """
        if not self._settings.network_features_available:
            raise OfflineModeError(POSTER_FEATURE)

        if self._repository.get_by_id(record_id) is None:
            raise RecordNotFound(record_id)

        destination = self._settings.posters_dir / poster_filename(record_id, url)
        if destination.exists():
            logger.debug("Affiche deja presente", record_id=record_id, path=str(destination))
        else:
            await self._client.download(url, destination)

        if not self._repository.update_local_poster(record_id, destination):
            raise RecordNotFound(record_id)
        return destination
