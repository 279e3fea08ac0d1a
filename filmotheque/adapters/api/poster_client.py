"""
Client HTTP de telechargement d'affiches.

Usage:
    client = PosterHttpClient(timeout=30)
    await client.download("https://image.example.org/p/abc.jpg", Path("/tmp/abc.jpg"))
    await client.close()
"""

from pathlib import Path
from typing import Optional

import httpx
from loguru import logger

from filmotheque.adapters.api.retry import RateLimitError, request_with_retry
from filmotheque.core.errors import PosterDownloadError


class PosterHttpClient:
    """
    Telecharge une image distante vers un fichier local.

    Le client httpx est cree a la premiere utilisation. Un fichier partiel
    n'est jamais laisse sur le disque en cas d'echec.
    """

    def __init__(self, timeout: float = 30.0, max_attempts: int = 3) -> None:
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"Accept": "image/*"},
            )
        return self._client

    async def download(self, url: str, destination: Path) -> Path:
        """
        Telecharge url vers destination.

        Raises:
            PosterDownloadError: statut non 2xx, erreur reseau ou ecriture impossible
        """
        try:
            response = await request_with_retry(
                self._get_client(), "GET", url, max_attempts=self._max_attempts
            )
        except httpx.HTTPStatusError as e:
            raise PosterDownloadError(
                f"Erreur HTTP {e.response.status_code} pour {url}"
            ) from e
        except RateLimitError as e:
            raise PosterDownloadError(f"Trop de requetes pour {url}") from e
        except httpx.HTTPError as e:
            raise PosterDownloadError(f"Erreur reseau pour {url}: {e}") from e

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(response.content)
        except OSError as e:
            destination.unlink(missing_ok=True)
            raise PosterDownloadError(f"Ecriture impossible: {destination}: {e}") from e

        logger.info("Affiche telechargee", url=url, path=str(destination))
        return destination

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
