"""
Retry avec backoff exponentiel pour les telechargements distants.

Les reponses 429 (rate limiting) des serveurs d'images sont converties en
RateLimitError et relancees avec un delai croissant et du jitter aleatoire.
Les autres erreurs HTTP sont propagees immediatement.

Usage:
    @with_retry(max_attempts=3, max_wait=30)
    async def fetch():
        ...

    response = await request_with_retry(client, "GET", url)
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class RateLimitError(Exception):
    """
    Le serveur distant a repondu 429 Too Many Requests.

    Attributes:
        retry_after: Secondes a attendre (en-tete Retry-After), ou None
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Retry-After peut aussi etre une date HTTP : seule la forme entiere est gardee."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def with_retry(max_attempts: int = 3, max_wait: int = 30):
    """
    Decorateur relancant une coroutine sur RateLimitError.

    Args:
        max_attempts: Nombre maximum de tentatives
        max_wait: Delai maximum entre deux tentatives, en secondes

    Returns:
        Decorateur tenacity (l'exception finale est relevee telle quelle)
    """
    return retry(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 3,
    max_wait: int = 30,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique sur 429.

    Args:
        client: Client httpx async
        method: Methode HTTP
        url: URL a appeler
        max_attempts: Nombre maximum de tentatives
        max_wait: Delai maximum entre deux tentatives
        **kwargs: Arguments passes a client.request()

    Returns:
        httpx.Response en cas de succes (2xx)

    Raises:
        RateLimitError: Si 429 apres epuisement des tentatives
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
        httpx.TransportError: Pour les erreurs reseau
    """

    @with_retry(max_attempts=max_attempts, max_wait=max_wait)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            raise RateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
        response.raise_for_status()
        return response

    return await _do_request()
