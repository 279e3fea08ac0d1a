"""
Clients HTTP externes.

- PosterHttpClient: Telechargement d'affiches avec retry sur 429
"""

from filmotheque.adapters.api.poster_client import PosterHttpClient
from filmotheque.adapters.api.retry import RateLimitError, request_with_retry, with_retry

__all__ = [
    "PosterHttpClient",
    "RateLimitError",
    "request_with_retry",
    "with_retry",
]
