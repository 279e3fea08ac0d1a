"""
Implementations SQLModel des repositories.

Ce module contient l'implementation concrete de l'interface repository
definie dans filmotheque/core/ports/repositories.py, utilisant SQLModel pour
la persistance SQLite.

Le repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel via injection de dependances
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
"""

from filmotheque.infrastructure.persistence.repositories.media_repository import (
    SQLModelMediaRepository,
)

__all__ = [
    "SQLModelMediaRepository",
]
