"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance du catalogue.
Les implémentations (adaptateurs) fourniront les mécanismes de stockage concrets
(SQLite via SQLModel, en mémoire pour les tests, etc.).
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from filmotheque.core.entities.media import MediaRecord
from filmotheque.core.value_objects import CatalogStats


class IMediaRepository(ABC):
    """
    Interface de stockage des fichiers vidéo catalogués.

    Le chemin est la clé naturelle : deux enregistrements ne partagent
    jamais le même chemin. Les erreurs de stockage remontent en StoreIOError.
    """

    @abstractmethod
    def create(self, record: MediaRecord) -> MediaRecord:
        """
        Insère un nouvel enregistrement.

        Retourne :
            L'enregistrement avec son id attribué

        Lève :
            DuplicatePath si le chemin est déjà catalogué
        """
        ...

    @abstractmethod
    def update(self, record: MediaRecord) -> MediaRecord:
        """
        Rafraîchit titre, format, durée, taille et miniature après un nouveau probe.

        Lève :
            RecordNotFound si l'id est inconnu
        """
        ...

    @abstractmethod
    def get_by_id(self, record_id: int) -> Optional[MediaRecord]:
        """Récupère un enregistrement par son id."""
        ...

    @abstractmethod
    def get_by_path(self, path: Path | str) -> Optional[MediaRecord]:
        """Récupère un enregistrement par son chemin exact."""
        ...

    @abstractmethod
    def list_all(self) -> list[MediaRecord]:
        """Liste tous les enregistrements, triés par titre."""
        ...

    @abstractmethod
    def list_by_category(self, category: str) -> list[MediaRecord]:
        """Liste les enregistrements d'une catégorie, triés par titre."""
        ...

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        """Supprime un enregistrement. Retourne True si une ligne a été supprimée."""
        ...

    @abstractmethod
    def update_local_poster(self, record_id: int, poster_path: Path) -> bool:
        """Enregistre le chemin de l'affiche locale. Retourne True si modifié."""
        ...

    @abstractmethod
    def update_category(self, record_id: int, category: str) -> bool:
        """Change la catégorie d'un enregistrement. Retourne True si modifié."""
        ...

    @abstractmethod
    def get_stats(self) -> CatalogStats:
        """Calcule les statistiques agrégées du catalogue."""
        ...
