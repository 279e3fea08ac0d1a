"""
Modeles SQLModel pour la base de donnees Filmotheque.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- movies: Fichiers video catalogues
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class MovieModel(SQLModel, table=True):
    """
    Modele representant un fichier video catalogue.

    Le chemin est unique : c'est la cle naturelle utilisee pour le
    dedoublonnage pendant le scan. Les noms de colonnes suivent le schema
    historique (duration, thumbnail, local_poster).
    """

    __tablename__ = "movies"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    path: str = Field(unique=True, nullable=False)
    format: str | None = Field(default=None, index=True)
    duration: int | None = None  # secondes
    size_bytes: int | None = None
    thumbnail: str | None = None
    local_poster: str | None = None
    category: str | None = Field(default="unsorted", index=True)
    year: int | None = None
    description: str | None = None
    last_scan: datetime | None = Field(default_factory=lambda: datetime.now(timezone.utc))
