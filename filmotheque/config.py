"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe FILMOTHEQUE_,
et peut optionnellement être fournie via un fichier .env.

Le mode hors ligne est actif par défaut : les fonctionnalités réseau (téléchargement
d'affiches) sont refusées tant que FILMOTHEQUE_OFFLINE_MODE n'est pas désactivé.
"""

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de filmotheque/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

DEFAULT_FORMATS = [".mp4", ".mkv", ".avi", ".mov", ".wmv", ".flv", ".webm"]


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe FILMOTHEQUE_.
    Exemple : FILMOTHEQUE_MIN_DURATION_MINUTES=20

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="FILMOTHEQUE_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données
    database_url: str = Field(default="sqlite:///filmotheque.db")

    # Filtrage des fichiers
    min_duration_minutes: int = Field(default=15, ge=0)
    supported_formats: Annotated[list[str], NoDecode] = Field(default_factory=lambda: list(DEFAULT_FORMATS))

    # Miniatures et affiches (avec expansion ~)
    thumbnails_dir: Path = Field(default=Path("~/.filmotheque/thumbnails"))
    posters_dir: Path = Field(default=Path("~/.filmotheque/posters"))
    thumbnail_size: str = Field(default="320x240")
    thumbnail_position: float = Field(default=0.5, ge=0.0, le=1.0)
    ffmpeg_binary: str = Field(default="ffmpeg")
    thumbnail_timeout_seconds: int = Field(default=60, ge=1)

    # Traitement
    scan_workers: int = Field(default=4, ge=1)
    stream_chunk_size: int = Field(default=1024 * 1024, ge=1)

    # Réseau
    offline_mode: bool = Field(default=True)
    poster_timeout_seconds: int = Field(default=30, ge=1)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/filmotheque.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("thumbnails_dir", "posters_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("supported_formats", mode="before")
    @classmethod
    def normalize_formats(cls, v: str | list[str]) -> list[str]:
        """Normalise les extensions : minuscules, avec le point initial.

        Accepte aussi une chaîne séparée par des virgules (variable d'environnement).
        """
        if isinstance(v, str):
            v = v.split(",")
        formats = []
        for item in v:
            ext = item.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in formats:
                formats.append(ext)
        return formats

    @field_validator("thumbnail_size")
    @classmethod
    def check_thumbnail_size(cls, v: str) -> str:
        """Vérifie le format <largeur>x<hauteur>."""
        width, sep, height = v.lower().partition("x")
        if not sep or not width.isdigit() or not height.isdigit():
            raise ValueError(f"Taille de miniature invalide: {v!r} (attendu 320x240)")
        return f"{int(width)}x{int(height)}"

    @property
    def min_duration_seconds(self) -> int:
        """Durée minimale d'une vidéo cataloguée, en secondes."""
        return self.min_duration_minutes * 60

    @property
    def network_features_available(self) -> bool:
        """Vérifie si les fonctionnalités réseau sont autorisées."""
        return not self.offline_mode

    @property
    def thumbnail_dimensions(self) -> tuple[int, int]:
        """Dimensions (largeur, hauteur) des miniatures."""
        width, _, height = self.thumbnail_size.partition("x")
        return int(width), int(height)
