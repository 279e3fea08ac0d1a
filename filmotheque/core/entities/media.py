"""
Entites du catalogue.

MediaRecord represente un fichier video catalogue (persiste).
Category est une donnee de reference immuable servant a etiqueter les records.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

# Etiquette sentinelle des medias non classes
UNSORTED = "unsorted"
UNSORTED_LABEL = "Non trié"


@dataclass
class MediaRecord:
    """
    Fichier video catalogue.

    Le chemin absolu identifie de maniere unique un enregistrement.
    Un record n'est cree qu'a partir d'un candidat ayant passe les controles
    de duree minimale et de format supporte.

    Attributs :
        id : Identifiant attribue par le stockage
        path : Chemin absolu du fichier (cle unique)
        title : Titre affiche
        format : Extension en minuscules, sans le point (mkv, mp4...)
        duration_seconds : Duree en secondes
        size_bytes : Taille du fichier en octets
        thumbnail_path : Miniature generee au probe (optionnelle)
        local_poster_path : Affiche telechargee (optionnelle)
        category : Etiquette de categorie (UNSORTED par defaut)
        year : Annee saisie pendant la classification
        description : Description courte saisie pendant la classification
        last_scan : Horodatage de la derniere ecriture
    """

    path: str
    title: str
    format: str
    duration_seconds: int
    size_bytes: int
    id: Optional[int] = None
    thumbnail_path: Optional[str] = None
    local_poster_path: Optional[str] = None
    category: str = UNSORTED
    year: Optional[int] = None
    description: Optional[str] = None
    last_scan: Optional[datetime] = None

    @property
    def file_path(self) -> Path:
        """Chemin du fichier sous forme de Path."""
        return Path(self.path)

    @property
    def content_type(self) -> str:
        """Type MIME servi au lecteur video."""
        return f"video/{self.format}"

    @property
    def has_thumbnail(self) -> bool:
        return self.thumbnail_path is not None


@dataclass(frozen=True)
class Category:
    """
    Categorie de classement.

    Attributs :
        id : Identifiant stable (utilise comme etiquette sur les records)
        name : Nom affiche
        icon : Glyphe affiche devant le nom
    """

    id: str
    name: str
    icon: str

    @property
    def label(self) -> str:
        return f"{self.icon} {self.name}"


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="films", name="Films", icon="🎬"),
    Category(id="series", name="Séries", icon="📺"),
    Category(id="documentaires", name="Documentaires", icon="📚"),
    Category(id="animation", name="Animation", icon="🎨"),
    Category(id="spectacles", name="Spectacles", icon="🎭"),
    Category(id="personnel", name="Vidéos personnelles", icon="🏠"),
)


def find_category(
    category_id: Optional[str],
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES,
) -> Optional[Category]:
    """Retourne la categorie correspondant a l'identifiant, ou None."""
    for category in categories:
        if category.id == category_id:
            return category
    return None


def display_category(
    category_id: Optional[str],
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES,
) -> str:
    """
    Libelle affichable d'une etiquette de categorie.

    Les etiquettes inconnues ne sont pas une erreur : elles sont affichees
    comme "Non trié".
    """
    category = find_category(category_id, categories)
    if category is None:
        return UNSORTED_LABEL
    return category.label
