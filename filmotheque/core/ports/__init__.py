"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository :
- IMediaRepository : Stockage du catalogue

Ports système de fichiers :
- IFileSystem : Existence, taille et parcours des répertoires

Ports extraction :
- IDurationReader : Lecture de la durée d'un fichier vidéo
- IThumbnailer : Génération de miniatures
"""

from filmotheque.core.ports.file_system import IFileSystem
from filmotheque.core.ports.parser import IDurationReader, IThumbnailer
from filmotheque.core.ports.repositories import IMediaRepository

__all__ = [
    # Repositories
    "IMediaRepository",
    # Système de fichiers
    "IFileSystem",
    # Extraction
    "IDurationReader",
    "IThumbnailer",
]
