"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- cli/ : Interface ligne de commande (Typer + Rich)
- api/ : Client HTTP de téléchargement d'affiches
- parsing/ : Lecture de durée via mediainfo
- thumbnails/ : Génération de miniatures via ffmpeg

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""

from filmotheque.adapters.file_system import FileSystemAdapter
from filmotheque.adapters.parsing.mediainfo_extractor import MediaInfoDurationReader
from filmotheque.adapters.thumbnails.ffmpeg_thumbnailer import FFmpegThumbnailer

__all__ = [
    "FFmpegThumbnailer",
    "FileSystemAdapter",
    "MediaInfoDurationReader",
]
