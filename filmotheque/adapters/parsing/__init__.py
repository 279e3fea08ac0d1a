"""
Adaptateurs d'extraction de metadonnees pour Filmotheque.

- MediaInfoDurationReader: Lit la duree des fichiers video avec pymediainfo
"""

from filmotheque.adapters.parsing.mediainfo_extractor import MediaInfoDurationReader

__all__ = ["MediaInfoDurationReader"]
