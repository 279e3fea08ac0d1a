"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- ProbedMedia : Metadonnees validees d'un fichier video
- CatalogStats : Statistiques agregees du catalogue
- FormatStats : Repartition des statistiques par format
- ByteRange : Plage d'octets pour le streaming partiel
"""

from filmotheque.core.value_objects.byte_range import ByteRange
from filmotheque.core.value_objects.media_info import ProbedMedia
from filmotheque.core.value_objects.stats import CatalogStats, FormatStats

__all__ = [
    "ByteRange",
    "CatalogStats",
    "FormatStats",
    "ProbedMedia",
]
