"""
Objets valeur des statistiques agregees du catalogue.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FormatStats:
    """Nombre de fichiers et taille cumulee pour un format."""

    format: str | None
    count: int
    total_size: int


@dataclass(frozen=True)
class CatalogStats:
    """
    Statistiques agregees du catalogue.

    Invariant : la somme des count par format egale total_files, et la somme
    des total_size par format egale total_size.

    Attributs :
        total_files : Nombre d'enregistrements
        total_size : Taille cumulee en octets
        total_duration : Duree cumulee en secondes
        avg_size : Taille moyenne (0.0 si catalogue vide)
        avg_duration : Duree moyenne (0.0 si catalogue vide)
        files_with_thumbnails : Nombre d'enregistrements avec miniature
        unique_formats : Nombre de formats distincts
        formats : Repartition par format, triee par nombre decroissant
    """

    total_files: int = 0
    total_size: int = 0
    total_duration: int = 0
    avg_size: float = 0.0
    avg_duration: float = 0.0
    files_with_thumbnails: int = 0
    unique_formats: int = 0
    formats: tuple[FormatStats, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Serialisation JSON (cles camelCase attendues par l'interface)."""
        return {
            "totalFiles": self.total_files,
            "totalSize": self.total_size,
            "totalDuration": self.total_duration,
            "avgSize": self.avg_size,
            "avgDuration": self.avg_duration,
            "filesWithThumbnails": self.files_with_thumbnails,
            "uniqueFormats": self.unique_formats,
            "formats": [
                {"format": f.format, "count": f.count, "totalSize": f.total_size}
                for f in self.formats
            ],
        }
