"""
Objet valeur d'une plage d'octets HTTP.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ByteRange:
    """
    Plage d'octets inclusive [start, end] d'un fichier de taille file_size.
    """

    start: int
    end: int
    file_size: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        """Valeur de l'en-tete Content-Range."""
        return f"bytes {self.start}-{self.end}/{self.file_size}"

    @property
    def is_full(self) -> bool:
        return self.start == 0 and self.end == self.file_size - 1
