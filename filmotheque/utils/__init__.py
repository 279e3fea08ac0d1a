"""
Utilitaires pour Filmotheque.

Ce module contient les fonctions utilitaires partagees.
"""

from filmotheque.utils.helpers import (
    clean_title,
    format_duration,
    format_file_size,
    strip_invisible_chars,
)

__all__ = [
    "clean_title",
    "format_duration",
    "format_file_size",
    "strip_invisible_chars",
]
