"""
Fonctions utilitaires partagees dans le projet Filmotheque.

Ce module centralise les fonctions reutilisees a travers le codebase :
- clean_title : nettoyage des titres saisis ou deduits
- format_duration : duree en HH:MM:SS
- format_file_size : taille lisible (B, KB, MB, GB)
"""

import unicodedata
from typing import Optional


def strip_invisible_chars(text: str) -> str:
    """
    Retire les caractères Unicode invisibles d'une chaîne.

    Supprime les caractères de contrôle et les marques directionnelles
    (LRM, RLM, BOM, etc.) qu'on retrouve dans certains noms de fichiers.
    """
    return "".join(
        char for char in text if unicodedata.category(char) not in ("Cf", "Cc")
    )


def clean_title(title: Optional[str]) -> Optional[str]:
    """Nettoie un titre ; une chaîne vide devient None."""
    if not title:
        return None
    return strip_invisible_chars(title).strip() or None


def format_duration(seconds: Optional[float]) -> str:
    """
    Formate une durée en HH:MM:SS.

    >>> format_duration(5400)
    '01:30:00'
    """
    total = int(seconds or 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_file_size(size_bytes: Optional[int]) -> str:
    """
    Formate une taille en octets avec deux décimales.

    >>> format_file_size(1536)
    '1.50 KB'
    """
    size = size_bytes or 0
    if size < 1024:
        return f"{size} B"
    if size < 1024 ** 2:
        return f"{size / 1024:.2f} KB"
    if size < 1024 ** 3:
        return f"{size / 1024 ** 2:.2f} MB"
    return f"{size / 1024 ** 3:.2f} GB"
