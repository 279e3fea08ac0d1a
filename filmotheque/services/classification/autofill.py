"""
Déduction du titre et de l'année à partir d'un nom de fichier.
"""

import re
from typing import Optional

from filmotheque.utils.helpers import clean_title

_VIDEO_EXTENSION_RE = re.compile(r"\.(mp4|avi|mkv|mov|wmv|flv|webm)$", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_SEPARATORS_RE = re.compile(r"[._-]")
_EMPTY_BRACKETS_RE = re.compile(r"\(\s*\)|\[\s*\]")
_SPACES_RE = re.compile(r"\s+")


def guess_title_and_year(filename: str) -> tuple[str, Optional[int]]:
    """
    Propose un titre et une année pour un nom de fichier.

    "Le.Grand.Bleu.1988.mkv" -> ("Le Grand Bleu", 1988)

    La première occurrence 19xx/20xx devient l'année et est retirée du
    titre. Les séparateurs . _ - deviennent des espaces.
    """
    name = _VIDEO_EXTENSION_RE.sub("", filename)

    year = None
    match = _YEAR_RE.search(name)
    if match:
        year = int(match.group(0))
        name = name[: match.start()] + name[match.end():]

    name = _SEPARATORS_RE.sub(" ", name)
    name = _EMPTY_BRACKETS_RE.sub(" ", name)
    title = _SPACES_RE.sub(" ", name)
    return clean_title(title) or "", year
