"""
Entites metier du catalogue.

Exports :
- MediaRecord : Fichier video catalogue (persiste)
- Category : Categorie de classement (reference immuable)
- CandidateFile : Fichier decouvert par le scan, pas encore catalogue
- CandidateDetails : Surcharges saisies pendant la classification
"""

from filmotheque.core.entities.candidate import CandidateDetails, CandidateFile
from filmotheque.core.entities.media import (
    DEFAULT_CATEGORIES,
    UNSORTED,
    UNSORTED_LABEL,
    Category,
    MediaRecord,
    display_category,
    find_category,
)

__all__ = [
    "CandidateDetails",
    "CandidateFile",
    "Category",
    "DEFAULT_CATEGORIES",
    "MediaRecord",
    "UNSORTED",
    "UNSORTED_LABEL",
    "display_category",
    "find_category",
]
