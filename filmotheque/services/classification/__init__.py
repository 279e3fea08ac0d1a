"""
Package du workflow de classification des fichiers scannés.

Reexporte les symboles principaux (from filmotheque.services.classification import ...).
"""

from .autofill import guess_title_and_year
from .controller import ClassificationController
from .dataclasses import (
    ClassificationSession,
    ClassificationStage,
    CommitReport,
    EventKind,
    ScanMode,
    WorkflowEvent,
)

__all__ = [
    "ClassificationController",
    "ClassificationSession",
    "ClassificationStage",
    "CommitReport",
    "EventKind",
    "ScanMode",
    "WorkflowEvent",
    "guess_title_and_year",
]
