"""
Taxonomie des erreurs du domaine Filmotheque.

Toutes les erreurs metier derivent de FilmothequeError. Elles sont regroupees
par composant :
- Scan : ScanIOError (par entree, non fatale)
- Probe : ProbeError et ses sous-classes (UnsupportedFormat, TooShort, ...)
- Miniatures : ThumbnailGenerationFailed (non fatale pour le probe)
- Catalogue : CatalogError (DuplicatePath, StoreIOError, RecordNotFound)
- Streaming : FileMissingOnDisk, MalformedRange, RangeNotSatisfiable
- Affiches : OfflineModeError, PosterDownloadError
- Workflow : WorkflowStateError
"""

from pathlib import Path
from typing import Optional


class FilmothequeError(Exception):
    """Erreur de base de l'application."""


# --- Scan -------------------------------------------------------------------


class ScanIOError(FilmothequeError):
    """
    Erreur d'acces a une entree pendant le parcours d'un repertoire.

    Non fatale : l'entree est ignoree et le parcours continue.

    Attributs :
        path : Chemin de l'entree en echec
        reason : Description de l'erreur systeme
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


# --- Probe ------------------------------------------------------------------


class ProbeError(FilmothequeError):
    """Echec du probe d'un fichier candidat."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(message)


class SourceFileMissing(ProbeError):
    """Le fichier a analyser n'existe pas (ou plus)."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Le fichier {path} n'existe pas")


class UnsupportedFormat(ProbeError):
    """L'extension du fichier ne fait pas partie des formats video supportes."""

    def __init__(self, path: Path) -> None:
        self.extension = path.suffix.lower()
        super().__init__(path, f"Format de fichier non supporte: {self.extension}")


class MetadataUnavailable(ProbeError):
    """L'outil d'inspection n'a pas pu fournir de duree."""

    def __init__(self, path: Path, reason: Optional[str] = None) -> None:
        message = f"Metadonnees indisponibles pour {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(path, message)


class TooShort(ProbeError):
    """
    La duree de la video est inferieure au minimum configure.

    Ce fichier ne doit jamais devenir un candidat du catalogue.
    """

    def __init__(self, path: Path, duration_seconds: float, minimum_seconds: int) -> None:
        self.duration_seconds = duration_seconds
        self.minimum_seconds = minimum_seconds
        super().__init__(
            path, f"Le fichier video est trop court: {duration_seconds:.0f} secondes"
        )


class ThumbnailGenerationFailed(FilmothequeError):
    """La generation de la miniature a echoue (non fatal pour le probe)."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Miniature impossible pour {path}: {reason}")


# --- Catalogue --------------------------------------------------------------


class CatalogError(FilmothequeError):
    """Erreur de base du catalogue."""


class DuplicatePath(CatalogError):
    """Un enregistrement existe deja pour ce chemin."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Fichier deja catalogue: {path}")


class RecordNotFound(CatalogError):
    """Aucun enregistrement ne correspond a cet identifiant."""

    def __init__(self, record_id: int) -> None:
        self.record_id = record_id
        super().__init__(f"Film non trouve: {record_id}")


class StoreIOError(CatalogError):
    """
    Erreur d'entree/sortie du stockage.

    Fatale pour l'operation concernee uniquement.
    """

    def __init__(self, operation: str, cause: Exception) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Erreur de stockage ({operation}): {cause}")


# --- Streaming --------------------------------------------------------------


class FileMissingOnDisk(FilmothequeError):
    """L'enregistrement existe mais le fichier n'est plus sur le disque."""

    def __init__(self, record_id: int, path: str) -> None:
        self.record_id = record_id
        self.path = path
        super().__init__(f"Fichier video introuvable sur le disque: {path}")


class MalformedRange(FilmothequeError):
    """En-tete Range syntaxiquement invalide."""

    def __init__(self, header: str) -> None:
        self.header = header
        super().__init__(f"En-tete Range invalide: {header!r}")


class RangeNotSatisfiable(FilmothequeError):
    """Plage valide mais qui commence apres la fin du fichier."""

    def __init__(self, header: str, file_size: int) -> None:
        self.header = header
        self.file_size = file_size
        super().__init__(f"Plage {header!r} hors du fichier ({file_size} octets)")


# --- Affiches ---------------------------------------------------------------


class OfflineModeError(FilmothequeError):
    """Fonctionnalite reseau demandee alors que le mode hors ligne est actif."""

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"Fonctionnalite '{feature}' desactivee en mode hors ligne")


class PosterDownloadError(FilmothequeError):
    """Echec du transfert d'une affiche distante."""


# --- Workflow ---------------------------------------------------------------


class WorkflowStateError(FilmothequeError):
    """Action de classification interdite dans l'etape courante."""
