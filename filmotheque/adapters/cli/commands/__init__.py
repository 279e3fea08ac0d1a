"""Sous-package CLI commands - re-exporte les commandes publiques."""

from filmotheque.adapters.cli.commands.catalog_commands import (
    categories,
    delete,
    list_movies,
    scan,
    stats,
)
from filmotheque.adapters.cli.commands.classify_command import classify

__all__ = [
    "categories",
    "classify",
    "delete",
    "list_movies",
    "scan",
    "stats",
]
