"""
Utilitaires partages pour les commandes CLI de Filmotheque.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container initialise
- render_records_table : tableau Rich des enregistrements du catalogue
"""

from contextlib import contextmanager
from functools import wraps

from loguru import logger as loguru_logger
from rich.console import Console
from rich.table import Table

from filmotheque.container import Container
from filmotheque.core.entities.media import MediaRecord, display_category
from filmotheque.utils.helpers import format_duration, format_file_size

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant les saisies Rich.

    Usage:
        with suppress_loguru():
            choice = Prompt.ask(...)
    """
    loguru_logger.disable("filmotheque")
    try:
        yield
    finally:
        loguru_logger.enable("filmotheque")


def with_container(requires_db: bool = True):
    """
    Decorateur qui injecte un container initialise en premier argument.

    Args:
        requires_db: Si True (defaut), initialise la base de donnees.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            if requires_db:
                container.database.init()
            try:
                return await func(container, *args, **kwargs)
            finally:
                await container.poster_client().close()
                if requires_db:
                    container.database.shutdown()
        return wrapper
    return decorator


def render_records_table(records: list[MediaRecord], title: str = "Catalogue") -> Table:
    """Construit le tableau Rich d'une liste d'enregistrements."""
    table = Table(title=title)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Titre", style="bold")
    table.add_column("Format")
    table.add_column("Durée", justify="right")
    table.add_column("Taille", justify="right")
    table.add_column("Catégorie")

    for record in records:
        table.add_row(
            str(record.id),
            record.title,
            record.format,
            format_duration(record.duration_seconds),
            format_file_size(record.size_bytes),
            display_category(record.category),
        )
    return table
