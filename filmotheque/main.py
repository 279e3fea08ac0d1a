"""
Point d'entrée CLI de Filmothèque.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from .adapters.cli.commands import (
    categories,
    classify,
    delete,
    list_movies,
    scan,
    stats,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging
from .web.deps import read_app_version

app = typer.Typer(
    name="filmotheque",
    help="Catalogue de vidéos locales avec streaming HTTP",
)
container = Container()

# Etat global pour les options de verbosite
state = {"verbose": 0, "quiet": False}

# Niveaux console selon -v / -vv
_VERBOSE_LEVELS = {0: None, 1: "INFO", 2: "DEBUG"}


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """Filmothèque - Catalogue de vidéos personnelles."""
    if quiet:
        state["quiet"] = True
    else:
        state["verbose"] = verbose

    settings = get_config()
    if state["quiet"]:
        level = "ERROR"
    else:
        level = _VERBOSE_LEVELS.get(min(verbose, 2)) or settings.log_level
    configure_logging(
        log_level=level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )


app.command()(scan)
# "list" masquerait le builtin, la fonction s'appelle list_movies
app.command(name="list")(list_movies)
app.command()(stats)
app.command()(delete)
app.command()(categories)
app.command()(classify)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration Filmothèque")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Durée minimale : {config.min_duration_minutes} min")
    typer.echo(f"Formats : {', '.join(config.supported_formats)}")
    typer.echo(f"Miniatures : {config.thumbnails_dir} ({config.thumbnail_size})")
    typer.echo(f"Affiches : {config.posters_dir}")
    typer.echo(f"Workers de scan : {config.scan_workers}")
    typer.echo(f"Mode hors ligne : {'activé' if config.offline_mode else 'désactivé'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Filmothèque v{read_app_version()}")


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance le serveur web Filmothèque (API JSON et streaming)."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("filmotheque.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    logger.debug("Démarrage de Filmothèque", version=read_app_version())
    app()


if __name__ == "__main__":
    main()
