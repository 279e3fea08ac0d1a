"""
Commandes CLI du catalogue (scan, list, stats, delete).
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from filmotheque.adapters.cli.helpers import console, render_records_table, with_container
from filmotheque.core.entities.media import DEFAULT_CATEGORIES, UNSORTED
from filmotheque.core.errors import StoreIOError
from filmotheque.utils.helpers import format_duration, format_file_size


def scan(
    directory: Annotated[
        Path,
        typer.Argument(help="Repertoire a scanner et importer"),
    ],
) -> None:
    """Scanne un repertoire et importe les videos trouvees comme non triees."""
    asyncio.run(_scan_async(directory))


@with_container()
async def _scan_async(container, directory: Path) -> None:
    """Implementation async de la commande scan."""
    directory = directory.expanduser()
    if not container.file_system().is_dir(directory):
        console.print(f"[red]Erreur:[/red] Repertoire introuvable: {directory}")
        raise typer.Exit(code=1)

    importer = container.catalog_importer()
    console.print(f"[bold cyan]Scan du repertoire[/bold cyan]: {directory}\n")
    with console.status("[cyan]Scan en cours..."):
        report = await importer.import_directory(directory)

    scan_report = report.scan
    console.print(f"[green]Importes:[/green] {report.created}")
    console.print(f"[dim]Deja catalogues:[/dim] {scan_report.already_cataloged + report.duplicates}")
    console.print(f"[dim]Trop courts:[/dim] {scan_report.too_short}")
    if scan_report.probe_failures or report.failures:
        console.print(
            f"[yellow]Echecs:[/yellow] {scan_report.probe_failures + report.failures}"
        )
    for error in scan_report.errors:
        console.print(f"[yellow]Illisible:[/yellow] {error.path} ({error.reason})")


def list_movies(
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Filtrer par categorie (ex: films, unsorted)"),
    ] = None,
) -> None:
    """Liste les videos du catalogue, triees par titre."""
    asyncio.run(_list_async(category))


@with_container()
async def _list_async(container, category: Optional[str]) -> None:
    repository = container.media_repository()
    if category:
        records = repository.list_by_category(category)
    else:
        records = repository.list_all()

    if not records:
        console.print("[yellow]Catalogue vide.[/yellow]")
        return
    console.print(render_records_table(records, title=f"Catalogue ({len(records)})"))


def stats() -> None:
    """Affiche les statistiques du catalogue."""
    asyncio.run(_stats_async())


@with_container()
async def _stats_async(container) -> None:
    try:
        catalog_stats = container.media_repository().get_stats()
    except StoreIOError as e:
        console.print(f"[red]Erreur:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[bold]Fichiers:[/bold] {catalog_stats.total_files}")
    console.print(f"[bold]Taille totale:[/bold] {format_file_size(catalog_stats.total_size)}")
    console.print(f"[bold]Duree totale:[/bold] {format_duration(catalog_stats.total_duration)}")
    console.print(f"[bold]Avec miniature:[/bold] {catalog_stats.files_with_thumbnails}")

    if catalog_stats.formats:
        table = Table(title="Formats")
        table.add_column("Format")
        table.add_column("Fichiers", justify="right")
        table.add_column("Taille", justify="right")
        for fmt in catalog_stats.formats:
            table.add_row(fmt.format or "?", str(fmt.count), format_file_size(fmt.total_size))
        console.print(table)


def delete(
    record_id: Annotated[int, typer.Argument(help="ID de la video a retirer du catalogue")],
) -> None:
    """Retire une video du catalogue (le fichier reste sur le disque)."""
    asyncio.run(_delete_async(record_id))


@with_container()
async def _delete_async(container, record_id: int) -> None:
    if container.media_repository().delete(record_id):
        console.print(f"[green]Video {record_id} supprimee du catalogue.[/green]")
    else:
        console.print(f"[yellow]Aucune video avec l'ID {record_id}.[/yellow]")
        raise typer.Exit(code=1)


def categories() -> None:
    """Liste les categories de classement."""
    for category in DEFAULT_CATEGORIES:
        console.print(f"{category.label} [dim]({category.id})[/dim]")
    console.print(f"[dim]{UNSORTED}[/dim]")
