"""
Commande CLI de classification interactive (classify).

Presentation en console du ClassificationController : le scan ouvre une
session, chaque fichier recoit une categorie, puis les details sont saisis
ou laisses par defaut avant l'enregistrement.
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt

from filmotheque.adapters.cli.helpers import console, suppress_loguru, with_container
from filmotheque.core.entities.media import DEFAULT_CATEGORIES
from filmotheque.services.classification import (
    ClassificationController,
    CommitReport,
    EventKind,
    ScanMode,
    WorkflowEvent,
)
from filmotheque.utils.helpers import format_duration, format_file_size

# Saisies speciales au choix de categorie
SKIP_CHOICE = "0"
SKIP_ALL_CHOICE = "a"


def classify(
    target: Annotated[Path, typer.Argument(help="Dossier (ou fichier avec --file) a scanner")],
    single_file: Annotated[
        bool,
        typer.Option("--file", "-f", help="Scanner un fichier unique"),
    ] = False,
) -> None:
    """Scanne puis classe interactivement les nouvelles videos."""
    asyncio.run(_classify_async(target, single_file))


def _print_event(event: WorkflowEvent) -> None:
    if event.kind in (EventKind.SCAN_EMPTY, EventKind.SCAN_FAILED):
        console.print(f"[yellow]{event.message}[/yellow]")
    elif event.kind == EventKind.STAGE_CHANGED and event.stage is not None:
        console.print(f"[dim]Etape: {event.stage.value}[/dim]")
    elif event.kind == EventKind.CANCELLED:
        console.print("[yellow]Classification annulee.[/yellow]")


@with_container()
async def _classify_async(container, target: Path, single_file: bool) -> None:
    """Implementation async de la commande classify."""
    controller: ClassificationController = container.classification_controller()
    unsubscribe = controller.subscribe(_print_event)
    mode = ScanMode.FILE if single_file else ScanMode.FOLDER

    try:
        with console.status("[cyan]Scan en cours..."):
            started = await controller.start_scan(target.expanduser(), mode)
        if not started:
            raise typer.Exit(code=0)

        with suppress_loguru():
            _classify_candidates(controller)
            report = await controller.proceed()
            if report is None:
                report = await _detail_candidates(controller)
    except (KeyboardInterrupt, typer.Abort):
        controller.cancel()
        raise typer.Exit(code=1)
    finally:
        unsubscribe()

    _print_report(report)


def _category_menu() -> str:
    lines = [f"[cyan]{i}[/cyan] {c.label}" for i, c in enumerate(DEFAULT_CATEGORIES, start=1)]
    lines.append(f"[cyan]{SKIP_CHOICE}[/cyan] Non trié")
    lines.append(f"[cyan]{SKIP_ALL_CHOICE}[/cyan] Tout le reste en non trié")
    return "\n".join(lines)


def _classify_candidates(controller: ClassificationController) -> None:
    session = controller.session
    console.print(Panel(_category_menu(), title="Categories"))
    choices = [str(i) for i in range(len(DEFAULT_CATEGORIES) + 1)] + [SKIP_ALL_CHOICE]

    for index, candidate in enumerate(session.candidates):
        console.print(
            f"\n[bold]{index + 1}/{session.total}[/bold] {candidate.path.name} "
            f"[dim]({format_duration(candidate.duration_seconds)}, "
            f"{format_file_size(candidate.size_bytes)})[/dim]"
        )
        choice = Prompt.ask("Categorie", choices=choices, default=SKIP_CHOICE)
        if choice == SKIP_ALL_CHOICE:
            for remaining in range(index, session.total):
                controller.skip(remaining)
            return
        if choice == SKIP_CHOICE:
            controller.skip(index)
        else:
            controller.classify(index, DEFAULT_CATEGORIES[int(choice) - 1].id)


async def _detail_candidates(controller: ClassificationController) -> CommitReport:
    session = controller.session
    if not Confirm.ask("Saisir titre, annee et description ?", default=False):
        return await controller.keep_defaults()

    for index, candidate in enumerate(session.candidates):
        if candidate.is_unsorted:
            continue
        controller.auto_fill(index)
        console.print(f"\n[bold]{candidate.path.name}[/bold]")
        title = Prompt.ask("Titre", default=candidate.final_title)
        year = IntPrompt.ask("Annee (0 = aucune)", default=candidate.details.year or 0)
        description = Prompt.ask("Description", default="")
        controller.set_details(
            index,
            title=title,
            year=year or None,
            description=description,
        )
    return await controller.save_details()


def _print_report(report: CommitReport) -> None:
    color = "green" if report.failed == 0 else "yellow"
    console.print(f"\n[{color}]{report.summary()}[/{color}]")
