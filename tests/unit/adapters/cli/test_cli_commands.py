"""
Tests des commandes CLI (typer CliRunner).

Chaque commande construit son propre container : la configuration passe
par les variables d'environnement FILMOTHEQUE_*.
"""

from pathlib import Path
from typing import Iterator

import pytest
from loguru import logger
from sqlmodel import Session
from typer.testing import CliRunner

from filmotheque import main as main_module
from filmotheque.core.entities.media import MediaRecord
from filmotheque.infrastructure.persistence.database import create_db_engine, create_tables
from filmotheque.infrastructure.persistence.repositories import SQLModelMediaRepository

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Environnement isole ; retourne l'URL de la base."""
    database_url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("FILMOTHEQUE_DATABASE_URL", database_url)
    monkeypatch.setenv("FILMOTHEQUE_LOG_FILE", str(tmp_path / "logs" / "cli.log"))
    monkeypatch.setenv("FILMOTHEQUE_THUMBNAILS_DIR", str(tmp_path / "thumbnails"))
    monkeypatch.setenv("FILMOTHEQUE_POSTERS_DIR", str(tmp_path / "posters"))
    main_module.container.config.reset()
    yield database_url
    main_module.container.config.reset()
    logger.remove()


def _seed(database_url: str) -> MediaRecord:
    engine = create_db_engine(database_url)
    create_tables(engine)
    with Session(engine) as session:
        record = SQLModelMediaRepository(session).create(
            MediaRecord(
                path="/videos/Alien.mkv", title="Alien", format="mkv",
                duration_seconds=5400, size_bytes=2048,
            )
        )
    engine.dispose()
    return record


class TestInfoCommands:
    """Tests de version, info et categories."""

    def test_version(self, cli_env: str) -> None:
        result = runner.invoke(main_module.app, ["version"])

        assert result.exit_code == 0
        assert "Filmothèque v0.1.0" in result.output

    def test_info(self, cli_env: str) -> None:
        result = runner.invoke(main_module.app, ["info"])

        assert result.exit_code == 0
        assert cli_env in result.output
        assert "Mode hors ligne : activé" in result.output

    def test_categories(self, cli_env: str) -> None:
        result = runner.invoke(main_module.app, ["categories"])

        assert result.exit_code == 0
        assert "Films" in result.output
        assert "unsorted" in result.output


class TestCatalogCommands:
    """Tests de list, stats et delete."""

    def test_list_empty(self, cli_env: str) -> None:
        result = runner.invoke(main_module.app, ["list"])

        assert result.exit_code == 0
        assert "Catalogue vide" in result.output

    def test_list_records(self, cli_env: str) -> None:
        _seed(cli_env)

        result = runner.invoke(main_module.app, ["list"])

        assert result.exit_code == 0
        assert "Alien" in result.output

    def test_stats(self, cli_env: str) -> None:
        _seed(cli_env)

        result = runner.invoke(main_module.app, ["stats"])

        assert result.exit_code == 0
        assert "Fichiers: 1" in result.output

    def test_delete(self, cli_env: str) -> None:
        record = _seed(cli_env)

        first = runner.invoke(main_module.app, ["delete", str(record.id)])
        second = runner.invoke(main_module.app, ["delete", str(record.id)])

        assert first.exit_code == 0
        assert second.exit_code == 1

    def test_scan_missing_directory(self, cli_env: str, tmp_path: Path) -> None:
        result = runner.invoke(main_module.app, ["scan", str(tmp_path / "absent")])

        assert result.exit_code == 1
        assert "introuvable" in result.output


class TestClassifyCommand:
    """Tests de la commande classify."""

    def test_empty_folder(self, cli_env: str, tmp_path: Path) -> None:
        (tmp_path / "vide").mkdir()

        result = runner.invoke(main_module.app, ["-q", "classify", str(tmp_path / "vide")])

        assert result.exit_code == 0
        assert "Aucun nouveau fichier" in result.output
