"""
Configuration du logging de l'application via loguru.

Deux sorties :
- console : colorée, au niveau configuré, pour suivre un scan ou le serveur
- fichier : JSON sérialisé avec rotation et compression, capture tout dès DEBUG

Les composants loguent via `from loguru import logger` avec des champs
structurés (path=..., record_id=...) qui se retrouvent dans le JSON.
"""

import sys
from pathlib import Path

from loguru import logger

from filmotheque.config import Settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/filmotheque.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure les sorties loguru du processus.

    Args :
        log_level : Niveau minimum pour la console (DEBUG, INFO, WARNING, ERROR)
        log_file : Fichier JSON (le répertoire parent est créé)
        rotation_size : Taille avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs conservés
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",  # rejets de probe et fichiers trop courts en DEBUG
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,  # sûr entre threads (probe mediainfo dans to_thread)
    )

    logger.debug("Logging configuré", log_file=str(log_file), rotation=rotation_size)


def configure_logging_from_settings(settings: Settings) -> None:
    """Configure le logging à partir des paramètres de l'application."""
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )
