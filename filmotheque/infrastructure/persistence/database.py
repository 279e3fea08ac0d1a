"""
Configuration de la base de donnees SQLite pour Filmotheque.

Ce module fournit :
- Creation de l'engine SQLite a partir de l'URL configuree
- Session factory avec context manager
- Fonction d'initialisation des tables et migrations additives

L'engine n'est plus un global du module : il est cree par le conteneur
a partir de Settings.database_url (FILMOTHEQUE_DATABASE_URL).
"""

from collections.abc import Generator
from pathlib import Path

from loguru import logger
from sqlalchemy import Engine, text
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Colonnes ajoutees apres la premiere version du schema "movies"
_MOVIES_MIGRATIONS: tuple[tuple[str, str], ...] = (
    ("local_poster", "VARCHAR"),
    ("category", "VARCHAR DEFAULT 'unsorted'"),
    ("year", "INTEGER"),
    ("description", "VARCHAR"),
)


def create_db_engine(database_url: str) -> Engine:
    """
    Cree l'engine SQLAlchemy pour l'URL donnee.

    Cree le repertoire parent si l'URL designe un fichier SQLite. Une base
    en memoire partage une connexion unique (StaticPool), sinon chaque
    session verrait une base vide.
    """
    if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
        db_path = Path(database_url.replace("sqlite:///", "", 1))
        db_path.parent.mkdir(exist_ok=True, parents=True)

    if ":memory:" in database_url or database_url == "sqlite://":
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def get_session(engine: Engine) -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Utilisation avec context manager :
        with Session(engine) as session:
            # operations

    Yields:
        Session SQLModel connectee a l'engine
    """
    with Session(engine) as session:
        yield session


def init_db(engine: Engine) -> Generator[Engine, None, None]:
    """
    Initialise la base de donnees en creant toutes les tables.

    Importe les modeles pour enregistrer leurs metadonnees dans
    SQLModel.metadata, cree les tables absentes puis applique les migrations.
    Sert de ressource au conteneur : l'engine est libere a la fermeture.
    """
    create_tables(engine)
    yield engine
    engine.dispose()


def create_tables(engine: Engine) -> None:
    """Cree les tables manquantes puis applique les migrations additives."""
    # Import des modeles pour enregistrer leurs metadonnees
    from filmotheque.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    _run_migrations(engine)


def _run_migrations(engine: Engine) -> None:
    """
    Execute les migrations de schema necessaires.

    SQLModel.metadata.create_all() ne modifie pas les tables existantes :
    chaque colonne ajoutee depuis la premiere version est verifiee via
    PRAGMA table_info et ajoutee si absente. Relancer est sans effet.
    """
    with engine.connect() as conn:
        result = conn.execute(text("PRAGMA table_info(movies)"))
        columns = {row[1] for row in result.fetchall()}

        for column, ddl in _MOVIES_MIGRATIONS:
            if column in columns:
                continue
            conn.execute(text(f"ALTER TABLE movies ADD COLUMN {column} {ddl}"))
            logger.info("Migration appliquee", table="movies", column=column)
        conn.commit()
