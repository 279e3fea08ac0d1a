"""
Module de persistance SQLite pour Filmotheque.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Creation de l'engine SQLite, session factory, initialisation
- models.py : Modeles SQLModel representant les tables de la base de donnees

Les modeles ici sont des adapters de persistance, distincts des entites de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.

Usage:
    from filmotheque.infrastructure.persistence import create_db_engine, create_tables

    engine = create_db_engine("sqlite:///filmotheque.db")
    create_tables(engine)
    with Session(engine) as session:
        repo = SQLModelMediaRepository(session)
"""

from filmotheque.infrastructure.persistence.database import (
    create_db_engine,
    create_tables,
    get_session,
    init_db,
)
from filmotheque.infrastructure.persistence.models import MovieModel

__all__ = [
    "create_db_engine",
    "create_tables",
    "get_session",
    "init_db",
    "MovieModel",
]
