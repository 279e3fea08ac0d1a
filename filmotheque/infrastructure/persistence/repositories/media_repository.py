"""
Implementation SQLModel du repository du catalogue.

Implemente l'interface IMediaRepository pour la persistance des fichiers
video catalogues dans la base de donnees SQLite via SQLModel.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from filmotheque.core.entities.media import UNSORTED, MediaRecord
from filmotheque.core.errors import DuplicatePath, RecordNotFound, StoreIOError
from filmotheque.core.ports.repositories import IMediaRepository
from filmotheque.core.value_objects import CatalogStats, FormatStats
from filmotheque.infrastructure.persistence.models import MovieModel


class SQLModelMediaRepository(IMediaRepository):
    """
    Repository SQLModel pour le catalogue.

    Implemente IMediaRepository avec conversion bidirectionnelle
    entre l'entite MediaRecord (domaine) et MovieModel (persistance).
    Chaque operation d'ecriture valide sa propre transaction et annule
    en cas d'echec.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: MovieModel) -> MediaRecord:
        """Convertit un modele DB en entite domaine."""
        return MediaRecord(
            id=model.id,
            path=model.path,
            title=model.title,
            format=model.format or "",
            duration_seconds=model.duration or 0,
            size_bytes=model.size_bytes or 0,
            thumbnail_path=model.thumbnail,
            local_poster_path=model.local_poster,
            category=model.category or UNSORTED,
            year=model.year,
            description=model.description,
            last_scan=model.last_scan,
        )

    def _to_model(self, entity: MediaRecord) -> MovieModel:
        """Convertit une entite domaine en modele DB."""
        model = MovieModel(
            title=entity.title,
            path=str(entity.path),
            format=entity.format,
            duration=entity.duration_seconds,
            size_bytes=entity.size_bytes,
            thumbnail=str(entity.thumbnail_path) if entity.thumbnail_path else None,
            local_poster=(
                str(entity.local_poster_path) if entity.local_poster_path else None
            ),
            category=entity.category or UNSORTED,
            year=entity.year,
            description=entity.description,
            last_scan=datetime.now(timezone.utc),
        )
        if entity.id:
            model.id = entity.id
        return model

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        """Annule la transaction et traduit les erreurs SQLAlchemy en StoreIOError."""
        try:
            yield
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error("Erreur de stockage", operation=operation, error=str(e))
            raise StoreIOError(operation, e) from e

    def _get_model(self, record_id: int) -> Optional[MovieModel]:
        return self._session.get(MovieModel, record_id)

    def create(self, record: MediaRecord) -> MediaRecord:
        """Insere un enregistrement, DuplicatePath si le chemin existe deja."""
        path = str(record.path)
        with self._store_errors("create"):
            if self._find_by_path(path) is not None:
                raise DuplicatePath(path)

            model = self._to_model(record)
            self._session.add(model)
            try:
                self._session.commit()
            except IntegrityError as e:
                # Insertion concurrente du meme chemin
                self._session.rollback()
                raise DuplicatePath(path) from e
            self._session.refresh(model)

        logger.debug("Enregistrement cree", record_id=model.id, path=path)
        return self._to_entity(model)

    def update(self, record: MediaRecord) -> MediaRecord:
        """Rafraichit les champs issus du probe et la date de dernier scan."""
        with self._store_errors("update"):
            model = self._get_model(record.id) if record.id else None
            if model is None:
                model = self._find_by_path(str(record.path))
            if model is None:
                raise RecordNotFound(record.id)

            model.title = record.title
            model.format = record.format
            model.duration = record.duration_seconds
            model.size_bytes = record.size_bytes
            model.thumbnail = str(record.thumbnail_path) if record.thumbnail_path else None
            model.last_scan = datetime.now(timezone.utc)
            self._session.add(model)
            self._session.commit()
            self._session.refresh(model)
        return self._to_entity(model)

    def get_by_id(self, record_id: int) -> Optional[MediaRecord]:
        """Recupere un enregistrement par son id."""
        with self._store_errors("get_by_id"):
            model = self._get_model(record_id)
        if model:
            return self._to_entity(model)
        return None

    def _find_by_path(self, path: str) -> Optional[MovieModel]:
        statement = select(MovieModel).where(MovieModel.path == path)
        return self._session.exec(statement).first()

    def get_by_path(self, path: Path | str) -> Optional[MediaRecord]:
        """Recupere un enregistrement par son chemin exact."""
        with self._store_errors("get_by_path"):
            model = self._find_by_path(str(path))
        if model:
            return self._to_entity(model)
        return None

    def list_all(self) -> list[MediaRecord]:
        """Liste tous les enregistrements, tries par titre."""
        statement = select(MovieModel).order_by(MovieModel.title)
        with self._store_errors("list_all"):
            models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def list_by_category(self, category: str) -> list[MediaRecord]:
        """Liste les enregistrements d'une categorie, tries par titre."""
        statement = (
            select(MovieModel)
            .where(MovieModel.category == category)
            .order_by(MovieModel.title)
        )
        with self._store_errors("list_by_category"):
            models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def delete(self, record_id: int) -> bool:
        """Supprime un enregistrement. Retourne False s'il n'existe pas."""
        with self._store_errors("delete"):
            model = self._get_model(record_id)
            if model is None:
                return False
            self._session.delete(model)
            self._session.commit()
        logger.info("Enregistrement supprime", record_id=record_id)
        return True

    def update_local_poster(self, record_id: int, poster_path: Path) -> bool:
        """Met a jour uniquement le chemin de l'affiche locale."""
        with self._store_errors("update_local_poster"):
            model = self._get_model(record_id)
            if model is None:
                return False
            model.local_poster = str(poster_path)
            self._session.add(model)
            self._session.commit()
        return True

    def update_category(self, record_id: int, category: str) -> bool:
        """Met a jour uniquement la categorie."""
        with self._store_errors("update_category"):
            model = self._get_model(record_id)
            if model is None:
                return False
            model.category = category
            self._session.add(model)
            self._session.commit()
        return True

    def get_stats(self) -> CatalogStats:
        """
        Calcule les statistiques agregees par requetes SQL.

        Retourne :
            CatalogStats, a zero si le catalogue est vide
        """
        totals_statement = select(
            func.count(MovieModel.id),
            func.coalesce(func.sum(MovieModel.size_bytes), 0),
            func.coalesce(func.sum(MovieModel.duration), 0),
            func.coalesce(func.avg(MovieModel.size_bytes), 0.0),
            func.coalesce(func.avg(MovieModel.duration), 0.0),
            func.count(MovieModel.thumbnail),
            func.count(func.distinct(MovieModel.format)),
        )
        count_column = func.count(MovieModel.id).label("count")
        formats_statement = (
            select(
                MovieModel.format,
                count_column,
                func.coalesce(func.sum(MovieModel.size_bytes), 0),
            )
            .group_by(MovieModel.format)
            .order_by(count_column.desc(), col(MovieModel.format))
        )

        with self._store_errors("get_stats"):
            totals = self._session.exec(totals_statement).one()
            format_rows = self._session.exec(formats_statement).all()

        (
            total_files,
            total_size,
            total_duration,
            avg_size,
            avg_duration,
            with_thumbnails,
            unique_formats,
        ) = totals

        return CatalogStats(
            total_files=int(total_files),
            total_size=int(total_size),
            total_duration=int(total_duration),
            avg_size=float(avg_size),
            avg_duration=float(avg_duration),
            files_with_thumbnails=int(with_thumbnails),
            unique_formats=int(unique_formats),
            formats=tuple(
                FormatStats(format=fmt, count=int(count), total_size=int(size))
                for fmt, count, size in format_rows
            ),
        )
