"""
Service de streaming des fichiers catalogues avec support des requetes Range.

Le service resout l'enregistrement, verifie la presence du fichier sur le
disque, interprete l'en-tete Range et prepare le corps de reponse. La couche
HTTP n'a plus qu'a construire la StreamingResponse.

Regles :
- pas d'en-tete Range : 200, fichier complet
- bytes=debut-fin (fin optionnelle, bornee a la taille) ou bytes=-n : 206
- en-tete syntaxiquement invalide : ignore, 200 fichier complet
- debut au-dela de la fin du fichier : 416 avec Content-Range: bytes */taille
"""

import asyncio
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, AsyncIterator, Optional

from loguru import logger

from filmotheque.config import Settings
from filmotheque.core.entities.media import MediaRecord
from filmotheque.core.errors import (
    FileMissingOnDisk,
    MalformedRange,
    RangeNotSatisfiable,
    RecordNotFound,
)
from filmotheque.core.ports.repositories import IMediaRepository
from filmotheque.core.value_objects import ByteRange

_RANGE_RE = re.compile(r"^bytes=(\d*)-(\d*)$")


def parse_range(header: str, file_size: int) -> ByteRange:
    """
    Interprete un en-tete Range pour un fichier de taille file_size.

    Une seule plage est acceptee. La fin est bornee a file_size - 1.

    Raises:
        MalformedRange: unite inconnue, plages multiples, valeurs non
            numeriques, ou debut > fin
        RangeNotSatisfiable: debut >= taille du fichier, ou suffixe nul
    """
    match = _RANGE_RE.match(header.strip())
    if match is None:
        raise MalformedRange(header)

    start_s, end_s = match.groups()
    if not start_s and not end_s:
        raise MalformedRange(header)

    if not start_s:
        # Forme suffixe : les n derniers octets
        suffix = int(end_s)
        if suffix == 0 or file_size == 0:
            raise RangeNotSatisfiable(header, file_size)
        start = max(0, file_size - suffix)
        return ByteRange(start=start, end=file_size - 1, file_size=file_size)

    start = int(start_s)
    end = int(end_s) if end_s else file_size - 1
    if end_s and start > end:
        raise MalformedRange(header)
    if start >= file_size:
        raise RangeNotSatisfiable(header, file_size)
    return ByteRange(start=start, end=min(end, file_size - 1), file_size=file_size)


class FileRangeStream:
    """
    Corps de reponse lisant une portion de fichier par blocs.

    Le fichier est ouvert a la premiere lecture et referme a la fin de
    l'iteration, a la deconnexion du client ou par aclose(). Une instance
    par requete : le descripteur n'est jamais partage.
    """

    def __init__(self, path: Path, start: int, length: int, chunk_size: int) -> None:
        self.path = path
        self.start = start
        self.length = length
        self.chunk_size = chunk_size
        self.closed = False
        self._handle: Optional[IO[bytes]] = None

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[bytes]:
        try:
            self._handle = await asyncio.to_thread(open, self.path, "rb")
            await asyncio.to_thread(self._handle.seek, self.start)
            remaining = self.length
            while remaining > 0:
                data = await asyncio.to_thread(
                    self._handle.read, min(self.chunk_size, remaining)
                )
                if not data:
                    break
                remaining -= len(data)
                yield data
        finally:
            self._close()

    def _close(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()
        self.closed = True

    async def aclose(self) -> None:
        """Libere le descripteur (tache de fond de la reponse)."""
        self._close()


@dataclass
class StreamPlan:
    """Reponse preparee : statut, en-tetes et corps."""

    status_code: int
    media_type: str
    body: FileRangeStream
    headers: dict[str, str] = field(default_factory=dict)


class StreamingService:
    """
    Prepare la diffusion d'un enregistrement du catalogue.
    """

    def __init__(self, repository: IMediaRepository, settings: Settings) -> None:
        self._repository = repository
        self._chunk_size = settings.stream_chunk_size

    def resolve(self, record_id: int) -> tuple[MediaRecord, int]:
        """
        Retourne l'enregistrement et la taille actuelle du fichier.

        Raises:
            RecordNotFound: id inconnu
            FileMissingOnDisk: le fichier n'est plus sur le disque
        """
        record = self._repository.get_by_id(record_id)
        if record is None:
            raise RecordNotFound(record_id)
        try:
            size = record.file_path.stat().st_size
        except OSError as e:
            raise FileMissingOnDisk(record_id, record.path) from e
        if not record.file_path.is_file():
            raise FileMissingOnDisk(record_id, record.path)
        return record, size

    def open_stream(self, record_id: int, range_header: Optional[str] = None) -> StreamPlan:
        """
        Prepare la reponse pour un enregistrement.

        Raises:
            RecordNotFound, FileMissingOnDisk: 404
            RangeNotSatisfiable: 416
        """
        record, file_size = self.resolve(record_id)
        media_type = record.content_type

        byte_range = None
        if range_header:
            try:
                byte_range = parse_range(range_header, file_size)
            except MalformedRange:
                logger.debug("En-tete Range ignore", record_id=record_id, header=range_header)

        if byte_range is None:
            return StreamPlan(
                status_code=200,
                media_type=media_type,
                body=FileRangeStream(record.file_path, 0, file_size, self._chunk_size),
                headers={
                    "Accept-Ranges": "bytes",
                    "Content-Length": str(file_size),
                },
            )

        return StreamPlan(
            status_code=206,
            media_type=media_type,
            body=FileRangeStream(
                record.file_path, byte_range.start, byte_range.length, self._chunk_size
            ),
            headers={
                "Content-Range": byte_range.content_range,
                "Accept-Ranges": "bytes",
                "Content-Length": str(byte_range.length),
            },
        )
