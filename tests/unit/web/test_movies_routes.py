"""
Tests des routes JSON /movies (TestClient FastAPI).
"""

from pathlib import Path
from typing import Callable, Iterator

import httpx
import pytest
import respx
from dependency_injector import providers
from fastapi.testclient import TestClient

from filmotheque.config import Settings
from filmotheque.container import Container
from filmotheque.core.entities.media import MediaRecord
from filmotheque.infrastructure.persistence.repositories import SQLModelMediaRepository
from filmotheque.web.app import create_app

POSTER_URL = "https://images.example.org/p/alien.jpg"


@pytest.fixture
def video_record(
    catalog_repository: SQLModelMediaRepository, make_video: Callable[..., Path]
) -> MediaRecord:
    """Film de 1000 octets present sur le disque et au catalogue."""
    path = make_video("Alien.mp4", size=1000)
    return catalog_repository.create(
        MediaRecord(
            path=str(path), title="Alien", format="mp4",
            duration_seconds=5400, size_bytes=1000,
        )
    )


class TestListMovies:
    """Tests de GET /movies."""

    def test_empty_catalog(self, client: TestClient) -> None:
        response = client.get("/movies")

        assert response.status_code == 200
        assert response.json() == {"success": True, "count": 0, "movies": []}

    def test_serialized_fields(self, client: TestClient, video_record: MediaRecord) -> None:
        response = client.get("/movies")

        [movie] = response.json()["movies"]
        assert movie["id"] == video_record.id
        assert movie["title"] == "Alien"
        assert movie["duration"] == 5400
        assert movie["formattedDuration"] == "01:30:00"
        assert movie["formattedSize"] == "1000 B"
        assert movie["category"] == "unsorted"
        assert movie["categoryLabel"] == "Non trié"


class TestStats:
    """Tests de GET /movies/stats."""

    def test_stats(self, client: TestClient, video_record: MediaRecord) -> None:
        response = client.get("/movies/stats")

        stats = response.json()["stats"]
        assert stats["totalFiles"] == 1
        assert stats["totalSize"] == 1000
        assert stats["formats"] == [{"format": "mp4", "count": 1, "totalSize": 1000}]


class TestStream:
    """Tests de GET /movies/stream/{id}."""

    def test_full_file(self, client: TestClient, video_record: MediaRecord) -> None:
        response = client.get(f"/movies/stream/{video_record.id}")

        assert response.status_code == 200
        assert response.headers["content-type"] == "video/mp4"
        assert response.headers["accept-ranges"] == "bytes"
        assert response.headers["content-length"] == "1000"
        assert response.content == Path(video_record.path).read_bytes()

    def test_partial_content(self, client: TestClient, video_record: MediaRecord) -> None:
        response = client.get(
            f"/movies/stream/{video_record.id}", headers={"Range": "bytes=100-199"}
        )

        assert response.status_code == 206
        assert response.headers["content-range"] == "bytes 100-199/1000"
        assert response.headers["content-length"] == "100"
        assert response.content == Path(video_record.path).read_bytes()[100:200]

    def test_open_ended_range(self, client: TestClient, video_record: MediaRecord) -> None:
        response = client.get(
            f"/movies/stream/{video_record.id}", headers={"Range": "bytes=900-"}
        )

        assert response.status_code == 206
        assert response.headers["content-range"] == "bytes 900-999/1000"
        assert len(response.content) == 100

    def test_malformed_range_returns_full_file(
        self, client: TestClient, video_record: MediaRecord
    ) -> None:
        response = client.get(
            f"/movies/stream/{video_record.id}", headers={"Range": "octets=0-10"}
        )

        assert response.status_code == 200
        assert len(response.content) == 1000

    def test_range_not_satisfiable(self, client: TestClient, video_record: MediaRecord) -> None:
        response = client.get(
            f"/movies/stream/{video_record.id}", headers={"Range": "bytes=5000-"}
        )

        assert response.status_code == 416
        assert response.headers["content-range"] == "bytes */1000"

    def test_unknown_movie(self, client: TestClient) -> None:
        response = client.get("/movies/stream/999")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Film non trouvé"}

    def test_file_removed_from_disk(self, client: TestClient, video_record: MediaRecord) -> None:
        Path(video_record.path).unlink()

        response = client.get(f"/movies/stream/{video_record.id}")

        assert response.status_code == 404
        assert response.json()["message"] == "Fichier vidéo introuvable sur le disque"


class TestDelete:
    """Tests de DELETE /movies/{id}."""

    def test_delete_twice(self, client: TestClient, video_record: MediaRecord) -> None:
        first = client.delete(f"/movies/{video_record.id}")
        second = client.delete(f"/movies/{video_record.id}")

        assert first.status_code == 200
        assert first.json()["message"] == "Film supprimé avec succès"
        assert second.status_code == 404
        # Le fichier reste sur le disque
        assert Path(video_record.path).exists()


class TestScan:
    """Tests de POST /movies/scan."""

    def test_invalid_path(self, client: TestClient, tmp_path: Path) -> None:
        response = client.post("/movies/scan", json={"drivePath": str(tmp_path / "absent")})

        assert response.status_code == 400
        assert response.json()["message"] == "Chemin de lecteur invalide ou inaccessible"

    def test_missing_body(self, client: TestClient) -> None:
        assert client.post("/movies/scan").status_code == 400

    def test_directory_checked_through_file_system(
        self, client: TestClient, container: Container, mock_file_system, tmp_path: Path
    ) -> None:
        """Un repertoire refuse par l'adaptateur (illisible) donne 400."""
        mock_file_system.is_dir.return_value = False
        container.file_system.override(providers.Object(mock_file_system))

        response = client.post("/movies/scan", json={"drivePath": str(tmp_path)})

        assert response.status_code == 400
        mock_file_system.is_dir.assert_called_once_with(tmp_path)

    def test_import_runs_in_background(
        self, client: TestClient, make_video: Callable[..., Path], tmp_path: Path
    ) -> None:
        make_video("Alien.mkv")
        make_video("Films/Marnie.avi")

        response = client.post("/movies/scan", json={"drivePath": str(tmp_path / "videos")})

        assert response.status_code == 200
        assert response.json()["success"] is True
        # Les taches de fond sont terminees quand TestClient rend la main
        assert client.get("/movies").json()["count"] == 2


class TestDownloadPoster:
    """Tests de POST /movies/download-poster."""

    def test_missing_fields(self, client: TestClient) -> None:
        response = client.post("/movies/download-poster", json={"movieId": 1})

        assert response.status_code == 400

    def test_offline_mode(self, client: TestClient, video_record: MediaRecord) -> None:
        response = client.post(
            "/movies/download-poster",
            json={"movieId": video_record.id, "posterUrl": POSTER_URL},
        )

        assert response.status_code == 503
        assert response.json()["offline"] is True


@pytest.fixture
def online_client(container: Container, test_settings: Settings) -> Iterator[TestClient]:
    container.config.override(
        providers.Object(test_settings.model_copy(update={"offline_mode": False}))
    )
    with TestClient(create_app(container)) as test_client:
        yield test_client


class TestDownloadPosterOnline:
    """Tests du telechargement avec le mode en ligne."""

    @respx.mock
    def test_downloads(
        self,
        online_client: TestClient,
        container: Container,
        make_video: Callable[..., Path],
        test_settings: Settings,
    ) -> None:
        respx.get(POSTER_URL).mock(return_value=httpx.Response(200, content=b"jpeg"))
        with container.session() as session:
            record = container.media_repository(session=session).create(
                MediaRecord(
                    path=str(make_video("Alien.mkv")), title="Alien", format="mkv",
                    duration_seconds=5400, size_bytes=1000,
                )
            )

        response = online_client.post(
            "/movies/download-poster",
            json={"movieId": record.id, "posterUrl": POSTER_URL},
        )

        assert response.status_code == 200
        local_path = Path(response.json()["localPath"])
        assert local_path.parent == test_settings.posters_dir
        assert local_path.read_bytes() == b"jpeg"

    def test_unknown_movie(self, online_client: TestClient) -> None:
        response = online_client.post(
            "/movies/download-poster", json={"movieId": 999, "posterUrl": POSTER_URL}
        )

        assert response.status_code == 404
