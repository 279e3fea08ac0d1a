"""
Generation de miniatures avec l'executable ffmpeg.

ffmpeg est lance comme sous-processus asyncio : la boucle d'evenements
reste libre pendant la capture, et un delai maximum protege des fichiers
qui font bloquer le decodeur.
"""

import asyncio
import time
from pathlib import Path

from loguru import logger

from filmotheque.core.errors import ThumbnailGenerationFailed
from filmotheque.core.ports.parser import IThumbnailer


class FFmpegThumbnailer(IThumbnailer):
    """
    Capture une image d'un fichier video avec ffmpeg.

    La miniature est ecrite dans output_dir sous le nom
    <horodatage_ms>_<nom_du_fichier>.jpg, a position x duree secondes.
    """

    def __init__(
        self,
        output_dir: Path,
        size: tuple[int, int] = (320, 240),
        position: float = 0.5,
        ffmpeg_binary: str = "ffmpeg",
        timeout_seconds: float = 60,
    ) -> None:
        self._output_dir = output_dir
        self._width, self._height = size
        self._position = position
        self._ffmpeg = ffmpeg_binary
        self._timeout = timeout_seconds

    def thumbnail_name(self, file_path: Path) -> str:
        """Nom de la miniature pour un fichier video."""
        return f"{int(time.time() * 1000)}_{file_path.name}.jpg"

    def build_command(self, file_path: Path, output: Path, duration_seconds: float) -> list[str]:
        """Construit la ligne de commande ffmpeg."""
        seek = max(0.0, duration_seconds * self._position)
        return [
            self._ffmpeg,
            "-hide_banner",
            "-loglevel", "error",
            "-ss", f"{seek:.3f}",
            "-i", str(file_path),
            "-frames:v", "1",
            "-vf", f"scale={self._width}:{self._height}",
            "-y",
            str(output),
        ]

    async def generate(self, file_path: Path, duration_seconds: float) -> Path:
        """
        Capture une image et retourne le chemin de la miniature.

        Leve :
            ThumbnailGenerationFailed si ffmpeg est absent, echoue,
            depasse le delai ou ne produit pas de fichier
        """
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ThumbnailGenerationFailed(file_path, str(e)) from e

        output = self._output_dir / self.thumbnail_name(file_path)
        command = self.build_command(file_path, output, duration_seconds)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ThumbnailGenerationFailed(file_path, f"ffmpeg introuvable: {e}") from e

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            output.unlink(missing_ok=True)
            raise ThumbnailGenerationFailed(
                file_path, f"delai depasse ({self._timeout}s)"
            ) from e

        if process.returncode != 0:
            output.unlink(missing_ok=True)
            message = stderr.decode(errors="replace").strip() if stderr else ""
            raise ThumbnailGenerationFailed(
                file_path, message or f"code de sortie {process.returncode}"
            )

        if not output.exists():
            raise ThumbnailGenerationFailed(file_path, "aucune image produite")

        logger.debug("Miniature generee", path=str(file_path), thumbnail=str(output))
        return output
