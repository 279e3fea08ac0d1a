"""
Adaptateurs de generation de miniatures.

- FFmpegThumbnailer: Capture une image via un sous-processus ffmpeg
"""

from filmotheque.adapters.thumbnails.ffmpeg_thumbnailer import FFmpegThumbnailer

__all__ = ["FFmpegThumbnailer"]
