"""Entrada de vídeo: validación de archivos y reproducción con OpenCV."""

from .playback import OpenCvVideoPlayer, VideoSource
from .validation import is_video_input, validate_video_input

__all__ = ["OpenCvVideoPlayer", "VideoSource", "is_video_input", "validate_video_input"]
