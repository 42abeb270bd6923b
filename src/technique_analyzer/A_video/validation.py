"""Validación de la entrada de vídeo antes de cargarla en el analizador."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from technique_analyzer.config.constants import VIDEO_EXTENSIONS
from technique_analyzer.core.errors import InvalidInputError

__all__ = ["is_video_input", "validate_video_input"]


def is_video_input(name: Optional[str], content_type: Optional[str] = None) -> bool:
    """``True`` si el tipo MIME es ``video/*`` o la extensión es de vídeo conocida."""

    if content_type and content_type.strip().lower().startswith("video/"):
        return True
    if not name:
        return False
    return Path(name).suffix.lower() in VIDEO_EXTENSIONS


def validate_video_input(path: str | Path, content_type: Optional[str] = None) -> Path:
    """Comprueba que ``path`` exista y sea un vídeo; devuelve la ruta normalizada."""

    candidate = Path(path).expanduser()
    if not is_video_input(candidate.name, content_type):
        raise InvalidInputError()
    # Confirmamos la existencia del archivo antes de intentar abrirlo.
    if not candidate.is_file():
        raise InvalidInputError(f"Video path does not exist: {candidate}")
    return candidate
