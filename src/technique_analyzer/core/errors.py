"""Excepciones específicas del dominio utilizadas por el analizador de técnica.

El orquestador nunca deja escapar estas excepciones hacia la interfaz: las
captura, guarda la instancia en ``error`` y deja la máquina de estados en un
estado bien definido. Cada clase expone ``user_message`` para mostrarla tal
cual al usuario.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class AnalysisError(Exception):
    """Excepción base para fallos que se comunican a la interfaz."""

    default_message = "The technique analyzer hit an unexpected error."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def user_message(self) -> str:
        return str(self)


class AssetErrorKind(str, Enum):
    """Categorías de fallo al cargar los recursos del detector de pose."""

    OFFLINE = "offline"
    NOT_FOUND = "not_found"
    GENERIC = "generic"


ASSET_ERROR_MESSAGES = {
    AssetErrorKind.OFFLINE: (
        "You're offline. Reconnect to the internet and try loading the pose model again."
    ),
    AssetErrorKind.NOT_FOUND: (
        "We couldn't download the MediaPipe pose files. Confirm the assets are available "
        "(local models directory or remote URL) and try again."
    ),
    AssetErrorKind.GENERIC: (
        "Unable to load the MediaPipe pose model. Check your connection and try again."
    ),
}


class AssetLoadError(AnalysisError):
    """Todas las fuentes candidatas de un recurso obligatorio fallaron.

    Se recupera con un reintento explícito que vuelve a recorrer la lista
    completa de candidatos.
    """

    def __init__(
        self,
        asset: str,
        kind: AssetErrorKind = AssetErrorKind.GENERIC,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.asset = asset
        self.kind = AssetErrorKind(kind)
        self.cause = cause
        super().__init__(ASSET_ERROR_MESSAGES[self.kind])

    def __repr__(self) -> str:
        return f"AssetLoadError(asset={self.asset!r}, kind={self.kind.value!r}, cause={self.cause!r})"


class NotReadyError(AnalysisError):
    """Se pidió un análisis antes de que el detector terminase de inicializarse."""

    default_message = "Pose model is not ready yet. Wait for the model to finish loading and try again."


class PlaybackStartError(AnalysisError):
    """El vídeo no llegó a reproducirse al iniciar el muestreo."""

    default_message = "Unable to start video playback. Try a different file format."


class InvalidInputError(AnalysisError):
    """La entrada del usuario no es utilizable (p. ej. un archivo que no es vídeo)."""

    default_message = "Please select a video file (mp4, mov, webm, etc.)."


class VideoOpenError(AnalysisError):
    """OpenCV no pudo abrir o decodificar el archivo de vídeo."""

    default_message = "Could not open the video."


__all__ = [
    "ASSET_ERROR_MESSAGES",
    "AnalysisError",
    "AssetErrorKind",
    "AssetLoadError",
    "InvalidInputError",
    "NotReadyError",
    "PlaybackStartError",
    "VideoOpenError",
]
