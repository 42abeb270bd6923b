"""Interfaces base que comparten todos los *backends* de detección de pose."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from ..types import DetectionResult


class PoseBackend(ABC):
    """Contrato mínimo de un detector de pose en modo vídeo."""

    @abstractmethod
    def detect(self, frame_bgr: np.ndarray, timestamp_ms: int) -> DetectionResult:
        """Detecta las poses de ``frame_bgr``.

        ``timestamp_ms`` debe crecer estrictamente entre llamadas; el llamador
        es responsable de garantizarlo.
        """

    def close(self) -> None:
        """Libera recursos asociados al detector (sobrescribible)."""

    def __enter__(self):
        """Permite usar el detector como *context manager* estándar."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> Optional[bool]:
        """Cierra el detector al salir del contexto gestionado."""
        self.close()
        return None


class BackendAssets(ABC):
    """Carga en tres pasos los recursos que necesita un :class:`PoseBackend`.

    Cada paso recorre su propia lista de fuentes candidatas (local primero,
    remota después) y lanza :class:`AssetLoadError` si todas fallan.
    """

    @abstractmethod
    async def load_module(self) -> Any:
        """Resuelve el módulo de ejecución del detector."""

    @abstractmethod
    async def resolve_runtime(self, module: Any) -> Any:
        """Resuelve el entorno de cómputo (p. ej. el *delegate*)."""

    @abstractmethod
    async def create_backend(self, module: Any, runtime: Any) -> PoseBackend:
        """Carga los pesos del modelo y construye el detector."""


__all__ = ["BackendAssets", "PoseBackend"]
