"""Propietario explícito del detector de pose y de sus recursos cacheados."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import numpy as np

from technique_analyzer.core.errors import NotReadyError

from ..types import DetectionResult
from .base import BackendAssets, PoseBackend

logger = logging.getLogger(__name__)


class PoseBackendHandle:
    """Inicialización perezosa y recarga controlada de un :class:`PoseBackend`.

    Sustituye al estado global compartido: quien crea el *handle* es quien
    decide cuándo cargar, recargar y cerrar el detector. Las cargas se
    serializan con un ``asyncio.Lock``.
    """

    def __init__(self, assets: BackendAssets) -> None:
        self.assets = assets
        self._module: Any = None
        self._backend: Optional[PoseBackend] = None
        self._lock = asyncio.Lock()
        self._last_timestamp_ms = -1

    @property
    def is_loaded(self) -> bool:
        return self._backend is not None

    @property
    def last_timestamp_ms(self) -> int:
        """Última marca de tiempo enviada al detector actual (``-1`` si ninguna)."""

        return self._last_timestamp_ms

    @property
    def backend(self) -> Optional[PoseBackend]:
        return self._backend

    async def load(self, force_reload: bool = False) -> PoseBackend:
        """Carga el detector (o lo recarga desde cero si ``force_reload``).

        Propaga :class:`AssetLoadError` cuando alguna clase de recurso agota
        sus fuentes candidatas.
        """

        async with self._lock:
            if self._backend is not None and not force_reload:
                return self._backend

            self._close_backend()
            if force_reload:
                self._module = None

            if self._module is None:
                self._module = await self.assets.load_module()
            runtime = await self.assets.resolve_runtime(self._module)
            self._backend = await self.assets.create_backend(self._module, runtime)
            self._last_timestamp_ms = -1
            logger.info("Pose backend ready (%s)", type(self._backend).__name__)
            return self._backend

    def next_timestamp(self, timestamp_ms: float) -> int:
        """Ajusta ``timestamp_ms`` para que crezca estrictamente en este detector.

        El detector en modo vídeo se comparte entre ejecuciones, así que la
        cuenta sobrevive a los orquestadores que lo usan.
        """

        return max(int(timestamp_ms), self._last_timestamp_ms + 1)

    def detect(self, frame_bgr: np.ndarray, timestamp_ms: int) -> DetectionResult:
        if self._backend is None:
            raise NotReadyError()
        timestamp_ms = self.next_timestamp(timestamp_ms)
        self._last_timestamp_ms = timestamp_ms
        return self._backend.detect(frame_bgr, timestamp_ms)

    def _close_backend(self) -> None:
        backend, self._backend = self._backend, None
        if backend is None:
            return
        try:
            backend.close()
        except Exception:
            logger.exception("Error while closing the previous pose backend")

    def close(self) -> None:
        """Libera el detector actual; el módulo cacheado se conserva."""

        self._close_backend()


__all__ = ["PoseBackendHandle"]
