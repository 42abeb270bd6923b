"""Detector de pose basado en la API *Tasks* de Mediapipe (``PoseLandmarker``)."""

from __future__ import annotations

import asyncio
import importlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import cv2
import httpx
import numpy as np

from technique_analyzer.config.models import BackendConfig
from technique_analyzer.config.settings import build_landmarker_kwargs, configure_environment

from ..geometry import landmarks_from_proto
from ..types import DetectionResult
from .assets import AssetSource, download_asset, resolve_first
from .base import BackendAssets, PoseBackend

logger = logging.getLogger(__name__)

VISION_MODULE_ASSET = "vision module"
COMPUTE_RUNTIME_ASSET = "compute runtime"
POSE_MODEL_ASSET = "pose model"


@dataclass(frozen=True)
class MediaPipeRuntime:
    """*Delegate* de cómputo resuelto y la clase ``BaseOptions`` que lo acepta."""

    name: str
    base_options_cls: Any
    delegate: Any

    def base_options(self, model_path: Path) -> Any:
        return self.base_options_cls(model_asset_path=str(model_path), delegate=self.delegate)


class MediaPipePoseBackend(PoseBackend):
    """Envuelve un ``PoseLandmarker`` en modo vídeo y un único sujeto."""

    def __init__(self, landmarker: Any, mp_module: Any) -> None:
        self._landmarker = landmarker
        self._mp = mp_module

    def detect(self, frame_bgr: np.ndarray, timestamp_ms: int) -> DetectionResult:
        if self._landmarker is None:
            raise RuntimeError("MediaPipePoseBackend is closed")
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=np.ascontiguousarray(rgb))
        result = self._landmarker.detect_for_video(image, int(timestamp_ms))
        poses = getattr(result, "pose_landmarks", None) or []
        if not poses:
            return DetectionResult()
        return DetectionResult(landmarks=[landmarks_from_proto(poses[0])])

    def close(self) -> None:
        landmarker, self._landmarker = self._landmarker, None
        if landmarker is not None:
            landmarker.close()


class MediaPipeAssets(BackendAssets):
    """Fuentes candidatas de Mediapipe para las tres clases de recurso.

    * módulo de ejecución: nombres de módulo importables, en orden;
    * entorno de cómputo: *delegates* (``cpu``, ``gpu``) en orden;
    * pesos del modelo: ruta local y, si no existe, descarga remota a esa ruta.
    """

    def __init__(
        self,
        config: Optional[BackendConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or BackendConfig()
        self.transport = transport

    # --- runtime module ---------------------------------------------------
    def module_sources(self) -> list[AssetSource]:
        return [
            AssetSource(VISION_MODULE_ASSET, name, remote=index > 0)
            for index, name in enumerate(self.config.module_sources)
        ]

    async def _import_module(self, source: AssetSource) -> Any:
        return importlib.import_module(source.location)

    async def load_module(self) -> Any:
        configure_environment()
        outcome = await resolve_first(VISION_MODULE_ASSET, self.module_sources(), self._import_module)
        return outcome.value

    # --- compute runtime --------------------------------------------------
    def runtime_sources(self) -> list[AssetSource]:
        return [
            AssetSource(COMPUTE_RUNTIME_ASSET, name, remote=index > 0)
            for index, name in enumerate(self.config.delegate_sources)
        ]

    async def _resolve_delegate(self, source: AssetSource) -> MediaPipeRuntime:
        tasks = importlib.import_module("mediapipe.tasks.python")
        base_options_cls = tasks.BaseOptions
        delegate = getattr(base_options_cls.Delegate, source.location.upper())
        return MediaPipeRuntime(name=source.location, base_options_cls=base_options_cls, delegate=delegate)

    async def resolve_runtime(self, module: Any) -> MediaPipeRuntime:
        outcome = await resolve_first(COMPUTE_RUNTIME_ASSET, self.runtime_sources(), self._resolve_delegate)
        return outcome.value

    # --- model weights ----------------------------------------------------
    def model_sources(self) -> list[AssetSource]:
        sources = [AssetSource(POSE_MODEL_ASSET, str(self.config.model_local_path))]
        if self.config.model_remote_url:
            sources.append(AssetSource(POSE_MODEL_ASSET, self.config.model_remote_url, remote=True))
        return sources

    async def _fetch_model(self, source: AssetSource) -> Path:
        local_path = Path(self.config.model_local_path)
        if source.remote:
            return await download_asset(
                source.location,
                local_path,
                timeout=self.config.download_timeout_s,
                transport=self.transport,
            )
        path = Path(source.location)
        if not path.is_file():
            raise FileNotFoundError(f"Model file not found: {path}")
        return path

    def _build_landmarker(self, vision: Any, runtime: MediaPipeRuntime, model_path: Path) -> Any:
        options = vision.PoseLandmarkerOptions(
            base_options=runtime.base_options(model_path),
            running_mode=vision.RunningMode.VIDEO,
            **build_landmarker_kwargs(
                num_poses=self.config.num_poses,
                min_pose_detection_confidence=self.config.min_pose_detection_confidence,
                min_pose_presence_confidence=self.config.min_pose_presence_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence,
            ),
        )
        return vision.PoseLandmarker.create_from_options(options)

    async def create_backend(self, module: Any, runtime: MediaPipeRuntime) -> MediaPipePoseBackend:
        async def attempt(source: AssetSource) -> Any:
            model_path = await self._fetch_model(source)
            return await asyncio.to_thread(self._build_landmarker, module, runtime, model_path)

        outcome = await resolve_first(POSE_MODEL_ASSET, self.model_sources(), attempt)
        mp_module = importlib.import_module("mediapipe")
        logger.info("PoseLandmarker created (delegate=%s, model=%s)", runtime.name, outcome.source.location)
        return MediaPipePoseBackend(outcome.value, mp_module)


__all__ = [
    "COMPUTE_RUNTIME_ASSET",
    "MediaPipeAssets",
    "MediaPipePoseBackend",
    "MediaPipeRuntime",
    "POSE_MODEL_ASSET",
    "VISION_MODULE_ASSET",
]
