"""Capa de dibujo en memoria donde el orquestador pinta la pose detectada.

Hace las veces del ``canvas`` superpuesto al vídeo: se limpia en cada muestra,
recibe la pose del fotograma y puede componerse sobre cualquier fotograma BGR.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

import cv2
import numpy as np

from technique_analyzer.B_pose_estimation.geometry import MIN_VISIBILITY, landmarks_to_pixel_xy
from technique_analyzer.B_pose_estimation.types import Landmark
from technique_analyzer.config import video_landmarks_visualization as vlv

from .landmark_drawing import draw_pose_on_frame
from .landmark_overlay_styles import OverlayStyle

__all__ = ["DrawingSurface", "OverlayCanvas"]


@runtime_checkable
class DrawingSurface(Protocol):
    """Superficie mínima que necesita el bucle de muestreo."""

    def clear(self) -> None: ...

    def draw_pose(self, pose: Sequence[Landmark]) -> None: ...


class OverlayCanvas:
    """Capa BGR transparente (negro = vacío) del tamaño del vídeo."""

    def __init__(
        self,
        width: int = 640,
        height: int = 360,
        *,
        min_visibility: float = MIN_VISIBILITY,
        style: Optional[OverlayStyle] = None,
    ) -> None:
        self.min_visibility = float(min_visibility)
        self.style = style or OverlayStyle()
        self.width = 0
        self.height = 0
        self._layer = np.zeros((1, 1, 3), dtype=np.uint8)
        self.poses_drawn = 0
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        """Ajusta la capa al tamaño del vídeo; el contenido previo se descarta."""

        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self._layer = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    def clear(self) -> None:
        self._layer[:] = 0

    def draw_pose(self, pose: Sequence[Landmark]) -> None:
        points = landmarks_to_pixel_xy(pose, self.width, self.height, min_visibility=self.min_visibility)
        draw_pose_on_frame(self._layer, points, connections=tuple(vlv.POSE_CONNECTIONS), style=self.style)
        self.poses_drawn += 1

    def snapshot(self) -> np.ndarray:
        """Copia de la capa actual."""

        return self._layer.copy()

    def compose(self, frame: np.ndarray) -> np.ndarray:
        """Devuelve ``frame`` con la capa superpuesta (no modifica la entrada)."""

        out = frame.copy()
        frame_h, frame_w = out.shape[:2]
        layer = self._layer
        if layer.shape[:2] != (frame_h, frame_w):
            layer = cv2.resize(layer, (frame_w, frame_h), interpolation=cv2.INTER_NEAREST)
        mask = layer.any(axis=2)
        out[mask] = layer[mask]
        return out
