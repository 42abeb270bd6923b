"""Animación en bucle de las poses sintéticas de referencia de un ejercicio."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from technique_analyzer.B_pose_estimation.geometry import landmarks_to_pixel_xy
from technique_analyzer.B_pose_estimation.types import Landmark, Pose
from technique_analyzer.config import video_landmarks_visualization as vlv
from technique_analyzer.config.settings import (
    REFERENCE_CANVAS_HEIGHT,
    REFERENCE_CANVAS_WIDTH,
    REFERENCE_FRAME_INTERVAL_MS,
)

from .landmark_drawing import draw_pose_on_frame
from .landmark_overlay_styles import REFERENCE_STYLE, OverlayStyle

__all__ = ["REFERENCE_CONNECTIONS", "ReferenceLoop", "render_reference_frame"]

REFERENCE_CONNECTIONS = tuple(vlv.REFERENCE_CONNECTIONS)


def render_reference_frame(
    pose: Sequence[Landmark],
    width: int = REFERENCE_CANVAS_WIDTH,
    height: int = REFERENCE_CANVAS_HEIGHT,
    *,
    style: OverlayStyle = REFERENCE_STYLE,
) -> np.ndarray:
    """Dibuja ``pose`` sobre un lienzo nuevo de ``width`` x ``height`` (BGR)."""

    canvas = np.empty((int(height), int(width), 3), dtype=np.uint8)
    canvas[:] = vlv.REFERENCE_BACKGROUND_COLOR
    # Las poses sintéticas no traen visibilidad: todos los puntos cuentan.
    points = landmarks_to_pixel_xy(pose, int(width), int(height), min_visibility=0.0)
    draw_pose_on_frame(canvas, points, connections=REFERENCE_CONNECTIONS, style=style)
    return canvas


class ReferenceLoop:
    """Recorre ``frames`` cíclicamente avanzando uno cada ``interval_ms``."""

    def __init__(self, frames: Sequence[Pose], interval_ms: float = REFERENCE_FRAME_INTERVAL_MS) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.frames = list(frames)
        self.interval_ms = float(interval_ms)

    def __len__(self) -> int:
        return len(self.frames)

    def index_at(self, elapsed_ms: float) -> Optional[int]:
        if not self.frames:
            return None
        step = int(max(0.0, float(elapsed_ms)) // self.interval_ms)
        return step % len(self.frames)

    def frame_at(self, elapsed_ms: float) -> Optional[Pose]:
        index = self.index_at(elapsed_ms)
        if index is None:
            return None
        return self.frames[index]

    def render_at(
        self,
        elapsed_ms: float,
        width: int = REFERENCE_CANVAS_WIDTH,
        height: int = REFERENCE_CANVAS_HEIGHT,
    ) -> Optional[np.ndarray]:
        pose = self.frame_at(elapsed_ms)
        if pose is None:
            return None
        return render_reference_frame(pose, width, height)
