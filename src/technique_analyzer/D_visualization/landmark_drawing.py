"""Rutinas de dibujo para superponer poses sobre frames de vídeo.
Reúne la lógica de anotación para reutilizarla tanto en la capa en vivo como en
la animación de referencia sin reimplementar primitivas en cada módulo."""

from __future__ import annotations

from typing import Mapping, Sequence, Tuple

import cv2

from technique_analyzer.config import video_landmarks_visualization as vlv

from .landmark_overlay_styles import OverlayStyle

# Exponemos las utilidades de dibujo más relevantes.
__all__ = ["draw_pose_on_frame"]


def draw_pose_on_frame(
    frame,
    points_xy: Mapping[int, tuple[int, int]],
    *,
    connections: Sequence[Tuple[int, int]] = tuple(vlv.POSE_CONNECTIONS),
    style: OverlayStyle = OverlayStyle(),
) -> None:
    """Dibuja conexiones y puntos sobre ``frame`` usando los valores dados.
    Las conexiones con algún extremo ausente (no visible) se omiten."""

    for a, b in connections:
        if a in points_xy and b in points_xy:
            cv2.line(
                frame, points_xy[a], points_xy[b], style.connection_bgr, style.connection_thickness, cv2.LINE_AA
            )
    for p in points_xy.values():
        cv2.circle(frame, p, style.landmark_radius, style.landmark_bgr, -1, cv2.LINE_AA)
