"""Utilidades geométricas para convertir landmarks en métricas de técnica.

Todas las funciones trabajan en el plano de la imagen (``x``, ``y``); la
coordenada ``z`` del detector no interviene en los ángulos.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

import numpy as np

from .types import Landmark, Pose

MIN_VISIBILITY = 0.3


def is_visible(landmark: Optional[Landmark], min_visibility: float = MIN_VISIBILITY) -> bool:
    """Indica si ``landmark`` existe y supera el umbral de visibilidad.

    Un landmark sin ``visibility`` se considera plenamente visible.
    """

    if landmark is None:
        return False
    if landmark.visibility is None:
        return True
    return float(landmark.visibility) >= min_visibility


def landmarks_visible(
    pose: Sequence[Landmark],
    indices: Iterable[int],
    min_visibility: float = MIN_VISIBILITY,
) -> bool:
    """Comprueba que todos los ``indices`` de ``pose`` sean visibles."""

    for idx in indices:
        if idx >= len(pose) or not is_visible(pose[idx], min_visibility):
            return False
    return True


def midpoint(a: Landmark, b: Landmark) -> Landmark:
    """Punto medio en el plano de la imagen."""

    return Landmark(x=(a.x + b.x) * 0.5, y=(a.y + b.y) * 0.5)


def joint_angle(a: Landmark, b: Landmark, c: Landmark) -> Optional[float]:
    """Ángulo en grados (0–180) con vértice en ``b`` entre los rayos ``b→a`` y ``b→c``.

    Devuelve ``None`` si alguno de los rayos tiene longitud cero: el llamador
    no debe interpretar ese caso como 0°.
    """

    ab = np.array([a.x - b.x, a.y - b.y], dtype=float)
    cb = np.array([c.x - b.x, c.y - b.y], dtype=float)
    mag_ab = float(np.hypot(*ab))
    mag_cb = float(np.hypot(*cb))
    if mag_ab == 0.0 or mag_cb == 0.0:
        return None
    cosine = float(np.dot(ab, cb)) / (mag_ab * mag_cb)
    return float(np.degrees(np.arccos(np.clip(cosine, -1.0, 1.0))))


def torso_lean(shoulder_mid: Landmark, hip_mid: Landmark) -> float:
    """Inclinación del tronco respecto a la vertical en grados (0° = erguido)."""

    dx = shoulder_mid.x - hip_mid.x
    dy = shoulder_mid.y - hip_mid.y
    return float(abs(np.degrees(np.arctan2(dx, -dy))))


def stance_asymmetry(
    left_ankle: Landmark,
    left_hip: Landmark,
    right_ankle: Landmark,
    right_hip: Landmark,
) -> float:
    """Diferencia entre el desplazamiento horizontal tobillo–cadera de cada lado."""

    left_offset = abs(left_ankle.x - left_hip.x)
    right_offset = abs(right_ankle.x - right_hip.x)
    return float(abs(left_offset - right_offset))


def landmarks_from_proto(landmarks: Iterable[object]) -> Pose:
    """Convierte landmarks del detector en objetos :class:`Landmark`."""

    converted: Pose = []
    for lm in landmarks:
        visibility = getattr(lm, "visibility", None)
        if visibility is not None:
            visibility = float(visibility)
            if not np.isfinite(visibility):
                visibility = None
        converted.append(
            Landmark(
                x=float(getattr(lm, "x", np.nan)),
                y=float(getattr(lm, "y", np.nan)),
                z=float(getattr(lm, "z", 0.0) or 0.0),
                visibility=visibility,
            )
        )
    return converted


def landmarks_to_pixel_xy(
    pose: Sequence[Landmark],
    width: int,
    height: int,
    *,
    min_visibility: float = MIN_VISIBILITY,
) -> dict[int, tuple[int, int]]:
    """Mapea los landmarks visibles a coordenadas de píxel ``{índice: (x, y)}``."""

    points: dict[int, tuple[int, int]] = {}
    for idx, lm in enumerate(pose):
        if not is_visible(lm, min_visibility):
            continue
        if not (np.isfinite(lm.x) and np.isfinite(lm.y)):
            continue
        points[idx] = (int(round(lm.x * width)), int(round(lm.y * height)))
    return points


__all__ = [
    "MIN_VISIBILITY",
    "is_visible",
    "joint_angle",
    "landmarks_from_proto",
    "landmarks_to_pixel_xy",
    "landmarks_visible",
    "midpoint",
    "stance_asymmetry",
    "torso_lean",
]
