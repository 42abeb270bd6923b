"""Constantes de *landmarks* compartidas por la geometría y el acumulador de métricas."""

from __future__ import annotations

from typing import Dict, Tuple

LANDMARK_COUNT: int = 33

# Atajos de índice que replican el orden de landmarks de Mediapipe.
NOSE = 0
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_ELBOW = 13
RIGHT_ELBOW = 14
LEFT_WRIST = 15
RIGHT_WRIST = 16
LEFT_INDEX = 19
RIGHT_INDEX = 20
LEFT_THUMB = 21
RIGHT_THUMB = 22
LEFT_HIP = 23
RIGHT_HIP = 24
LEFT_KNEE = 25
RIGHT_KNEE = 26
LEFT_ANKLE = 27
RIGHT_ANKLE = 28

HIP_CENTER = (LEFT_HIP, RIGHT_HIP)
SHOULDER_CENTER = (LEFT_SHOULDER, RIGHT_SHOULDER)

# Tripletas (extremo, vértice, extremo) para los ángulos que alimentan el análisis.
KNEE_TRIPLES: Dict[str, Tuple[int, int, int]] = {
    "left_knee": (LEFT_HIP, LEFT_KNEE, LEFT_ANKLE),
    "right_knee": (RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE),
}

HIP_TRIPLES: Dict[str, Tuple[int, int, int]] = {
    "left_hip": (LEFT_SHOULDER, LEFT_HIP, LEFT_KNEE),
    "right_hip": (RIGHT_SHOULDER, RIGHT_HIP, RIGHT_KNEE),
}

TORSO_INDICES: Tuple[int, int, int, int] = (LEFT_SHOULDER, RIGHT_SHOULDER, LEFT_HIP, RIGHT_HIP)
STANCE_INDICES: Tuple[int, int, int, int] = (LEFT_ANKLE, RIGHT_ANKLE, LEFT_HIP, RIGHT_HIP)

__all__ = [
    "LANDMARK_COUNT",
    "HIP_CENTER",
    "SHOULDER_CENTER",
    "KNEE_TRIPLES",
    "HIP_TRIPLES",
    "TORSO_INDICES",
    "STANCE_INDICES",
    "LEFT_HIP",
    "RIGHT_HIP",
    "LEFT_SHOULDER",
    "RIGHT_SHOULDER",
    "LEFT_KNEE",
    "RIGHT_KNEE",
    "LEFT_ANKLE",
    "RIGHT_ANKLE",
]
