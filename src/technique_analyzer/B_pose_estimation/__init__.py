"""Exportaciones principales del paquete de utilidades de estimación de pose.

Los *backends* (``B_pose_estimation.backends``) no se importan aquí para que la
geometría pueda usarse sin cargar Mediapipe ni OpenCV.
"""

from .constants import (
    HIP_CENTER,
    HIP_TRIPLES,
    KNEE_TRIPLES,
    LANDMARK_COUNT,
    SHOULDER_CENTER,
)
from .geometry import (
    MIN_VISIBILITY,
    is_visible,
    joint_angle,
    landmarks_from_proto,
    landmarks_to_pixel_xy,
    landmarks_visible,
    midpoint,
    stance_asymmetry,
    torso_lean,
)
from .types import DetectionResult, Landmark, Pose, PoseSequence

__all__ = [
    "DetectionResult",
    "Landmark",
    "Pose",
    "PoseSequence",
    "LANDMARK_COUNT",
    "HIP_CENTER",
    "SHOULDER_CENTER",
    "KNEE_TRIPLES",
    "HIP_TRIPLES",
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
