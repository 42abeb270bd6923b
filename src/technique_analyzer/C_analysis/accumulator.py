"""Reducción en streaming de las métricas de técnica a lo largo de un vídeo.

El acumulador recibe una pose por fotograma muestreado y mantiene solo
agregados (mínimo, máximo y sumas), de modo que el coste de memoria no depende
de la duración del clip. ``finalize`` convierte esos agregados en un
:class:`PoseAnalysis` inmutable consciente del número de fotogramas válidos.

Los valores "sin datos" se representan con ``None`` desde el principio en lugar
de centinelas (``+inf`` / ``0``); así un ángulo de cadera real de 0° no se
confunde con la ausencia de medidas.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Sequence, Union

from technique_analyzer.B_pose_estimation.constants import (
    HIP_TRIPLES,
    KNEE_TRIPLES,
    LEFT_ANKLE,
    LEFT_HIP,
    LEFT_SHOULDER,
    RIGHT_ANKLE,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    STANCE_INDICES,
    TORSO_INDICES,
)
from technique_analyzer.B_pose_estimation.geometry import (
    MIN_VISIBILITY,
    joint_angle,
    landmarks_visible,
    midpoint,
    stance_asymmetry,
    torso_lean,
)
from technique_analyzer.B_pose_estimation.types import Landmark
from technique_analyzer.core.types import MetricKey


@dataclass(frozen=True)
class PoseAnalysis:
    """Resumen final de una ejecución; cada métrica puede faltar por separado."""

    min_knee: Optional[float]
    max_hip: Optional[float]
    avg_torso_lean: Optional[float]
    stance_symmetry: Optional[float]
    frame_count: int

    def value(self, key: Union[MetricKey, str]) -> Optional[float]:
        """Valor de la métrica ``key`` (acepta ``MetricKey`` o su cadena)."""

        return getattr(self, MetricKey(key).value)

    def to_dict(self) -> dict[str, Optional[float]]:
        return asdict(self)


class MetricAccumulator:
    """Agregados mutables de una única ejecución de análisis.

    Tiene un único escritor (la ejecución de muestreo que lo creó) y se
    consume una sola vez con :func:`finalize`.
    """

    def __init__(self, min_visibility: float = MIN_VISIBILITY) -> None:
        self.min_visibility = float(min_visibility)
        self.min_knee: Optional[float] = None
        self.max_hip: Optional[float] = None
        self.torso_lean_sum = 0.0
        self.stance_diff_sum = 0.0
        self.valid_frames = 0

    def __repr__(self) -> str:
        return (
            f"MetricAccumulator(min_knee={self.min_knee!r}, max_hip={self.max_hip!r}, "
            f"torso_lean_sum={self.torso_lean_sum!r}, stance_diff_sum={self.stance_diff_sum!r}, "
            f"valid_frames={self.valid_frames!r})"
        )

    def _side_angles(self, pose: Sequence[Landmark], triples) -> list[float]:
        angles: list[float] = []
        for a_idx, b_idx, c_idx in triples.values():
            if not landmarks_visible(pose, (a_idx, b_idx, c_idx), self.min_visibility):
                continue
            angle = joint_angle(pose[a_idx], pose[b_idx], pose[c_idx])
            if angle is not None:
                angles.append(angle)
        return angles

    def accumulate(self, pose: Optional[Sequence[Landmark]]) -> bool:
        """Incorpora una pose y devuelve ``True`` si el fotograma cuenta como válido."""

        if not pose:
            return False

        valid_frame = False

        knee_angles = self._side_angles(pose, KNEE_TRIPLES)
        if knee_angles:
            # La flexión más profunda de las dos piernas es la que cuenta.
            deepest = min(knee_angles)
            self.min_knee = deepest if self.min_knee is None else min(self.min_knee, deepest)
            valid_frame = True

        hip_angles = self._side_angles(pose, HIP_TRIPLES)
        if hip_angles:
            extended = max(hip_angles)
            self.max_hip = extended if self.max_hip is None else max(self.max_hip, extended)
            valid_frame = True

        if landmarks_visible(pose, TORSO_INDICES, self.min_visibility):
            shoulders_mid = midpoint(pose[LEFT_SHOULDER], pose[RIGHT_SHOULDER])
            hips_mid = midpoint(pose[LEFT_HIP], pose[RIGHT_HIP])
            self.torso_lean_sum += torso_lean(shoulders_mid, hips_mid)
            valid_frame = True

        if landmarks_visible(pose, STANCE_INDICES, self.min_visibility):
            self.stance_diff_sum += stance_asymmetry(
                pose[LEFT_ANKLE], pose[LEFT_HIP], pose[RIGHT_ANKLE], pose[RIGHT_HIP]
            )
            valid_frame = True

        if valid_frame:
            self.valid_frames += 1
        return valid_frame


def accumulate(accumulator: MetricAccumulator, pose: Optional[Sequence[Landmark]]) -> bool:
    """Atajo funcional de :meth:`MetricAccumulator.accumulate`."""

    return accumulator.accumulate(pose)


def finalize(accumulator: MetricAccumulator) -> PoseAnalysis:
    """Convierte los agregados en un resumen inmutable."""

    frames = accumulator.valid_frames
    if frames == 0:
        return PoseAnalysis(None, None, None, None, 0)
    return PoseAnalysis(
        min_knee=accumulator.min_knee,
        max_hip=accumulator.max_hip,
        avg_torso_lean=accumulator.torso_lean_sum / frames,
        stance_symmetry=accumulator.stance_diff_sum / frames,
        frame_count=frames,
    )


def publishable(analysis: Optional[PoseAnalysis]) -> Optional[PoseAnalysis]:
    """Un análisis sin fotogramas válidos se publica como "sin datos" (``None``)."""

    if analysis is None or analysis.frame_count == 0:
        return None
    return analysis


__all__ = ["MetricAccumulator", "PoseAnalysis", "accumulate", "finalize", "publishable"]
