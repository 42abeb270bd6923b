"""Tipos ligeros que describen *landmarks*, poses y resultados del detector."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class Landmark(Mapping[str, Optional[float]]):
    """Articulación en coordenadas normalizadas de imagen (0–1).

    ``visibility`` es la confianza opcional del detector; ``None`` equivale a
    un punto completamente visible.
    """

    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None

    def __getitem__(self, key: str) -> Optional[float]:  # type: ignore[override]
        if key == "x":
            return float(self.x)
        if key == "y":
            return float(self.y)
        if key == "z":
            return float(self.z)
        if key == "visibility":
            return None if self.visibility is None else float(self.visibility)
        raise KeyError(key)

    def __iter__(self):  # type: ignore[override]
        yield from ("x", "y", "z", "visibility")

    def __len__(self) -> int:  # type: ignore[override]
        return 4

    def to_dict(self) -> dict[str, Optional[float]]:
        """Exporta el landmark a un diccionario simple."""

        return {"x": float(self.x), "y": float(self.y), "z": float(self.z), "visibility": self.visibility}

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "Landmark":
        """Crea un ``Landmark`` desde cualquier ``Mapping`` con claves ``x/y/z/visibility``."""

        visibility = data.get("visibility")
        if visibility is not None:
            visibility = float(visibility)  # type: ignore[arg-type]
            if math.isnan(visibility):
                visibility = None
        return cls(
            x=float(data["x"]),  # type: ignore[arg-type]
            y=float(data["y"]),  # type: ignore[arg-type]
            z=float(data.get("z", 0.0) or 0.0),  # type: ignore[arg-type]
            visibility=visibility,
        )


# Una pose es la lista ordenada (por índice de Mediapipe) de landmarks de un sujeto.
Pose = List[Landmark]
PoseSequence = Sequence[Pose]


@dataclass
class DetectionResult:
    """Salida de ``detect``: cero o una poses (seguimiento de un único sujeto)."""

    landmarks: List[Pose] = field(default_factory=list)

    @property
    def first_pose(self) -> Optional[Pose]:
        """Primera pose detectada o ``None`` si el fotograma no tenía sujeto."""

        if self.landmarks:
            return self.landmarks[0]
        return None


__all__ = ["DetectionResult", "Landmark", "Pose", "PoseSequence"]
