"""Tipos comunes para métricas, rangos de referencia y perfiles de ejercicio.

Normaliza las etiquetas que llegan desde el catálogo YAML o desde la interfaz
para que el comparador trabaje siempre con enumeraciones fuertes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union

from technique_analyzer.B_pose_estimation.types import Pose


class MetricKey(str, Enum):
    """Métricas que produce el acumulador y que el catálogo puede evaluar."""

    MIN_KNEE = "min_knee"
    MAX_HIP = "max_hip"
    AVG_TORSO_LEAN = "avg_torso_lean"
    STANCE_SYMMETRY = "stance_symmetry"


class MetricUnit(str, Enum):
    """Unidad en la que se expresa una métrica."""

    DEGREES = "degrees"
    RATIO = "ratio"


class VerdictStatus(str, Enum):
    """Clasificación de una métrica frente a su ventana de referencia."""

    MATCH = "match"
    DEVIATION = "deviation"
    MISSING = "missing"


_METRIC_ALIAS_MAP = {
    # Alias camelCase admitidos en catálogos YAML.
    "minkneeangle": MetricKey.MIN_KNEE.value,
    "maxhipangle": MetricKey.MAX_HIP.value,
    "avgtorsolean": MetricKey.AVG_TORSO_LEAN.value,
    "stancesymmetry": MetricKey.STANCE_SYMMETRY.value,
    "min_knee_angle": MetricKey.MIN_KNEE.value,
    "max_hip_angle": MetricKey.MAX_HIP.value,
}


def _normalize_label(value: str) -> str:
    """Limpiar una etiqueta textual para compararla de forma consistente."""

    normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
    while "__" in normalized:
        normalized = normalized.replace("__", "_")
    return normalized


def as_metric_key(value: Union[str, MetricKey]) -> MetricKey:
    """Convertir una etiqueta libre en ``MetricKey``.

    A diferencia de las vistas o ejercicios, una métrica desconocida no tiene
    un valor neutro al que degradarse: se lanza ``ValueError`` para que el
    catálogo se rechace al cargarlo.
    """

    if isinstance(value, MetricKey):
        return value
    normalized = _normalize_label(str(value))
    mapped = _METRIC_ALIAS_MAP.get(normalized, normalized)
    try:
        return MetricKey(mapped)
    except ValueError:
        raise ValueError(f"Unknown metric key: {value!r}") from None


def as_unit(value: Union[str, MetricUnit]) -> MetricUnit:
    """Normalizar la unidad declarada en el catálogo."""

    if isinstance(value, MetricUnit):
        return value
    return MetricUnit(_normalize_label(str(value)))


@dataclass(frozen=True)
class MetricRange:
    """Ventana objetivo ``[min, max]`` de una métrica para un ejercicio."""

    key: MetricKey
    label: str
    description: str
    unit: MetricUnit
    min: float
    max: float

    def contains(self, value: float) -> bool:
        """Ambos extremos son inclusivos."""

        return self.min <= value <= self.max


@dataclass(frozen=True)
class ExerciseProfile:
    """Entrada del catálogo: pautas, rangos y poses sintéticas de referencia.

    ``reference_frames`` es solo material visual en bucle; no interviene en la
    puntuación.
    """

    id: str
    name: str
    description: str
    cues: Tuple[str, ...] = ()
    metrics: Tuple[MetricRange, ...] = ()
    reference_frames: List[Pose] = field(default_factory=list, compare=False, repr=False)


__all__ = [
    "ExerciseProfile",
    "MetricKey",
    "MetricRange",
    "MetricUnit",
    "VerdictStatus",
    "as_metric_key",
    "as_unit",
]
