"""Comparación de un :class:`PoseAnalysis` con las ventanas de referencia de un ejercicio."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from technique_analyzer.core.types import (
    ExerciseProfile,
    MetricRange,
    MetricUnit,
    VerdictStatus,
)

from .accumulator import PoseAnalysis

EMPTY_VALUE = "—"


@dataclass(frozen=True)
class MetricVerdict:
    """Resultado de evaluar una métrica; ``delta`` solo existe en desviaciones."""

    metric: MetricRange
    value: Optional[float]
    status: VerdictStatus
    delta: Optional[float] = None


def evaluate_metric(metric: MetricRange, value: Optional[float]) -> MetricVerdict:
    """Clasifica ``value`` como coincidencia, desviación o ausente."""

    if value is None:
        return MetricVerdict(metric=metric, value=None, status=VerdictStatus.MISSING)
    if metric.contains(value):
        return MetricVerdict(metric=metric, value=value, status=VerdictStatus.MATCH)
    # Desviación con signo respecto al extremo más cercano de la ventana.
    delta = value - metric.min if value < metric.min else value - metric.max
    return MetricVerdict(metric=metric, value=value, status=VerdictStatus.DEVIATION, delta=delta)


def compare_to_reference(
    analysis: Optional[PoseAnalysis],
    profile: Optional[ExerciseProfile],
) -> List[MetricVerdict]:
    """Evalúa cada rango del perfil en el orden del catálogo."""

    if analysis is None or profile is None:
        return []
    return [evaluate_metric(metric, analysis.value(metric.key)) for metric in profile.metrics]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def technique_score(verdicts: Iterable[MetricVerdict]) -> Optional[int]:
    """Porcentaje de métricas en rango entre las que tienen datos.

    Las métricas ausentes no cuentan ni en el numerador ni en el denominador;
    sin ninguna métrica utilizable el resultado es ``None`` (distinto de 0%).
    """

    usable = [verdict for verdict in verdicts if verdict.status is not VerdictStatus.MISSING]
    if not usable:
        return None
    matches = sum(1 for verdict in usable if verdict.status is VerdictStatus.MATCH)
    return _round_half_up(100.0 * matches / len(usable))


def format_degrees(value: Optional[float], fraction_digits: int = 1) -> str:
    if value is None:
        return EMPTY_VALUE
    return f"{value:.{fraction_digits}f}°"


def format_ratio(value: Optional[float], fraction_digits: int = 3) -> str:
    if value is None:
        return EMPTY_VALUE
    return f"{value:.{fraction_digits}f}"


def format_metric_value(metric: MetricRange, value: Optional[float]) -> str:
    """Formatea ``value`` según la unidad declarada por la métrica."""

    if metric.unit is MetricUnit.RATIO:
        return format_ratio(value)
    return format_degrees(value)


def describe_delta(metric: MetricRange, delta: Optional[float]) -> str:
    """Texto corto para la interfaz que explica cuánto se aleja la métrica."""

    if delta is None or delta == 0:
        return "On target"
    direction = "higher" if delta > 0 else "lower"
    if metric.unit is MetricUnit.RATIO:
        magnitude = f"{abs(delta):.3f}"
    else:
        magnitude = f"{abs(delta):.1f}°"
    return f"{magnitude} {direction} than the reference window"


__all__ = [
    "MetricVerdict",
    "compare_to_reference",
    "describe_delta",
    "evaluate_metric",
    "format_degrees",
    "format_metric_value",
    "format_ratio",
    "technique_score",
]
