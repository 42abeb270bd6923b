"""Conversión de veredictos y puntuación a tablas y textos para la interfaz."""

from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd

from technique_analyzer.C_analysis.accumulator import PoseAnalysis
from technique_analyzer.C_analysis.comparison import (
    EMPTY_VALUE,
    MetricVerdict,
    describe_delta,
    format_metric_value,
)
from technique_analyzer.core.types import VerdictStatus

__all__ = [
    "EMPTY_COMPARISON_MESSAGE",
    "STATUS_LABELS",
    "VERDICT_COLUMNS",
    "frames_label",
    "score_label",
    "status_label",
    "verdict_table",
]

VERDICT_COLUMNS = ["Metric", "Description", "Your metric", "Reference window", "Difference", "Status"]

STATUS_LABELS = {
    VerdictStatus.MATCH: "On target",
    VerdictStatus.DEVIATION: "Needs attention",
    VerdictStatus.MISSING: "No data",
}

EMPTY_COMPARISON_MESSAGE = (
    "Upload a video and run the analyzer to see how your movement stacks up against the reference model."
)


def status_label(status: VerdictStatus) -> str:
    return STATUS_LABELS[VerdictStatus(status)]


def verdict_table(verdicts: Iterable[MetricVerdict]) -> pd.DataFrame:
    """Una fila por métrica, en el orden del catálogo."""

    rows = []
    for verdict in verdicts:
        metric = verdict.metric
        window = f"{format_metric_value(metric, metric.min)} — {format_metric_value(metric, metric.max)}"
        if verdict.status is VerdictStatus.MISSING:
            difference = EMPTY_VALUE
        else:
            difference = describe_delta(metric, verdict.delta)
        rows.append(
            {
                "Metric": metric.label,
                "Description": metric.description,
                "Your metric": format_metric_value(metric, verdict.value),
                "Reference window": window,
                "Difference": difference,
                "Status": status_label(verdict.status),
            }
        )
    return pd.DataFrame(rows, columns=VERDICT_COLUMNS)


def score_label(score: Optional[int]) -> str:
    if score is None:
        return f"Technique score: {EMPTY_VALUE}"
    return f"Technique score: {score}% within target"


def frames_label(analysis: Optional[PoseAnalysis]) -> Optional[str]:
    if analysis is None or analysis.frame_count == 0:
        return None
    return f"{analysis.frame_count} frames analyzed"
