"""Paquete que agrupa el análisis de técnica: acumulación, comparación y muestreo."""

from .accumulator import MetricAccumulator, PoseAnalysis, accumulate, finalize, publishable
from .comparison import (
    MetricVerdict,
    compare_to_reference,
    describe_delta,
    evaluate_metric,
    format_degrees,
    format_metric_value,
    format_ratio,
    technique_score,
)
from .orchestrator import AnalysisOrchestrator, CancellationToken, SamplerState, SamplingRun
from .scheduling import AsyncioFrameClock, FrameClock, SampleThrottle

__all__ = [
    "MetricAccumulator",
    "PoseAnalysis",
    "accumulate",
    "finalize",
    "publishable",
    "MetricVerdict",
    "compare_to_reference",
    "describe_delta",
    "evaluate_metric",
    "format_degrees",
    "format_metric_value",
    "format_ratio",
    "technique_score",
    "AnalysisOrchestrator",
    "CancellationToken",
    "SamplerState",
    "SamplingRun",
    "AsyncioFrameClock",
    "FrameClock",
    "SampleThrottle",
]
