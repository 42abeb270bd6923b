"""Tipos y excepciones compartidos por todas las etapas del analizador."""

from .errors import (
    AnalysisError,
    AssetErrorKind,
    AssetLoadError,
    InvalidInputError,
    NotReadyError,
    PlaybackStartError,
    VideoOpenError,
)
from .types import (
    ExerciseProfile,
    MetricKey,
    MetricRange,
    MetricUnit,
    VerdictStatus,
    as_metric_key,
    as_unit,
)

__all__ = [
    "AnalysisError",
    "AssetErrorKind",
    "AssetLoadError",
    "InvalidInputError",
    "NotReadyError",
    "PlaybackStartError",
    "VideoOpenError",
    "ExerciseProfile",
    "MetricKey",
    "MetricRange",
    "MetricUnit",
    "VerdictStatus",
    "as_metric_key",
    "as_unit",
]
