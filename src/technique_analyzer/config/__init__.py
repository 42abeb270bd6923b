"""Reexportaciones para mantener compatibilidad con ``from technique_analyzer import config``."""

from __future__ import annotations

# Dataclasses principales de configuración --------------------------------------
from .models import (
    AnalysisConfig,
    BackendConfig,
    CatalogConfig,
    Config,
    SamplingConfig,
)

# Funciones auxiliares de carga --------------------------------------------------
from .utils import from_yaml, load_default

# Constantes compartidas ---------------------------------------------------------
from .constants import APP_NAME, DEFAULT_CATALOG_PATH, PROJECT_ROOT, VIDEO_EXTENSIONS

# Utilidades de visualización ----------------------------------------------------
from .video_landmarks_visualization import (
    CONNECTION_COLOR,
    LANDMARK_COLOR,
    POSE_CONNECTIONS,
    RADIUS_DEFAULT,
    REFERENCE_CONNECTIONS,
    THICKNESS_DEFAULT,
)

__all__ = [
    "AnalysisConfig",
    "BackendConfig",
    "CatalogConfig",
    "Config",
    "SamplingConfig",
    "load_default",
    "from_yaml",
    "APP_NAME",
    "DEFAULT_CATALOG_PATH",
    "PROJECT_ROOT",
    "VIDEO_EXTENSIONS",
    "POSE_CONNECTIONS",
    "REFERENCE_CONNECTIONS",
    "LANDMARK_COLOR",
    "CONNECTION_COLOR",
    "THICKNESS_DEFAULT",
    "RADIUS_DEFAULT",
]
