"""Modelos ``dataclass`` que describen la configuración del analizador."""
from __future__ import annotations
from dataclasses import dataclass, field, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import copy

from .constants import (
    MIN_POSE_DETECTION_CONFIDENCE,
    MIN_POSE_PRESENCE_CONFIDENCE,
    MIN_TRACKING_CONFIDENCE,
)
from .settings import (
    ASSET_DOWNLOAD_TIMEOUT_S,
    COMPUTE_DELEGATE_SOURCES,
    FRAME_TICK_HZ,
    MIN_LANDMARK_VISIBILITY,
    MIN_SAMPLE_INTERVAL_MS,
    POSE_MODEL_LOCAL_PATH,
    POSE_MODEL_REMOTE_URL,
    POSE_NUM_POSES,
    VISION_MODULE_SOURCES,
)


@dataclass
class AnalysisConfig:
    """Umbrales que aplica el acumulador de métricas."""
    min_visibility: float = MIN_LANDMARK_VISIBILITY


@dataclass
class SamplingConfig:
    """Ritmo del bucle de muestreo."""
    min_sample_interval_ms: float = MIN_SAMPLE_INTERVAL_MS
    tick_hz: float = FRAME_TICK_HZ


@dataclass
class BackendConfig:
    """Fuentes candidatas y umbrales del detector de pose."""
    module_sources: List[str] = field(default_factory=lambda: list(VISION_MODULE_SOURCES))
    delegate_sources: List[str] = field(default_factory=lambda: list(COMPUTE_DELEGATE_SOURCES))
    model_local_path: Path = POSE_MODEL_LOCAL_PATH
    model_remote_url: str = POSE_MODEL_REMOTE_URL
    download_timeout_s: float = ASSET_DOWNLOAD_TIMEOUT_S
    num_poses: int = POSE_NUM_POSES
    min_pose_detection_confidence: float = MIN_POSE_DETECTION_CONFIDENCE
    min_pose_presence_confidence: float = MIN_POSE_PRESENCE_CONFIDENCE
    min_tracking_confidence: float = MIN_TRACKING_CONFIDENCE


@dataclass
class CatalogConfig:
    """Origen del catálogo de ejercicios (``None`` usa el YAML empaquetado)."""
    path: Optional[Path] = None


@dataclass
class Config:
    """Configuración de alto nivel consumida por el orquestador y la interfaz."""
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)

    def copy(self) -> "Config":
        """Devuelve una copia profunda del objeto de configuración."""
        return copy.deepcopy(self)

    # --- Serialisation helpers -------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        """Entrega la configuración como diccionario de Python."""
        return _dataclass_to_dict(self, convert_paths=False)

    def to_serializable_dict(self) -> Dict[str, Any]:
        """Genera una representación serializable en JSON/YAML."""
        return _dataclass_to_dict(self, convert_paths=True)


# --- Internal utilities -------------------------------------------------------

_PATH_FIELDS = {"model_local_path", "path"}


def _dataclass_to_dict(obj: Any, *, convert_paths: bool = False) -> Any:
    """Convierte recursivamente ``dataclasses`` (y anidados) en diccionarios."""
    if is_dataclass(obj):
        return {key: _dataclass_to_dict(value, convert_paths=convert_paths) for key, value in obj.__dict__.items()}
    if isinstance(obj, dict):
        return {key: _dataclass_to_dict(value, convert_paths=convert_paths) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_dataclass_to_dict(value, convert_paths=convert_paths) for value in obj]
    if isinstance(obj, Path):
        return str(obj) if convert_paths else obj
    return obj


def _update_dataclass(instance: Any, updates: Dict[str, Any]) -> Any:
    """Actualiza recursivamente ``instance`` respetando los límites de cada ``dataclass``."""
    for key, value in updates.items():
        if not hasattr(instance, key):
            continue
        current = getattr(instance, key)
        if is_dataclass(current) and isinstance(value, dict):
            _update_dataclass(current, value)
        elif key in _PATH_FIELDS and value is not None:
            setattr(instance, key, Path(value).expanduser())
        else:
            setattr(instance, key, value)
    return instance
