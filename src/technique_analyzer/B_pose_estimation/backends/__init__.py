"""*Backends* de detección de pose y su ciclo de vida (carga, recarga y cierre)."""

from .assets import AssetSource, AttemptOutcome, classify_asset_error, download_asset, resolve_first
from .base import BackendAssets, PoseBackend
from .handle import PoseBackendHandle
from .mediapipe_backend import MediaPipeAssets, MediaPipePoseBackend

__all__ = [
    "AssetSource",
    "AttemptOutcome",
    "BackendAssets",
    "MediaPipeAssets",
    "MediaPipePoseBackend",
    "PoseBackend",
    "PoseBackendHandle",
    "classify_asset_error",
    "download_asset",
    "resolve_first",
]
