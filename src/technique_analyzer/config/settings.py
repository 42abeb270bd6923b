"""Parámetros por defecto y utilidades de configuración del analizador."""

from __future__ import annotations

import os

from .constants import (
    DEFAULT_MODELS_DIR,
    MIN_POSE_DETECTION_CONFIDENCE,
    MIN_POSE_PRESENCE_CONFIDENCE,
    MIN_TRACKING_CONFIDENCE,
    POSE_MODEL_FILENAME,
    POSE_MODEL_URL,
)


def configure_environment() -> None:
    """Silencia los logs nativos de TensorFlow/MediaPipe antes de crear el detector."""

    os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")
    os.environ.setdefault("GLOG_minloglevel", "2")

    try:
        from absl import logging as absl_logging  # type: ignore[import-not-found]
    except ImportError:
        return
    # Forzamos a ``absl`` a emitir solo errores para no saturar la consola.
    absl_logging.set_verbosity(absl_logging.ERROR)


# --- PARÁMETROS DEL ANÁLISIS ---
# Visibilidad mínima para que un landmark participe en una métrica. Por debajo
# de este valor la métrica se omite en ese fotograma (no se cuenta como 0).
MIN_LANDMARK_VISIBILITY = 0.3

# --- PARÁMETROS DEL MUESTREO ---
# Intervalo mínimo entre dos detecciones. Los fotogramas que llegan dentro de
# la ventana se descartan; el siguiente tick válido muestrea el fotograma
# vigente en ese momento.
MIN_SAMPLE_INTERVAL_MS = 80.0

# Frecuencia del reloj de ticks del bucle de muestreo (un tick por refresco).
FRAME_TICK_HZ = 60.0

# --- RECURSOS DEL DETECTOR ---
# Orden fijo "local primero, remoto después" para cada clase de recurso.
VISION_MODULE_SOURCES = ("mediapipe.tasks.python.vision", "mediapipe.tasks.vision")
COMPUTE_DELEGATE_SOURCES = ("cpu",)
POSE_MODEL_LOCAL_PATH = DEFAULT_MODELS_DIR / POSE_MODEL_FILENAME
POSE_MODEL_REMOTE_URL = POSE_MODEL_URL

# Tiempo máximo de descarga del modelo remoto; las llamadas a ``detect`` no
# tienen límite de tiempo.
ASSET_DOWNLOAD_TIMEOUT_S = 30.0

# Seguimiento de un único sujeto.
POSE_NUM_POSES = 1

# --- REFERENCIA VISUAL ---
REFERENCE_CANVAS_WIDTH = 480
REFERENCE_CANVAS_HEIGHT = 270
REFERENCE_FRAME_INTERVAL_MS = 350.0


def build_landmarker_kwargs(
    *,
    num_poses: int | None = None,
    min_pose_detection_confidence: float | None = None,
    min_pose_presence_confidence: float | None = None,
    min_tracking_confidence: float | None = None,
) -> dict[str, object]:
    """Opciones estándar de ``PoseLandmarkerOptions`` (sin ``base_options`` ni modo)."""

    return {
        "num_poses": POSE_NUM_POSES if num_poses is None else int(num_poses),
        "min_pose_detection_confidence": (
            MIN_POSE_DETECTION_CONFIDENCE
            if min_pose_detection_confidence is None
            else float(min_pose_detection_confidence)
        ),
        "min_pose_presence_confidence": (
            MIN_POSE_PRESENCE_CONFIDENCE
            if min_pose_presence_confidence is None
            else float(min_pose_presence_confidence)
        ),
        "min_tracking_confidence": (
            MIN_TRACKING_CONFIDENCE if min_tracking_confidence is None else float(min_tracking_confidence)
        ),
    }
