"""Constantes globales de la aplicación, extensiones y rutas de recursos."""
from pathlib import Path

# --- CONFIGURACIÓN GENERAL ---
APP_NAME = "Technique Analyzer"
VIDEO_EXTENSIONS = {".mp4", ".mov", ".avi", ".mkv", ".mpg", ".mpeg", ".wmv", ".webm", ".m4v"}

# --- RUTAS DE ARCHIVOS ---
# NOTA: usamos ``parents[3]`` porque este archivo vive en ``src/technique_analyzer/config/``.
PROJECT_ROOT = Path(__file__).resolve().parents[3]
PACKAGE_CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_CATALOG_PATH = PACKAGE_CONFIG_DIR / "exercise_catalog.yaml"
DEFAULT_MODELS_DIR = PROJECT_ROOT / "models"

# --- RECURSOS DEL DETECTOR ---
POSE_MODEL_FILENAME = "pose_landmarker_lite.task"
POSE_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/pose_landmarker/"
    "pose_landmarker_lite/float16/latest/pose_landmarker_lite.task"
)

# --- UMBRALES DEL DETECTOR ---
# Umbrales permisivos para no perder al sujeto en clips caseros con poca luz;
# el seguimiento se mantiene algo más estricto para evitar saltos entre sujetos.
MIN_POSE_DETECTION_CONFIDENCE = 0.4
MIN_POSE_PRESENCE_CONFIDENCE = 0.4
MIN_TRACKING_CONFIDENCE = 0.5
