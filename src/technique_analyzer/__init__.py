"""Analizador de técnica de ejercicios a partir de vídeo y poses de Mediapipe."""

__version__ = "0.1.0"

__all__ = ["__version__"]
