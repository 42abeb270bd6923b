"""Estilos de superposición para la visualización de marcadores corporales.
Define dataclasses que documentan cómo trazamos huesos y puntos para compartir un
lenguaje común entre la superposición en vivo y la animación de referencia."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from technique_analyzer.config import video_landmarks_visualization as vlv

# Exportamos explícitamente los elementos principales del módulo.
__all__ = ["OverlayStyle", "REFERENCE_STYLE"]


@dataclass(frozen=True)
class OverlayStyle:
    """Modelo sencillo con los parámetros visuales usados al dibujar la pose.
    Mantenerlos agrupados facilita probar estilos alternativos sin tocar lógica."""

    # Grosor de las líneas que unen los puntos esqueléticos.
    connection_thickness: int = vlv.THICKNESS_DEFAULT
    # Radio de los círculos que representan cada punto clave.
    landmark_radius: int = vlv.RADIUS_DEFAULT
    # Color BGR utilizado para las conexiones entre puntos.
    connection_bgr: Tuple[int, int, int] = tuple(vlv.CONNECTION_COLOR)
    # Color BGR utilizado para los puntos individuales.
    landmark_bgr: Tuple[int, int, int] = tuple(vlv.LANDMARK_COLOR)


REFERENCE_STYLE = OverlayStyle(
    connection_thickness=vlv.REFERENCE_THICKNESS,
    landmark_radius=vlv.REFERENCE_RADIUS,
    connection_bgr=tuple(vlv.REFERENCE_CONNECTION_COLOR),
    landmark_bgr=tuple(vlv.REFERENCE_LANDMARK_COLOR),
)
