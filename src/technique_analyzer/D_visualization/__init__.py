"""Paquete de utilidades para visualización de marcadores.
Reexporta la superposición en vivo y la animación de referencia."""

from .landmark_drawing import draw_pose_on_frame
from .landmark_overlay_styles import REFERENCE_STYLE, OverlayStyle
from .overlay_surface import DrawingSurface, OverlayCanvas
from .reference_skeleton import REFERENCE_CONNECTIONS, ReferenceLoop, render_reference_frame

__all__ = [
    "DrawingSurface",
    "OverlayCanvas",
    "OverlayStyle",
    "REFERENCE_CONNECTIONS",
    "REFERENCE_STYLE",
    "ReferenceLoop",
    "draw_pose_on_frame",
    "render_reference_frame",
]
