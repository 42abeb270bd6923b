"""Parámetros de visualización: conexiones del esqueleto y colores asociados."""

# --- CONFIGURACIÓN DE VISUALIZACIÓN ---
# Conexiones del detector completo (33 puntos) para la superposición en vivo.
POSE_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 7), (0, 4), (4, 5), (5, 6), (6, 8), (9, 10),
    (11, 12), (11, 13), (13, 15), (15, 17), (15, 19), (15, 21), (12, 14),
    (14, 16), (16, 18), (16, 20), (16, 22), (11, 23), (12, 24), (23, 24),
    (23, 25), (25, 27), (27, 29), (27, 31), (24, 26), (26, 28), (28, 30),
    (28, 32), (29, 31), (30, 32)
]
LANDMARK_COLOR = (246, 130, 59)  # Azul
CONNECTION_COLOR = (229, 70, 79)  # Índigo

THICKNESS_DEFAULT = 3
RADIUS_DEFAULT = 4

# --- ANIMACIÓN DE REFERENCIA ---
# Subconjunto simplificado que se dibuja sobre las poses sintéticas.
REFERENCE_CONNECTIONS = [
    (11, 12), (11, 23), (12, 24), (23, 24), (23, 25), (25, 27), (24, 26),
    (26, 28), (11, 13), (13, 15), (12, 14), (14, 16), (15, 21), (16, 22),
]
REFERENCE_BACKGROUND_COLOR = (252, 250, 248)
REFERENCE_CONNECTION_COLOR = (175, 64, 30)  # Azul oscuro
REFERENCE_LANDMARK_COLOR = (246, 130, 59)
REFERENCE_THICKNESS = 4
REFERENCE_RADIUS = 5

__all__ = [
    "POSE_CONNECTIONS",
    "LANDMARK_COLOR",
    "CONNECTION_COLOR",
    "THICKNESS_DEFAULT",
    "RADIUS_DEFAULT",
    "REFERENCE_CONNECTIONS",
    "REFERENCE_BACKGROUND_COLOR",
    "REFERENCE_CONNECTION_COLOR",
    "REFERENCE_LANDMARK_COLOR",
    "REFERENCE_THICKNESS",
    "REFERENCE_RADIUS",
]
