# tests/conftest.py
"""Utilidades de configuración comunes para la batería de pruebas."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import pytest

# Repo root = parent de 'tests'
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Asegura que los paquetes en src/ son importables sin instalar el proyecto
src_str = str(SRC)
if src_str not in sys.path:
    sys.path.insert(0, src_str)

from technique_analyzer.B_pose_estimation.constants import LANDMARK_COUNT  # noqa: E402
from technique_analyzer.B_pose_estimation.types import Landmark  # noqa: E402


def make_pose(
    points: Optional[Dict[int, Tuple[float, float]]] = None,
    *,
    visibility: Optional[float] = None,
    hidden: Iterable[int] = (),
) -> list[Landmark]:
    """Pose de 33 puntos; ``points`` sobrescribe coordenadas y ``hidden`` marca visibilidad 0."""

    hidden_set = set(hidden)
    pose = []
    for idx in range(LANDMARK_COUNT):
        x, y = (points or {}).get(idx, (0.5, 0.5))
        vis = 0.0 if idx in hidden_set else visibility
        pose.append(Landmark(x=x, y=y, z=0.0, visibility=vis))
    return pose


def standing_pose(**kwargs) -> list[Landmark]:
    """Sujeto de pie, de frente, con piernas rectas y tronco vertical."""

    return make_pose(
        {
            11: (0.45, 0.30),
            12: (0.55, 0.30),
            23: (0.45, 0.55),
            24: (0.55, 0.55),
            25: (0.45, 0.75),
            26: (0.55, 0.75),
            27: (0.45, 0.95),
            28: (0.55, 0.95),
        },
        **kwargs,
    )


def squat_bottom_pose(**kwargs) -> list[Landmark]:
    """Fondo de sentadilla de perfil: rodilla a 90° y cadera flexionada."""

    return make_pose(
        {
            11: (0.50, 0.40),
            12: (0.50, 0.40),
            23: (0.40, 0.60),
            24: (0.40, 0.60),
            25: (0.60, 0.60),
            26: (0.60, 0.60),
            27: (0.60, 0.80),
            28: (0.60, 0.80),
        },
        **kwargs,
    )


@pytest.fixture
def standing() -> list[Landmark]:
    return standing_pose()


@pytest.fixture
def squat_bottom() -> list[Landmark]:
    return squat_bottom_pose()
