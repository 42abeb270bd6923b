"""Carga del catálogo de ejercicios y generación de poses de referencia.

El catálogo vive en YAML (``exercise_catalog.yaml`` empaquetado junto a este
módulo) y se transforma en :class:`ExerciseProfile` inmutables. Cada perfil
declara sus ventanas por métrica y, opcionalmente, unas poses sintéticas que la
interfaz reproduce en bucle como guía visual.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import yaml

from technique_analyzer.B_pose_estimation.constants import LANDMARK_COUNT
from technique_analyzer.B_pose_estimation.types import Landmark, Pose
from technique_analyzer.core.types import (
    ExerciseProfile,
    MetricRange,
    as_metric_key,
    as_unit,
)

from .constants import DEFAULT_CATALOG_PATH

logger = logging.getLogger(__name__)

SQUAT_REFERENCE_DEPTHS = (0.0, 0.25, 0.5, 0.75, 1.0)


class CatalogError(ValueError):
    """El catálogo no existe o alguna de sus entradas es inválida."""


def _empty_pose() -> Pose:
    return [Landmark(x=0.5, y=0.5, z=0.0) for _ in range(LANDMARK_COUNT)]


def squat_reference_frame(depth: float) -> Pose:
    """Pose frontal sintética de una sentadilla a la profundidad ``depth`` (0 = de pie, 1 = abajo).

    Solo se rellenan cabeza, brazos, caderas, rodillas y tobillos; el resto de
    puntos queda en el centro del lienzo.
    """

    d = float(depth)
    frame = _empty_pose()

    head_y = 0.18 + d * 0.04
    shoulder_y = 0.3 + d * 0.05
    hip_y = 0.5 + d * 0.12
    knee_y = 0.68 + d * 0.15
    ankle_y = 0.9

    hip_shift = d * 0.03
    knee_shift = d * 0.04
    torso_forward = d * 0.015

    for offset_idx in range(4):
        frame[offset_idx] = Landmark(x=0.5, y=head_y + 0.02 * offset_idx)

    frame[11] = Landmark(x=0.46 + torso_forward, y=shoulder_y)
    frame[12] = Landmark(x=0.54 + torso_forward, y=shoulder_y)

    frame[13] = Landmark(x=0.42 + torso_forward * 1.3, y=shoulder_y + 0.07)
    frame[14] = Landmark(x=0.58 + torso_forward * 1.3, y=shoulder_y + 0.07)
    frame[15] = Landmark(x=0.4 + torso_forward * 1.6, y=shoulder_y + 0.12)
    frame[16] = Landmark(x=0.6 + torso_forward * 1.6, y=shoulder_y + 0.12)

    frame[23] = Landmark(x=0.46 - hip_shift, y=hip_y)
    frame[24] = Landmark(x=0.54 + hip_shift, y=hip_y)

    frame[25] = Landmark(x=0.46 + knee_shift, y=knee_y)
    frame[26] = Landmark(x=0.54 - knee_shift, y=knee_y)

    frame[27] = Landmark(x=0.45, y=ankle_y)
    frame[28] = Landmark(x=0.55, y=ankle_y)

    frame[19] = Landmark(x=0.44, y=shoulder_y + 0.04)
    frame[20] = Landmark(x=0.56, y=shoulder_y + 0.04)
    return frame


REFERENCE_GENERATORS: Dict[str, Callable[[float], Pose]] = {
    "squat": squat_reference_frame,
}


def _require(entry: Mapping[str, Any], key: str, context: str) -> Any:
    if key not in entry or entry[key] is None:
        raise CatalogError(f"{context}: missing required field '{key}'")
    return entry[key]


def _parse_metric(entry: Mapping[str, Any], context: str) -> MetricRange:
    if not isinstance(entry, Mapping):
        raise CatalogError(f"{context}: metric entries must be mappings")
    try:
        key = as_metric_key(_require(entry, "key", context))
        unit = as_unit(entry.get("unit", "degrees"))
        low = float(_require(entry, "min", context))
        high = float(_require(entry, "max", context))
    except (TypeError, ValueError) as exc:
        if isinstance(exc, CatalogError):
            raise
        raise CatalogError(f"{context}: {exc}") from exc
    if low > high:
        raise CatalogError(f"{context}: min ({low}) is greater than max ({high})")
    return MetricRange(
        key=key,
        label=str(entry.get("label") or key.value),
        description=str(entry.get("description") or ""),
        unit=unit,
        min=low,
        max=high,
    )


def _parse_reference_frames(raw: Any, context: str) -> List[Pose]:
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        name = str(_require(raw, "generator", context)).strip().lower()
        generator = REFERENCE_GENERATORS.get(name)
        if generator is None:
            raise CatalogError(f"{context}: unknown reference generator '{name}'")
        depths = raw.get("depths", SQUAT_REFERENCE_DEPTHS)
        try:
            return [generator(float(depth)) for depth in depths]
        except (TypeError, ValueError) as exc:
            raise CatalogError(f"{context}: invalid generator depths ({exc})") from exc
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        frames: List[Pose] = []
        for frame_idx, frame in enumerate(raw):
            try:
                frames.append([Landmark.from_mapping(point) for point in frame])
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                raise CatalogError(f"{context}: invalid landmark in frame {frame_idx} ({exc})") from exc
        return frames
    raise CatalogError(f"{context}: reference_frames must be a list of poses or a generator mapping")


def _parse_exercise(entry: Mapping[str, Any], index: int) -> ExerciseProfile:
    if not isinstance(entry, Mapping):
        raise CatalogError(f"exercise #{index}: entries must be mappings")
    exercise_id = str(_require(entry, "id", f"exercise #{index}"))
    context = f"exercise '{exercise_id}'"
    metrics_raw = entry.get("metrics") or []
    metrics = tuple(
        _parse_metric(metric, f"{context} metric #{metric_idx}")
        for metric_idx, metric in enumerate(metrics_raw)
    )
    return ExerciseProfile(
        id=exercise_id,
        name=str(entry.get("name") or exercise_id),
        description=str(entry.get("description") or ""),
        cues=tuple(str(cue) for cue in entry.get("cues") or ()),
        metrics=metrics,
        reference_frames=_parse_reference_frames(entry.get("reference_frames"), context),
    )


def parse_catalog(data: Any) -> List[ExerciseProfile]:
    """Construye los perfiles a partir del contenido ya deserializado del YAML."""

    if isinstance(data, Mapping):
        entries = data.get("exercises")
    else:
        entries = data
    if not isinstance(entries, list):
        raise CatalogError("catalog must define a list under 'exercises'")

    profiles = [_parse_exercise(entry, index) for index, entry in enumerate(entries)]
    seen: set[str] = set()
    for profile in profiles:
        if profile.id in seen:
            raise CatalogError(f"duplicate exercise id '{profile.id}'")
        seen.add(profile.id)
    return profiles


def load_catalog(path: Optional[str | Path] = None) -> List[ExerciseProfile]:
    """Lee el catálogo YAML (el empaquetado si ``path`` es ``None``)."""

    catalog_path = Path(path).expanduser() if path is not None else DEFAULT_CATALOG_PATH
    try:
        text = catalog_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"could not read catalog {catalog_path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CatalogError(f"catalog {catalog_path} is not valid YAML: {exc}") from exc

    profiles = parse_catalog(data)
    logger.info("Loaded %d exercise profile(s) from %s", len(profiles), catalog_path)
    return profiles


def get_exercise(profiles: Iterable[ExerciseProfile], exercise_id: str) -> Optional[ExerciseProfile]:
    """Busca un perfil por ``id``; devuelve ``None`` si no existe."""

    for profile in profiles:
        if profile.id == exercise_id:
            return profile
    return None


__all__ = [
    "CatalogError",
    "REFERENCE_GENERATORS",
    "SQUAT_REFERENCE_DEPTHS",
    "get_exercise",
    "load_catalog",
    "parse_catalog",
    "squat_reference_frame",
]
