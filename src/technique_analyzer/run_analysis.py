"""Command-line runner for the technique analyzer."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from technique_analyzer import config
from technique_analyzer.B_pose_estimation.backends import MediaPipeAssets, PoseBackendHandle
from technique_analyzer.C_analysis.accumulator import PoseAnalysis
from technique_analyzer.C_analysis.comparison import MetricVerdict
from technique_analyzer.C_analysis.orchestrator import AnalysisOrchestrator
from technique_analyzer.config.catalog import CatalogError, get_exercise, load_catalog
from technique_analyzer.config.settings import configure_environment
from technique_analyzer.core.errors import AnalysisError
from technique_analyzer.core.types import ExerciseProfile
from technique_analyzer.D_visualization.overlay_surface import OverlayCanvas
from technique_analyzer.ui.presentation import frames_label, score_label, verdict_table

LOGGER = logging.getLogger(__name__)
DEFAULT_EXERCISE = "bodyweight-squat"


@dataclass
class AnalysisOutcome:
    analysis: Optional[PoseAnalysis] = None
    verdicts: List[MetricVerdict] = field(default_factory=list)
    score: Optional[int] = None
    error: Optional[AnalysisError] = None


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:  # pragma: no cover
        raise argparse.ArgumentTypeError(f"{value!r} no es un número válido") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("El valor debe ser mayor que 0")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Analiza la técnica de un ejercicio en un vídeo y la compara con la referencia.",
    )
    parser.add_argument("--video", required=True, help="Ruta al archivo de vídeo a analizar")
    parser.add_argument(
        "--exercise",
        default=DEFAULT_EXERCISE,
        help=f"Identificador del ejercicio en el catálogo (por defecto {DEFAULT_EXERCISE}).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML opcional con valores que sobrescriben la configuración por defecto.",
    )
    parser.add_argument(
        "--catalog",
        default=None,
        help="Catálogo YAML alternativo. Si se omite se usa el catálogo empaquetado.",
    )
    parser.add_argument(
        "--min_interval_ms",
        type=_positive_float,
        default=None,
        help="Intervalo mínimo entre detecciones en milisegundos.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Muestra mensajes de log detallados durante la ejecución.",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")


async def run_analysis(
    video_path: Path,
    profile: ExerciseProfile,
    cfg: config.Config,
    *,
    orchestrator: Optional[AnalysisOrchestrator] = None,
) -> AnalysisOutcome:
    """Reproduce ``video_path`` completo y devuelve el análisis y sus veredictos."""

    if orchestrator is None:
        handle = PoseBackendHandle(MediaPipeAssets(cfg.backend))
        canvas = OverlayCanvas(min_visibility=cfg.analysis.min_visibility)
        orchestrator = AnalysisOrchestrator(handle, canvas, config=cfg)

    try:
        if orchestrator.load_video(video_path):
            orchestrator.select_exercise(profile)
            if await orchestrator.analyze():
                await orchestrator.wait_for_run()
        return AnalysisOutcome(
            analysis=orchestrator.analysis,
            verdicts=orchestrator.verdicts,
            score=orchestrator.score,
            error=orchestrator.error,
        )
    finally:
        orchestrator.close()


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    configure_environment()

    video_path = Path(args.video).expanduser()
    if not video_path.is_file():
        parser.error(f"No se encontró el vídeo: {video_path}")

    cfg = config.from_yaml(args.config) if args.config else config.load_default()
    if args.min_interval_ms is not None:
        cfg.sampling.min_sample_interval_ms = float(args.min_interval_ms)
    if args.catalog:
        cfg.catalog.path = Path(args.catalog).expanduser()

    try:
        profiles = load_catalog(cfg.catalog.path)
    except CatalogError as exc:
        LOGGER.error("Catálogo inválido: %s", exc)
        return 1

    profile = get_exercise(profiles, args.exercise)
    if profile is None:
        available = ", ".join(p.id for p in profiles)
        parser.error(f"Ejercicio desconocido: {args.exercise} (disponibles: {available})")

    outcome = asyncio.run(run_analysis(video_path, profile, cfg))

    if outcome.error is not None:
        print(f"ERROR: {outcome.error.user_message}", file=sys.stderr)
        return 1

    print(f"Ejercicio: {profile.name}")
    if outcome.analysis is None:
        print("No se detectó ninguna pose utilizable en el vídeo.")
        return 0

    print(frames_label(outcome.analysis))
    print(verdict_table(outcome.verdicts).to_string(index=False))
    print(score_label(outcome.score))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
