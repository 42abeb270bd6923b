"""Orquestador asíncrono del muestreo de poses sobre un vídeo en reproducción.

Coordina cuatro colaboradores (detector, vídeo, superficie de dibujo y reloj)
mediante una máquina de estados explícita::

    IDLE -> INITIALIZING -> READY -> SAMPLING -> FINALIZING -> READY
    INITIALIZING -> FAILED          (reintento con ``retry``)
    cualquier estado -> IDLE        (``reset``)

Cada ejecución (:class:`SamplingRun`) posee su propio acumulador y su propio
token de cancelación. Una ejecución cancelada nunca vuelve a tocar el
acumulador ni publica resultados, y cada ejecución se finaliza como mucho una
vez, tanto si termina por el bucle como por la notificación de pausa/fin.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Union

from technique_analyzer.A_video.playback import OpenCvVideoPlayer, VideoSource
from technique_analyzer.A_video.validation import is_video_input, validate_video_input
from technique_analyzer.B_pose_estimation.backends.assets import classify_asset_error
from technique_analyzer.B_pose_estimation.backends.handle import PoseBackendHandle
from technique_analyzer.config.models import Config
from technique_analyzer.core.errors import (
    AnalysisError,
    AssetLoadError,
    InvalidInputError,
    NotReadyError,
    PlaybackStartError,
)
from technique_analyzer.core.types import ExerciseProfile
from technique_analyzer.D_visualization.overlay_surface import DrawingSurface

from .accumulator import MetricAccumulator, PoseAnalysis, finalize, publishable
from .comparison import MetricVerdict, compare_to_reference, technique_score
from .scheduling import AsyncioFrameClock, FrameClock, SampleThrottle

logger = logging.getLogger(__name__)

NO_VIDEO_MESSAGE = "Upload a training video before running the analyzer."
NO_EXERCISE_MESSAGE = "Select an exercise before running the analyzer."


class SamplerState(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    READY = "ready"
    SAMPLING = "sampling"
    FINALIZING = "finalizing"
    FAILED = "failed"


class CancellationToken:
    """Bandera de cancelación compartida entre el orquestador y una ejecución."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass(eq=False)
class SamplingRun:
    """Estado de una única pasada de análisis sobre el vídeo."""

    run_id: int
    accumulator: MetricAccumulator
    throttle: SampleThrottle
    token: CancellationToken = field(default_factory=CancellationToken)
    timestamp_base_ms: int = 0
    task: Optional[asyncio.Task] = None
    finished: bool = False
    analysis: Optional[PoseAnalysis] = None
    samples: int = 0


class AnalysisOrchestrator:
    """Conecta detector, vídeo y superficie de dibujo en un análisis por ejecución.

    Las operaciones públicas no lanzan los errores del dominio: devuelven
    ``False`` y dejan la excepción en :attr:`error` para que la interfaz la
    muestre con ``error.user_message``.
    """

    def __init__(
        self,
        backend: PoseBackendHandle,
        surface: DrawingSurface,
        *,
        clock: Optional[FrameClock] = None,
        config: Optional[Config] = None,
        on_analysis: Optional[Callable[[Optional[PoseAnalysis]], Any]] = None,
        video_factory: Optional[Callable[[os.PathLike], VideoSource]] = None,
    ) -> None:
        self.config = config or Config()
        self.backend = backend
        self.surface = surface
        self.clock: FrameClock = clock or AsyncioFrameClock(self.config.sampling.tick_hz)
        self.on_analysis = on_analysis
        self._video_factory = video_factory or OpenCvVideoPlayer

        self.state = SamplerState.IDLE
        self.error: Optional[AnalysisError] = None
        self.analysis: Optional[PoseAnalysis] = None
        self.video: Optional[VideoSource] = None
        self.video_name: Optional[str] = None
        self.exercise: Optional[ExerciseProfile] = None

        self._run: Optional[SamplingRun] = None
        self._run_counter = 0
        self._generation = 0

    # --- propiedades derivadas ------------------------------------------------
    @property
    def active_run(self) -> Optional[SamplingRun]:
        return self._run

    @property
    def verdicts(self) -> List[MetricVerdict]:
        return compare_to_reference(self.analysis, self.exercise)

    @property
    def score(self) -> Optional[int]:
        return technique_score(self.verdicts)

    # --- utilidades internas ------------------------------------------------
    def _set_state(self, state: SamplerState) -> None:
        if state is not self.state:
            logger.info("Sampler state %s -> %s", self.state.value, state.value)
        self.state = state

    def _fail(self, error: AnalysisError) -> bool:
        logger.warning("%s", error.user_message)
        self.error = error
        return False

    # --- ciclo de vida del detector -------------------------------------
    async def initialize(self, force_reload: bool = False) -> bool:
        """Carga el detector; ``True`` si queda listo para analizar."""

        if self.state in (SamplerState.INITIALIZING, SamplerState.SAMPLING, SamplerState.FINALIZING):
            logger.warning("initialize() ignored while %s", self.state.value)
            return False
        if self.backend.is_loaded and not force_reload:
            self._set_state(SamplerState.READY)
            return True

        generation = self._generation
        self.error = None
        self._set_state(SamplerState.INITIALIZING)
        try:
            await self.backend.load(force_reload=force_reload)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if generation != self._generation:
                return False
            if isinstance(exc, AssetLoadError):
                error = exc
            else:
                error = AssetLoadError("pose backend", classify_asset_error(exc), cause=exc)
            logger.error("Pose backend failed to load: %r", error)
            self.error = error
            self._set_state(SamplerState.FAILED)
            return False

        if generation != self._generation:
            # Un ``reset`` durante la carga gana: el estado sigue en IDLE.
            return False
        self._set_state(SamplerState.READY)
        return True

    async def retry(self) -> bool:
        """Reintento explícito tras un fallo de carga: recorre todas las fuentes de nuevo."""

        return await self.initialize(force_reload=True)

    # --- entrada del usuario ---------------------------------------------
    def _prepare_video(
        self,
        source: Union[str, os.PathLike, VideoSource],
        filename: Optional[str],
        content_type: Optional[str],
    ) -> VideoSource:
        if isinstance(source, (str, os.PathLike)):
            return self._video_factory(validate_video_input(source, content_type))
        if not isinstance(source, VideoSource):
            raise InvalidInputError()
        name = filename or getattr(source, "name", None)
        if (name or content_type) and not is_video_input(name, content_type):
            raise InvalidInputError()
        return source

    def load_video(
        self,
        source: Union[str, os.PathLike, VideoSource],
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> bool:
        """Sustituye el vídeo actual; una entrada inválida no modifica nada."""

        try:
            video = self._prepare_video(source, filename, content_type)
        except InvalidInputError as exc:
            return self._fail(exc)

        if self._run is not None and not self._run.finished:
            self._abandon_run()
        previous = self.video
        if previous is not None and previous is not video:
            self._release_video(previous)

        self.video = video
        self.video_name = filename or getattr(video, "name", None) or str(source)
        self.analysis = None
        self.error = None
        self.surface.clear()
        if self.state in (SamplerState.SAMPLING, SamplerState.FINALIZING):
            self._set_state(SamplerState.READY)
        logger.info("Loaded video %s", self.video_name)
        return True

    def select_exercise(self, profile: Optional[ExerciseProfile]) -> None:
        self.exercise = profile

    # --- ejecución del análisis ------------------------------------------
    def _new_run(self) -> SamplingRun:
        self._run_counter += 1
        return SamplingRun(
            run_id=self._run_counter,
            accumulator=MetricAccumulator(self.config.analysis.min_visibility),
            throttle=SampleThrottle(self.config.sampling.min_sample_interval_ms),
            timestamp_base_ms=self.backend.last_timestamp_ms + 1,
        )

    async def start(self) -> bool:
        """Rebobina, reproduce y lanza la tarea de muestreo de una ejecución nueva."""

        if self.video is None:
            return self._fail(InvalidInputError(NO_VIDEO_MESSAGE))
        if self.exercise is None:
            return self._fail(InvalidInputError(NO_EXERCISE_MESSAGE))
        if self.state is not SamplerState.READY or not self.backend.is_loaded:
            return self._fail(NotReadyError())

        video = self.video
        run = self._new_run()
        self._run = run
        self.error = None
        self.analysis = None
        self.surface.clear()
        self._set_state(SamplerState.SAMPLING)

        video.seek(0)
        try:
            await video.play()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if run.token.cancelled:
                return False
            logger.exception("Unable to start playback of %s", self.video_name)
            error = PlaybackStartError()
            error.__cause__ = exc
            self.error = error
            self._finish_run(run)
            return False

        if run.token.cancelled:
            return False
        run.task = asyncio.create_task(self._sample_loop(run), name=f"sampling-run-{run.run_id}")
        logger.info("Sampling run %d started on %s", run.run_id, self.video_name)
        return True

    async def analyze(self) -> bool:
        """Equivalente al botón "Analyze": carga el detector si hace falta y empieza."""

        if self.video is None:
            return self._fail(InvalidInputError(NO_VIDEO_MESSAGE))
        if self.state in (SamplerState.INITIALIZING, SamplerState.FINALIZING):
            return self._fail(NotReadyError())
        if self.state is SamplerState.SAMPLING:
            self._abandon_run()
            self._set_state(SamplerState.READY)
        if self.state is not SamplerState.READY or not self.backend.is_loaded:
            if not await self.initialize():
                return False
        return await self.start()

    async def _sample_loop(self, run: SamplingRun) -> None:
        try:
            while True:
                await self.clock.next_tick()
                if run.token.cancelled or run.finished:
                    return
                video = self.video
                if video is None or not video.is_playing:
                    self._finish_run(run)
                    return
                if not run.throttle.try_acquire(self.clock.now_ms()):
                    continue
                self._sample_frame(run, video)
        except asyncio.CancelledError:
            logger.debug("Sampling run %d cancelled", run.run_id)
            raise
        except Exception:
            logger.exception("Sampling run %d stopped unexpectedly", run.run_id)
            self._finish_run(run)

    def _next_timestamp(self, run: SamplingRun, video: VideoSource) -> int:
        return self.backend.next_timestamp(run.timestamp_base_ms + video.current_time_ms)

    def _sample_frame(self, run: SamplingRun, video: VideoSource) -> None:
        frame = video.current_frame()
        if frame is None:
            return
        timestamp = self._next_timestamp(run, video)
        try:
            result = self.backend.detect(frame, timestamp)
        except Exception:
            logger.exception("Pose detection failed at %d ms; skipping frame", timestamp)
            return

        run.samples += 1
        self.surface.clear()
        pose = result.first_pose
        if pose:
            self.surface.draw_pose(pose)
            run.accumulator.accumulate(pose)

    def handle_playback_stopped(self) -> Optional[PoseAnalysis]:
        """Notificación de pausa o fin del reproductor; finaliza la ejecución activa."""

        run = self._run
        if run is None:
            return self.analysis
        return self._finish_run(run)

    def _finish_run(self, run: SamplingRun) -> Optional[PoseAnalysis]:
        if run.token.cancelled or run.finished:
            return run.analysis
        run.finished = True
        self._set_state(SamplerState.FINALIZING)
        analysis = publishable(finalize(run.accumulator))
        run.analysis = analysis
        self.analysis = analysis
        self._set_state(SamplerState.READY)
        if analysis is None:
            logger.info("Run %d finished without usable frames (%d samples)", run.run_id, run.samples)
        else:
            logger.info("Run %d finished: %d valid frames", run.run_id, analysis.frame_count)
        if self.on_analysis is not None:
            self.on_analysis(analysis)
        return analysis

    async def wait_for_run(self) -> Optional[PoseAnalysis]:
        """Espera a la ejecución activa y devuelve lo que publicó (``None`` si se canceló)."""

        run = self._run
        if run is None:
            return None
        if run.task is not None and not run.task.done():
            await asyncio.wait({run.task})
        if run.token.cancelled:
            return None
        return run.analysis

    # --- cancelación y limpieza ----------------------------------------------
    def _abandon_run(self) -> None:
        run, self._run = self._run, None
        if run is None:
            return
        run.token.cancel()
        if run.task is not None and not run.task.done():
            run.task.cancel()
        if self.video is not None:
            self.video.pause()
        logger.info("Sampling run %d cancelled", run.run_id)

    @staticmethod
    def _release_video(video: VideoSource) -> None:
        video.pause()
        close = getattr(video, "close", None)
        if callable(close):
            close()

    def reset(self) -> None:
        """Vuelve a IDLE sin finalizar la ejecución en curso ni publicar nada."""

        self._generation += 1
        self._abandon_run()
        if self.video is not None:
            self.video.seek(0)
            self._release_video(self.video)
        self.video = None
        self.video_name = None
        self.analysis = None
        self.error = None
        self.surface.clear()
        self._set_state(SamplerState.IDLE)

    def close(self) -> None:
        self.reset()
        self.backend.close()


__all__ = [
    "AnalysisOrchestrator",
    "CancellationToken",
    "NO_EXERCISE_MESSAGE",
    "NO_VIDEO_MESSAGE",
    "SamplerState",
    "SamplingRun",
]
