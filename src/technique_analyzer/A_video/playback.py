"""Reproducción de vídeo con reloj de pared sobre ``cv2.VideoCapture``.

El analizador no recorre el vídeo fotograma a fotograma: lo "reproduce" en
tiempo real y muestrea el fotograma vigente en cada tick, igual que haría un
reproductor en pantalla.
"""

from __future__ import annotations

import logging
import math
import time
from pathlib import Path
from typing import Callable, Optional, Protocol, runtime_checkable

import cv2
import numpy as np

from technique_analyzer.core.errors import VideoOpenError

logger = logging.getLogger(__name__)

__all__ = ["OpenCvVideoPlayer", "VideoSource"]


@runtime_checkable
class VideoSource(Protocol):
    """Contrato mínimo de un reproductor que el orquestador sabe controlar."""

    async def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, time_ms: float) -> None: ...

    @property
    def is_playing(self) -> bool: ...

    @property
    def current_time_ms(self) -> float: ...

    def current_frame(self) -> Optional[np.ndarray]: ...


class OpenCvVideoPlayer:
    """Reproductor basado en OpenCV que avanza según el reloj de pared.

    La captura se abre de forma perezosa en :meth:`play`; si OpenCV no puede
    abrir o decodificar el archivo se lanza :class:`VideoOpenError`.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        playback_rate: float = 1.0,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.path = Path(path)
        self.name = self.path.name
        self.playback_rate = float(playback_rate)
        self._clock = clock
        self._capture = None
        self.fps = 0.0
        self.frame_count = 0
        self.duration_ms = 0.0
        self._playing = False
        self._position_ms = 0.0
        self._anchor_wall: Optional[float] = None
        self._frame_index = -1
        self._frame: Optional[np.ndarray] = None

    # --- apertura -----------------------------------------------------------
    def _open(self) -> None:
        if self._capture is not None:
            return
        capture = cv2.VideoCapture(str(self.path))
        if not capture.isOpened():
            capture.release()
            raise VideoOpenError(f"Could not open the video: {self.path}")

        # FPS declarados por el contenedor; sin ellos no podemos situar el tiempo.
        fps = float(capture.get(cv2.CAP_PROP_FPS) or 0.0)
        if not math.isfinite(fps) or fps <= 0:
            capture.release()
            raise VideoOpenError(f"Invalid FPS obtained: {fps}")

        self._capture = capture
        self.fps = fps
        self.frame_count = int(capture.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        self.duration_ms = self.frame_count / fps * 1000.0 if self.frame_count > 0 else 0.0
        logger.info(
            "Opened %s (fps=%.2f, frames=%d, duration=%.0f ms)",
            self.path, self.fps, self.frame_count, self.duration_ms,
        )

    # --- control de reproducción -----------------------------------------
    async def play(self) -> None:
        self._open()
        if self.duration_ms and self._position_ms >= self.duration_ms:
            self._position_ms = 0.0
        self._anchor_wall = self._clock()
        self._playing = True

    def pause(self) -> None:
        if self._playing:
            self._position_ms = self._elapsed_position()
        self._playing = False
        self._anchor_wall = None

    def seek(self, time_ms: float) -> None:
        self._position_ms = max(0.0, float(time_ms))
        if self._playing:
            self._anchor_wall = self._clock()

    def close(self) -> None:
        self.pause()
        capture, self._capture = self._capture, None
        if capture is not None:
            capture.release()
        self._frame = None
        self._frame_index = -1

    def _elapsed_position(self) -> float:
        if not self._playing or self._anchor_wall is None:
            return self._position_ms
        elapsed = (self._clock() - self._anchor_wall) * 1000.0 * self.playback_rate
        return self._position_ms + elapsed

    def _mark_ended(self) -> None:
        self._position_ms = self.duration_ms
        self._playing = False
        self._anchor_wall = None
        logger.debug("Playback of %s reached the end", self.path)

    @property
    def is_playing(self) -> bool:
        if self._playing and self.duration_ms and self._elapsed_position() >= self.duration_ms:
            self._mark_ended()
        return self._playing

    @property
    def current_time_ms(self) -> float:
        position = self._elapsed_position()
        if self.duration_ms:
            position = min(position, self.duration_ms)
        return position

    # --- lectura de fotogramas ---------------------------------------------
    def current_frame(self) -> Optional[np.ndarray]:
        """Fotograma correspondiente al tiempo de reproducción actual."""

        if self._capture is None:
            return None
        target = int(self.current_time_ms / 1000.0 * self.fps)
        if self.frame_count:
            target = min(target, self.frame_count - 1)
        if target == self._frame_index and self._frame is not None:
            return self._frame

        if target != self._frame_index + 1:
            # Saltos hacia atrás o de más de un fotograma requieren reposicionar.
            self._capture.set(cv2.CAP_PROP_POS_FRAMES, target)
        ok, frame = self._capture.read()
        if not ok or frame is None:
            self._mark_ended()
            return None
        self._frame_index = target
        self._frame = frame
        return frame
