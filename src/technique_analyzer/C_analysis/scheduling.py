"""Reloj de ticks y limitador de frecuencia para el bucle de muestreo."""

from __future__ import annotations

import asyncio
import time
from typing import Optional, Protocol, runtime_checkable

from technique_analyzer.config.settings import FRAME_TICK_HZ, MIN_SAMPLE_INTERVAL_MS

__all__ = ["AsyncioFrameClock", "FrameClock", "SampleThrottle"]


@runtime_checkable
class FrameClock(Protocol):
    """Fuente de ticks del bucle y de la marca de tiempo monotónica en ms."""

    async def next_tick(self) -> None: ...

    def now_ms(self) -> float: ...


class AsyncioFrameClock:
    """Ticks a frecuencia fija sobre ``asyncio.sleep``, similar a un refresco de pantalla."""

    def __init__(self, tick_hz: float = FRAME_TICK_HZ) -> None:
        if tick_hz <= 0:
            raise ValueError("tick_hz must be positive")
        self.tick_hz = float(tick_hz)
        self.interval_s = 1.0 / self.tick_hz

    async def next_tick(self) -> None:
        await asyncio.sleep(self.interval_s)

    def now_ms(self) -> float:
        return time.perf_counter() * 1000.0


class SampleThrottle:
    """Deja pasar como mucho una muestra cada ``min_interval_ms``.

    Los ticks que llegan dentro de la ventana se descartan; no se encolan.
    """

    def __init__(self, min_interval_ms: float = MIN_SAMPLE_INTERVAL_MS) -> None:
        self.min_interval_ms = max(0.0, float(min_interval_ms))
        self.last_sample_ms: Optional[float] = None

    def ready(self, now_ms: float) -> bool:
        if self.last_sample_ms is None:
            return True
        return now_ms - self.last_sample_ms >= self.min_interval_ms

    def mark(self, now_ms: float) -> None:
        self.last_sample_ms = float(now_ms)

    def try_acquire(self, now_ms: float) -> bool:
        """Registra la muestra y devuelve ``True`` si la ventana ya expiró."""

        if not self.ready(now_ms):
            return False
        self.mark(now_ms)
        return True

    def reset(self) -> None:
        self.last_sample_ms = None
