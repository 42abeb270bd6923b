"""Resolución de recursos con lista ordenada de fuentes candidatas.

Cada clase de recurso (módulo de ejecución, entorno de cómputo y pesos del
modelo) declara sus fuentes en orden fijo, local primero y remoto después. Las
fuentes se prueban de una en una; la primera que funciona gana y los fallos
intermedios solo se registran. Si todas fallan se lanza
:class:`AssetLoadError` construido a partir del último fallo.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Generic, Iterable, Optional, TypeVar

import httpx

from technique_analyzer.core.errors import AssetErrorKind, AssetLoadError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NOT_FOUND_PATTERN = re.compile(r"404|not found|failed to fetch|network", re.IGNORECASE)


@dataclass(frozen=True)
class AssetSource:
    """Fuente candidata de un recurso: ruta local, nombre de módulo o URL."""

    asset: str
    location: str
    remote: bool = False

    def __str__(self) -> str:
        origin = "remote" if self.remote else "local"
        return f"{self.asset} ({origin}: {self.location})"


@dataclass(frozen=True)
class AttemptOutcome(Generic[T]):
    """Resultado etiquetado de probar una fuente: valor o error, nunca ambos."""

    source: AssetSource
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: AssetSource, value: T) -> "AttemptOutcome[T]":
        return cls(source=source, value=value)

    @classmethod
    def failure(cls, source: AssetSource, error: BaseException) -> "AttemptOutcome[T]":
        return cls(source=source, error=error)


def classify_asset_error(error: Optional[BaseException]) -> AssetErrorKind:
    """Asigna una categoría de cara al usuario al error de una fuente."""

    if error is None:
        return AssetErrorKind.GENERIC
    if isinstance(error, AssetLoadError):
        return error.kind
    if isinstance(error, (httpx.ConnectError, httpx.ConnectTimeout)):
        return AssetErrorKind.OFFLINE
    if isinstance(error, httpx.HTTPStatusError):
        if error.response.status_code == 404:
            return AssetErrorKind.NOT_FOUND
        return AssetErrorKind.GENERIC
    if isinstance(error, (FileNotFoundError, ModuleNotFoundError)):
        return AssetErrorKind.NOT_FOUND
    if _NOT_FOUND_PATTERN.search(str(error)):
        return AssetErrorKind.NOT_FOUND
    return AssetErrorKind.GENERIC


async def try_source(
    source: AssetSource,
    attempt: Callable[[AssetSource], Awaitable[T]],
) -> AttemptOutcome[T]:
    """Ejecuta ``attempt`` sobre una fuente y etiqueta el resultado."""

    try:
        value = await attempt(source)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.warning("Failed to load %s: %s", source, exc)
        return AttemptOutcome.failure(source, exc)
    return AttemptOutcome.success(source, value)


async def resolve_first(
    asset: str,
    sources: Iterable[AssetSource],
    attempt: Callable[[AssetSource], Awaitable[T]],
) -> AttemptOutcome[T]:
    """Prueba ``sources`` en orden y devuelve el primer intento correcto.

    Los candidatos nunca se prueban en paralelo. Si ninguno funciona se lanza
    :class:`AssetLoadError` con la categoría del último fallo.
    """

    last: Optional[AttemptOutcome[T]] = None
    for source in sources:
        outcome = await try_source(source, attempt)
        if outcome.ok:
            logger.info("Resolved %s", source)
            return outcome
        last = outcome

    if last is None:
        raise AssetLoadError(asset, AssetErrorKind.GENERIC)
    raise AssetLoadError(asset, classify_asset_error(last.error), cause=last.error)


async def download_asset(
    url: str,
    destination: Path,
    *,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Path:
    """Descarga ``url`` en ``destination`` a través de un fichero ``.part`` temporal."""

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    partial = destination.with_name(destination.name + ".part")

    client_kwargs: dict[str, Any] = {"timeout": timeout, "follow_redirects": True}
    if transport is not None:
        client_kwargs["transport"] = transport

    try:
        async with httpx.AsyncClient(**client_kwargs) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                with partial.open("wb") as handle:
                    async for chunk in response.aiter_bytes():
                        handle.write(chunk)
        partial.replace(destination)
    except BaseException:
        partial.unlink(missing_ok=True)
        raise

    logger.info("Downloaded %s to %s", url, destination)
    return destination


__all__ = [
    "AssetSource",
    "AttemptOutcome",
    "classify_asset_error",
    "download_asset",
    "resolve_first",
    "try_source",
]
