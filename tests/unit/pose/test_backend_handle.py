from __future__ import annotations

import numpy as np
import pytest

from technique_analyzer.B_pose_estimation.backends.base import BackendAssets, PoseBackend
from technique_analyzer.B_pose_estimation.backends.handle import PoseBackendHandle
from technique_analyzer.B_pose_estimation.types import DetectionResult
from technique_analyzer.core.errors import AssetErrorKind, AssetLoadError, NotReadyError


class RecordingBackend(PoseBackend):
    def __init__(self, label: str) -> None:
        self.label = label
        self.closed = False

    def detect(self, frame_bgr, timestamp_ms):
        return DetectionResult()

    def close(self) -> None:
        self.closed = True


class CountingAssets(BackendAssets):
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.module_error = None
        self.created: list[RecordingBackend] = []

    async def load_module(self):
        self.calls.append("module")
        if self.module_error is not None:
            raise self.module_error
        return "vision"

    async def resolve_runtime(self, module):
        self.calls.append("runtime")
        return "cpu"

    async def create_backend(self, module, runtime):
        self.calls.append("backend")
        backend = RecordingBackend(f"{module}/{runtime}/{len(self.created)}")
        self.created.append(backend)
        return backend


@pytest.fixture
def assets() -> CountingAssets:
    return CountingAssets()


def test_detect_before_load_raises(assets) -> None:
    handle = PoseBackendHandle(assets)
    assert not handle.is_loaded
    with pytest.raises(NotReadyError):
        handle.detect(np.zeros((2, 2, 3), dtype=np.uint8), 0)


@pytest.mark.asyncio
async def test_load_is_lazy_and_cached(assets) -> None:
    handle = PoseBackendHandle(assets)
    first = await handle.load()
    second = await handle.load()

    assert first is second is handle.backend
    assert assets.calls == ["module", "runtime", "backend"]


@pytest.mark.asyncio
async def test_force_reload_closes_previous_instance(assets) -> None:
    handle = PoseBackendHandle(assets)
    first = await handle.load()
    second = await handle.load(force_reload=True)

    assert first.closed and not second.closed
    assert second is not first
    assert assets.calls.count("module") == 2


@pytest.mark.asyncio
async def test_close_keeps_cached_module(assets) -> None:
    handle = PoseBackendHandle(assets)
    first = await handle.load()
    handle.close()

    assert first.closed and not handle.is_loaded
    await handle.load()
    assert assets.calls.count("module") == 1
    assert assets.calls.count("backend") == 2


@pytest.mark.asyncio
async def test_load_failure_propagates_and_retry_recovers(assets) -> None:
    handle = PoseBackendHandle(assets)
    assets.module_error = AssetLoadError("vision module", AssetErrorKind.NOT_FOUND)

    with pytest.raises(AssetLoadError):
        await handle.load()
    assert not handle.is_loaded

    assets.module_error = None
    backend = await handle.load(force_reload=True)
    assert handle.is_loaded and backend is handle.backend


@pytest.mark.asyncio
async def test_timestamps_stay_monotonic_per_detector(assets) -> None:
    handle = PoseBackendHandle(assets)
    frame = np.zeros((2, 2, 3), dtype=np.uint8)
    await handle.load()
    assert handle.last_timestamp_ms == -1

    handle.detect(frame, 40)
    handle.detect(frame, 10)
    assert handle.last_timestamp_ms == 41
    assert handle.next_timestamp(0) == 42

    await handle.load()
    assert handle.last_timestamp_ms == 41

    handle.close()
    await handle.load()
    assert handle.last_timestamp_ms == -1
