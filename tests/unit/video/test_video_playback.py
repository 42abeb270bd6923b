"""Reproductor OpenCV con una captura sustituta y un reloj manual."""

from __future__ import annotations

import cv2
import numpy as np
import pytest

from technique_analyzer.A_video import playback
from technique_analyzer.A_video.playback import OpenCvVideoPlayer, VideoSource
from technique_analyzer.core.errors import VideoOpenError


class FakeCapture:
    def __init__(self, fps: float = 10.0, frames: int = 20, opened: bool = True) -> None:
        self.fps = fps
        self.frames = frames
        self.opened = opened
        self.position = 0
        self.reads: list[int] = []
        self.seeks: list[int] = []
        self.released = False

    def isOpened(self) -> bool:
        return self.opened

    def get(self, prop):
        if prop == cv2.CAP_PROP_FPS:
            return self.fps
        if prop == cv2.CAP_PROP_FRAME_COUNT:
            return self.frames
        return 0

    def set(self, prop, value) -> bool:
        if prop == cv2.CAP_PROP_POS_FRAMES:
            self.position = int(value)
            self.seeks.append(int(value))
        return True

    def read(self):
        if self.position >= self.frames:
            return False, None
        frame = np.full((2, 2, 3), self.position, dtype=np.uint8)
        self.reads.append(self.position)
        self.position += 1
        return True, frame

    def release(self) -> None:
        self.released = True


class ManualWallClock:
    def __init__(self) -> None:
        self.seconds = 0.0

    def __call__(self) -> float:
        return self.seconds


@pytest.fixture
def capture(monkeypatch) -> FakeCapture:
    fake = FakeCapture()
    monkeypatch.setattr(playback.cv2, "VideoCapture", lambda path: fake)
    return fake


@pytest.fixture
def wall() -> ManualWallClock:
    return ManualWallClock()


@pytest.mark.asyncio
async def test_player_follows_the_wall_clock(capture, wall) -> None:
    player = OpenCvVideoPlayer("session.mp4", clock=wall)
    assert isinstance(player, VideoSource)

    await player.play()
    assert player.is_playing
    assert player.duration_ms == pytest.approx(2000.0)

    wall.seconds = 0.5
    assert player.current_time_ms == pytest.approx(500.0)
    assert player.current_frame()[0, 0, 0] == 5

    player.pause()
    wall.seconds = 1.0
    assert not player.is_playing
    assert player.current_time_ms == pytest.approx(500.0)


@pytest.mark.asyncio
async def test_sequential_frames_do_not_seek(capture, wall) -> None:
    player = OpenCvVideoPlayer("session.mp4", clock=wall)
    await player.play()

    for step in range(3):
        wall.seconds = step * 0.1
        player.current_frame()

    assert capture.reads == [0, 1, 2]
    assert capture.seeks == []
    # Repetir el mismo instante reutiliza el fotograma ya decodificado.
    player.current_frame()
    assert capture.reads == [0, 1, 2]


@pytest.mark.asyncio
async def test_seek_repositions_the_capture(capture, wall) -> None:
    player = OpenCvVideoPlayer("session.mp4", clock=wall)
    await player.play()
    player.seek(1200)

    assert player.current_frame()[0, 0, 0] == 12
    assert capture.seeks == [12]


@pytest.mark.asyncio
async def test_reaching_the_end_stops_playback(capture, wall) -> None:
    player = OpenCvVideoPlayer("session.mp4", clock=wall)
    await player.play()

    wall.seconds = 5.0
    assert not player.is_playing
    assert player.current_time_ms == pytest.approx(2000.0)

    # Una nueva reproducción tras el final empieza desde el principio.
    await player.play()
    assert player.current_time_ms == pytest.approx(0.0)


@pytest.mark.asyncio
async def test_failed_read_marks_the_end(capture, wall) -> None:
    capture.frames = 3
    capture.get = lambda prop: 10.0 if prop == cv2.CAP_PROP_FPS else 0
    player = OpenCvVideoPlayer("session.mp4", clock=wall)
    await player.play()

    wall.seconds = 1.0
    assert player.current_frame() is None
    assert not player.is_playing


@pytest.mark.asyncio
async def test_unopenable_video_raises(monkeypatch) -> None:
    closed = FakeCapture(opened=False)
    monkeypatch.setattr(playback.cv2, "VideoCapture", lambda path: closed)
    with pytest.raises(VideoOpenError):
        await OpenCvVideoPlayer("broken.mp4").play()
    assert closed.released


@pytest.mark.asyncio
async def test_invalid_fps_raises(monkeypatch) -> None:
    zero_fps = FakeCapture(fps=0.0)
    monkeypatch.setattr(playback.cv2, "VideoCapture", lambda path: zero_fps)
    with pytest.raises(VideoOpenError, match="Invalid FPS"):
        await OpenCvVideoPlayer("broken.mp4").play()


@pytest.mark.asyncio
async def test_close_releases_the_capture(capture, wall) -> None:
    player = OpenCvVideoPlayer("session.mp4", clock=wall)
    await player.play()
    player.close()
    assert capture.released
    assert player.current_frame() is None
