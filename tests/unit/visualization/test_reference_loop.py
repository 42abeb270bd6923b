from __future__ import annotations

import pytest

from technique_analyzer.config import video_landmarks_visualization as vlv
from technique_analyzer.config.catalog import squat_reference_frame
from technique_analyzer.D_visualization.reference_skeleton import ReferenceLoop, render_reference_frame


@pytest.fixture
def frames():
    return [squat_reference_frame(depth) for depth in (0.0, 0.5, 1.0)]


def test_loop_advances_every_interval(frames) -> None:
    loop = ReferenceLoop(frames, interval_ms=350)
    assert len(loop) == 3
    assert [loop.index_at(t) for t in (0, 349, 350, 700, 1049, 1050)] == [0, 0, 1, 2, 2, 0]
    assert loop.frame_at(360) is frames[1]


def test_negative_elapsed_starts_at_first_frame(frames) -> None:
    assert ReferenceLoop(frames).index_at(-50) == 0


def test_empty_loop_returns_nothing() -> None:
    loop = ReferenceLoop([])
    assert loop.index_at(1000) is None
    assert loop.frame_at(1000) is None
    assert loop.render_at(1000) is None


def test_interval_must_be_positive(frames) -> None:
    with pytest.raises(ValueError):
        ReferenceLoop(frames, interval_ms=0)


def test_render_reference_frame_uses_reference_palette(frames) -> None:
    image = render_reference_frame(frames[0])

    assert image.shape == (270, 480, 3)
    assert tuple(image[0, 0]) == tuple(vlv.REFERENCE_BACKGROUND_COLOR)
    # Cadera izquierda en (0.46, 0.5) -> píxel (221, 135).
    assert tuple(image[135, 221]) == tuple(vlv.REFERENCE_LANDMARK_COLOR)


def test_render_at_matches_selected_frame(frames) -> None:
    loop = ReferenceLoop(frames, interval_ms=100)
    rendered = loop.render_at(150, width=96, height=54)
    assert rendered.shape == (54, 96, 3)
    assert (rendered == render_reference_frame(frames[1], 96, 54)).all()
