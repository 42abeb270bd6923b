from __future__ import annotations

import asyncio

import numpy as np
import pytest

from conftest import squat_bottom_pose
from technique_analyzer import run_analysis as cli
from technique_analyzer.B_pose_estimation.backends.base import BackendAssets, PoseBackend
from technique_analyzer.B_pose_estimation.backends.handle import PoseBackendHandle
from technique_analyzer.B_pose_estimation.types import DetectionResult
from technique_analyzer.C_analysis.accumulator import PoseAnalysis
from technique_analyzer.C_analysis.comparison import compare_to_reference
from technique_analyzer.C_analysis.orchestrator import AnalysisOrchestrator
from technique_analyzer.config import Config
from technique_analyzer.config.catalog import get_exercise, load_catalog
from technique_analyzer.core.errors import AssetErrorKind, AssetLoadError
from technique_analyzer.D_visualization.overlay_surface import OverlayCanvas


class StepClock:
    def __init__(self) -> None:
        self.now = 0.0

    async def next_tick(self) -> None:
        await asyncio.sleep(0)
        self.now += 40.0

    def now_ms(self) -> float:
        return self.now


class ScriptedVideo:
    """Vídeo de 600 ms que avanza con ``StepClock``."""

    def __init__(self, clock: StepClock, path) -> None:
        self.clock = clock
        self.name = path.name
        self.start = None

    async def play(self) -> None:
        self.start = self.clock.now

    def pause(self) -> None:
        self.start = None

    def seek(self, time_ms: float) -> None:
        pass

    @property
    def is_playing(self) -> bool:
        return self.start is not None and self.clock.now - self.start < 600.0

    @property
    def current_time_ms(self) -> float:
        return 0.0 if self.start is None else self.clock.now - self.start

    def current_frame(self):
        return np.zeros((36, 64, 3), dtype=np.uint8)


class SquatBackend(PoseBackend):
    def detect(self, frame_bgr, timestamp_ms):
        return DetectionResult(landmarks=[squat_bottom_pose()])


class StaticAssets(BackendAssets):
    def __init__(self, error=None) -> None:
        self.error = error

    async def load_module(self):
        if self.error is not None:
            raise self.error
        return "vision"

    async def resolve_runtime(self, module):
        return "cpu"

    async def create_backend(self, module, runtime):
        return SquatBackend()


@pytest.fixture
def squat():
    return get_exercise(load_catalog(), "bodyweight-squat")


@pytest.fixture
def clip(tmp_path):
    path = tmp_path / "session.mp4"
    path.write_bytes(b"\x00")
    return path


def _orchestrator(assets: BackendAssets) -> AnalysisOrchestrator:
    clock = StepClock()
    return AnalysisOrchestrator(
        PoseBackendHandle(assets),
        OverlayCanvas(64, 36),
        clock=clock,
        video_factory=lambda path: ScriptedVideo(clock, path),
    )


@pytest.mark.asyncio
async def test_run_analysis_produces_verdicts(clip, squat) -> None:
    outcome = await cli.run_analysis(clip, squat, Config(), orchestrator=_orchestrator(StaticAssets()))

    assert outcome.error is None
    assert outcome.analysis is not None
    assert outcome.analysis.min_knee == pytest.approx(90.0)
    assert [v.metric.key for v in outcome.verdicts] == [m.key for m in squat.metrics]
    assert outcome.score is not None


@pytest.mark.asyncio
async def test_run_analysis_reports_asset_errors(clip, squat) -> None:
    failing = StaticAssets(AssetLoadError("vision module", AssetErrorKind.OFFLINE))
    outcome = await cli.run_analysis(clip, squat, Config(), orchestrator=_orchestrator(failing))

    assert isinstance(outcome.error, AssetLoadError)
    assert outcome.analysis is None


def test_main_prints_comparison(monkeypatch, capsys, clip, squat) -> None:
    analysis = PoseAnalysis(90.0, 170.0, 12.0, 0.01, 24)

    async def fake_run(video_path, profile, cfg, *, orchestrator=None):
        assert cfg.sampling.min_sample_interval_ms == 120.0
        verdicts = compare_to_reference(analysis, profile)
        return cli.AnalysisOutcome(analysis=analysis, verdicts=verdicts, score=100)

    monkeypatch.setattr(cli, "run_analysis", fake_run)
    code = cli.main(["--video", str(clip), "--min_interval_ms", "120"])

    out = capsys.readouterr().out
    assert code == 0
    assert "24 frames analyzed" in out
    assert "Technique score: 100% within target" in out
    assert "Bottom knee flexion" in out


def test_main_without_poses_exits_cleanly(monkeypatch, capsys, clip) -> None:
    async def fake_run(*args, **kwargs):
        return cli.AnalysisOutcome()

    monkeypatch.setattr(cli, "run_analysis", fake_run)
    assert cli.main(["--video", str(clip)]) == 0
    assert "No se detectó" in capsys.readouterr().out


def test_main_surfaces_errors(monkeypatch, capsys, clip) -> None:
    async def fake_run(*args, **kwargs):
        return cli.AnalysisOutcome(error=AssetLoadError("pose model", AssetErrorKind.NOT_FOUND))

    monkeypatch.setattr(cli, "run_analysis", fake_run)
    assert cli.main(["--video", str(clip)]) == 1
    assert capsys.readouterr().err.startswith("ERROR: We couldn't download")


def test_main_rejects_missing_video(tmp_path) -> None:
    with pytest.raises(SystemExit):
        cli.main(["--video", str(tmp_path / "ghost.mp4")])


def test_main_rejects_unknown_exercise(clip) -> None:
    with pytest.raises(SystemExit):
        cli.main(["--video", str(clip), "--exercise", "deadlift"])


def test_main_rejects_broken_catalog(clip, tmp_path) -> None:
    broken = tmp_path / "catalog.yaml"
    broken.write_text("exercises: 3\n", encoding="utf-8")
    assert cli.main(["--video", str(clip), "--catalog", str(broken)]) == 1
