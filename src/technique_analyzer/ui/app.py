"""Interfaz Streamlit del analizador de técnica.

Lanzar con ``streamlit run src/technique_analyzer/ui/app.py``.
"""

from __future__ import annotations

import asyncio
import sys
import tempfile
import time
from pathlib import Path
from typing import Optional

import streamlit as st

# Garantizar que ``src`` esté en ``sys.path`` cuando Streamlit ejecute la app
SRC_ROOT = Path(__file__).resolve().parents[2]
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from technique_analyzer.B_pose_estimation.backends import MediaPipeAssets, PoseBackendHandle
from technique_analyzer.C_analysis.orchestrator import AnalysisOrchestrator
from technique_analyzer.config import APP_NAME, VIDEO_EXTENSIONS, load_default
from technique_analyzer.config.catalog import load_catalog
from technique_analyzer.config.settings import REFERENCE_FRAME_INTERVAL_MS, configure_environment
from technique_analyzer.core.errors import AssetLoadError
from technique_analyzer.core.types import ExerciseProfile
from technique_analyzer.D_visualization.overlay_surface import OverlayCanvas
from technique_analyzer.D_visualization.reference_skeleton import ReferenceLoop
from technique_analyzer.run_analysis import AnalysisOutcome
from technique_analyzer.ui.presentation import (
    EMPTY_COMPARISON_MESSAGE,
    frames_label,
    score_label,
    verdict_table,
)

configure_environment()
st.set_page_config(layout="wide", page_title=APP_NAME)

UPLOAD_TYPES = sorted(ext.lstrip(".") for ext in VIDEO_EXTENSIONS)
PREVIEW_REFRESH_S = 0.25


@st.cache_resource(show_spinner=False)
def _catalog() -> list[ExerciseProfile]:
    return load_catalog(load_default().catalog.path)


@st.cache_resource(show_spinner=False)
def _backend_handle() -> PoseBackendHandle:
    """Detector compartido entre análisis; solo «Retry loading model» lo recarga."""

    return PoseBackendHandle(MediaPipeAssets(load_default().backend))


def _reset_session() -> None:
    """Olvida el vídeo subido y el último análisis."""

    video_path = st.session_state.get("video_path")
    if video_path:
        Path(video_path).unlink(missing_ok=True)
    for key in ("video_path", "video_name", "outcome"):
        st.session_state.pop(key, None)


def _store_upload(upload) -> Optional[str]:
    if upload.name == st.session_state.get("video_name"):
        return st.session_state.get("video_path")
    _reset_session()
    suffix = Path(upload.name).suffix or ".mp4"
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(upload.getbuffer())
    st.session_state.video_path = handle.name
    st.session_state.video_name = upload.name
    return handle.name


async def _analyze(
    handle: PoseBackendHandle,
    video_path: str,
    content_type: Optional[str],
    profile: ExerciseProfile,
    preview,
    *,
    force_reload: bool = False,
) -> AnalysisOutcome:
    cfg = load_default()
    canvas = OverlayCanvas(min_visibility=cfg.analysis.min_visibility)
    orchestrator = AnalysisOrchestrator(handle, canvas, config=cfg)
    try:
        if not orchestrator.load_video(video_path, content_type=content_type):
            return AnalysisOutcome(error=orchestrator.error)
        orchestrator.select_exercise(profile)
        if force_reload and not await orchestrator.retry():
            return AnalysisOutcome(error=orchestrator.error)
        if not await orchestrator.analyze():
            return AnalysisOutcome(error=orchestrator.error)

        run = orchestrator.active_run
        while run is not None and run.task is not None and not run.task.done():
            video = orchestrator.video
            frame = video.current_frame() if video is not None else None
            if frame is not None:
                preview.image(canvas.compose(frame), channels="BGR", use_container_width=True)
            await asyncio.sleep(PREVIEW_REFRESH_S)
        await orchestrator.wait_for_run()
        return AnalysisOutcome(
            analysis=orchestrator.analysis,
            verdicts=orchestrator.verdicts,
            score=orchestrator.score,
            error=orchestrator.error,
        )
    finally:
        orchestrator.reset()


@st.fragment(run_every=REFERENCE_FRAME_INTERVAL_MS / 1000.0)
def _reference_animation(profile: ExerciseProfile) -> None:
    started = st.session_state.setdefault("reference_started", time.monotonic())
    elapsed_ms = (time.monotonic() - started) * 1000.0
    frame = ReferenceLoop(profile.reference_frames).render_at(elapsed_ms)
    if frame is not None:
        st.image(frame, channels="BGR", caption="Reference example", width=240)


def _exercise_panel(profile: ExerciseProfile) -> None:
    st.markdown(f"**{profile.name}**: {profile.description}")
    for cue in profile.cues:
        st.markdown(f"- {cue}")
    if profile.reference_frames:
        _reference_animation(profile)


def _results_panel(outcome: Optional[AnalysisOutcome]) -> None:
    st.subheader("Metric comparison")
    if outcome is None or not outcome.verdicts:
        st.info(EMPTY_COMPARISON_MESSAGE)
        return
    if outcome.score is not None:
        st.success(score_label(outcome.score))
    frames = frames_label(outcome.analysis)
    if frames:
        st.caption(frames)
    st.dataframe(verdict_table(outcome.verdicts), hide_index=True, use_container_width=True)


def main() -> None:
    st.title(APP_NAME)
    profiles = _catalog()
    if not profiles:
        st.error("The exercise catalog is empty.")
        return

    left, right = st.columns([1.1, 0.9])
    with left:
        names = {profile.name: profile for profile in profiles}
        profile = names[st.selectbox("Exercise focus", list(names))]
        upload = st.file_uploader("Upload your session", type=UPLOAD_TYPES)
        video_path = _store_upload(upload) if upload is not None else None
        content_type = getattr(upload, "type", None) if upload is not None else None

        preview = st.empty()
        if video_path and not st.session_state.get("outcome"):
            preview.video(video_path)

        analyze_col, reset_col = st.columns(2)
        run_label = "Re-run analysis" if st.session_state.get("outcome") else "Analyze"
        if analyze_col.button(run_label, disabled=video_path is None):
            with st.spinner("Analyzing..."):
                st.session_state.outcome = asyncio.run(
                    _analyze(_backend_handle(), video_path, content_type, profile, preview)
                )
        if reset_col.button("Reset", disabled=video_path is None):
            _reset_session()
            st.rerun()

        outcome: Optional[AnalysisOutcome] = st.session_state.get("outcome")
        if outcome is not None and outcome.error is not None:
            st.error(outcome.error.user_message)
            if isinstance(outcome.error, AssetLoadError) and st.button("Retry loading model"):
                with st.spinner("Reloading pose model..."):
                    st.session_state.outcome = asyncio.run(
                        _analyze(_backend_handle(), video_path, content_type, profile, preview, force_reload=True)
                    )
                st.rerun()

    with right:
        _exercise_panel(profile)
        _results_panel(st.session_state.get("outcome"))


main()
