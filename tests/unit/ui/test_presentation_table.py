from __future__ import annotations

import pytest

from technique_analyzer.C_analysis.accumulator import PoseAnalysis
from technique_analyzer.C_analysis.comparison import compare_to_reference
from technique_analyzer.config.catalog import get_exercise, load_catalog
from technique_analyzer.core.types import VerdictStatus
from technique_analyzer.ui.presentation import (
    VERDICT_COLUMNS,
    frames_label,
    score_label,
    status_label,
    verdict_table,
)


@pytest.fixture
def squat():
    return get_exercise(load_catalog(), "bodyweight-squat")


def test_table_rows_follow_catalog_order(squat) -> None:
    analysis = PoseAnalysis(
        min_knee=100.0, max_hip=170.0, avg_torso_lean=None, stance_symmetry=0.02, frame_count=12
    )
    table = verdict_table(compare_to_reference(analysis, squat))

    assert list(table.columns) == VERDICT_COLUMNS
    assert list(table["Metric"]) == [metric.label for metric in squat.metrics]

    knee, hip, torso, stance = table.to_dict("records")
    assert knee["Your metric"] == "100.0°"
    assert knee["Reference window"] == "80.0° — 95.0°"
    assert knee["Difference"] == "5.0° higher than the reference window"
    assert knee["Status"] == "Needs attention"

    assert hip["Status"] == "On target"
    assert hip["Difference"] == "On target"

    assert torso["Your metric"] == "—"
    assert torso["Difference"] == "—"
    assert torso["Status"] == "No data"

    assert stance["Your metric"] == "0.020"
    assert stance["Reference window"] == "0.000 — 0.050"


def test_empty_verdicts_give_empty_table() -> None:
    table = verdict_table([])
    assert table.empty
    assert list(table.columns) == VERDICT_COLUMNS


def test_labels() -> None:
    assert score_label(67) == "Technique score: 67% within target"
    assert score_label(None) == "Technique score: —"
    assert frames_label(PoseAnalysis(None, None, None, None, 0)) is None
    assert frames_label(None) is None
    assert frames_label(PoseAnalysis(90.0, 170.0, 10.0, 0.01, 42)) == "42 frames analyzed"
    assert status_label("missing") == "No data"
    assert status_label(VerdictStatus.MATCH) == "On target"
