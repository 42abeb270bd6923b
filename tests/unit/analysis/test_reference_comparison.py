from __future__ import annotations

import pytest

from technique_analyzer.C_analysis.accumulator import PoseAnalysis
from technique_analyzer.C_analysis.comparison import (
    MetricVerdict,
    compare_to_reference,
    describe_delta,
    evaluate_metric,
    format_degrees,
    format_metric_value,
    format_ratio,
    technique_score,
)
from technique_analyzer.core.types import (
    ExerciseProfile,
    MetricKey,
    MetricRange,
    MetricUnit,
    VerdictStatus,
)

KNEE = MetricRange(MetricKey.MIN_KNEE, "Bottom knee flexion", "", MetricUnit.DEGREES, 80.0, 95.0)
HIP = MetricRange(MetricKey.MAX_HIP, "Hip extension at finish", "", MetricUnit.DEGREES, 165.0, 180.0)
TORSO = MetricRange(MetricKey.AVG_TORSO_LEAN, "Average torso lean", "", MetricUnit.DEGREES, 5.0, 20.0)
STANCE = MetricRange(MetricKey.STANCE_SYMMETRY, "Stance symmetry", "", MetricUnit.RATIO, 0.0, 0.05)

PROFILE = ExerciseProfile(
    id="bodyweight-squat",
    name="Bodyweight Squat",
    description="",
    metrics=(KNEE, HIP, TORSO, STANCE),
)


def test_bounds_are_inclusive() -> None:
    assert evaluate_metric(KNEE, 80.0).status is VerdictStatus.MATCH
    assert evaluate_metric(KNEE, 95.0).status is VerdictStatus.MATCH
    assert evaluate_metric(KNEE, 80.0).delta is None


def test_deviation_delta_is_signed_against_nearest_bound() -> None:
    below = evaluate_metric(KNEE, 70.0)
    above = evaluate_metric(KNEE, 110.0)
    assert below.status is VerdictStatus.DEVIATION and below.delta == pytest.approx(-10.0)
    assert above.status is VerdictStatus.DEVIATION and above.delta == pytest.approx(15.0)


def test_missing_value_has_no_delta() -> None:
    verdict = evaluate_metric(TORSO, None)
    assert verdict == MetricVerdict(metric=TORSO, value=None, status=VerdictStatus.MISSING, delta=None)


def test_compare_to_reference_keeps_catalog_order() -> None:
    analysis = PoseAnalysis(min_knee=88.0, max_hip=150.0, avg_torso_lean=None, stance_symmetry=0.01, frame_count=12)
    verdicts = compare_to_reference(analysis, PROFILE)

    assert [v.metric.key for v in verdicts] == [
        MetricKey.MIN_KNEE,
        MetricKey.MAX_HIP,
        MetricKey.AVG_TORSO_LEAN,
        MetricKey.STANCE_SYMMETRY,
    ]
    assert [v.status for v in verdicts] == [
        VerdictStatus.MATCH,
        VerdictStatus.DEVIATION,
        VerdictStatus.MISSING,
        VerdictStatus.MATCH,
    ]
    assert verdicts[1].delta == pytest.approx(-15.0)


def test_compare_without_analysis_or_profile_is_empty() -> None:
    analysis = PoseAnalysis(90.0, 170.0, 10.0, 0.0, 3)
    assert compare_to_reference(None, PROFILE) == []
    assert compare_to_reference(analysis, None) == []


def test_score_ignores_missing_metrics() -> None:
    analysis = PoseAnalysis(min_knee=88.0, max_hip=150.0, avg_torso_lean=None, stance_symmetry=0.01, frame_count=12)
    # 2 de 3 métricas utilizables dentro de rango -> 66.67 -> 67
    assert technique_score(compare_to_reference(analysis, PROFILE)) == 67


@pytest.mark.parametrize(
    "matches, total, expected",
    [(1, 8, 13), (3, 8, 38), (1, 2, 50), (0, 4, 0), (4, 4, 100)],
)
def test_score_rounds_half_up(matches: int, total: int, expected: int) -> None:
    verdicts = [evaluate_metric(KNEE, 85.0)] * matches + [evaluate_metric(KNEE, 10.0)] * (total - matches)
    assert technique_score(verdicts) == expected


def test_score_is_undefined_without_usable_metrics() -> None:
    assert technique_score([]) is None
    assert technique_score([evaluate_metric(KNEE, None), evaluate_metric(HIP, None)]) is None


def test_formatters() -> None:
    assert format_degrees(85.04) == "85.0°"
    assert format_degrees(None) == "—"
    assert format_ratio(0.01234) == "0.012"
    assert format_ratio(None) == "—"
    assert format_metric_value(STANCE, 0.05) == "0.050"
    assert format_metric_value(KNEE, 80) == "80.0°"


def test_describe_delta() -> None:
    assert describe_delta(KNEE, None) == "On target"
    assert describe_delta(KNEE, 0.0) == "On target"
    assert describe_delta(KNEE, -10.0) == "10.0° lower than the reference window"
    assert describe_delta(STANCE, 0.021) == "0.021 higher than the reference window"
