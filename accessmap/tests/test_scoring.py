import pytest

from accessmap.places.scoring import (
    assess,
    compute_points,
    compute_score,
    confidence_for_points,
)


@pytest.mark.parametrize(
    "points, label",
    [
        (4, "High confidence"),
        (3.99, "Moderate confidence"),
        (2, "Moderate confidence"),
        (1.99, "Needs verification"),
        (0, "Needs verification"),
    ],
)
def test_confidence_thresholds_are_inclusive(points, label):
    assert confidence_for_points(points)[0] == label


def test_confidence_css_classes():
    assert confidence_for_points(10)[1] == "confidence-high"
    assert confidence_for_points(2)[1] == "confidence-medium"
    assert confidence_for_points(0)[1] == "confidence-low"


def test_high_confidence_example():
    result = assess(feature_count=3, confirmations=6)
    assert result.points == pytest.approx(7.8)
    assert result.label == "High confidence"
    assert result.score == 5.0
    assert result.score_display == "5/5"


def test_needs_verification_example():
    result = assess(feature_count=1, confirmations=1)
    assert result.points == pytest.approx(1.8)
    assert result.label == "Needs verification"
    assert result.score == 2.0
    assert result.score_display == "2/5"


def test_score_keeps_one_decimal():
    # 1 + 0.8 + 0.6 = 2.4
    assert compute_score(3, 1) == 2.4
    assert assess(3, 1).score_display == "2.4/5"


def test_confidence_and_score_can_diverge():
    # Five confirmations and no features: score is capped at 5 ...
    result = assess(feature_count=0, confirmations=5)
    assert result.score == 5.0
    assert result.label == "High confidence"
    # ... while three features and no confirmations give a low score but moderate confidence
    result = assess(feature_count=3, confirmations=0)
    assert result.score == 1.6
    assert result.label == "Moderate confidence"


def test_points_formula():
    assert compute_points(0, 0) == 0
    assert compute_points(2, 0) == 2
    assert compute_points(0, 5) == pytest.approx(4.0)


def test_score_bounded_and_monotonic():
    for features in range(0, 6):
        previous = None
        for confirmations in range(0, 12):
            score = compute_score(features, confirmations)
            assert 1.0 <= score <= 5.0
            if previous is not None:
                assert score >= previous
            previous = score
    for confirmations in range(0, 12):
        scores = [compute_score(f, confirmations) for f in range(0, 6)]
        assert scores == sorted(scores)


def test_assess_rejects_negative_counts():
    with pytest.raises(ValueError):
        assess(-1, 0)
