"""
Confidence and star scoring for place records.

Both measures are derived from the same two inputs (feature count and
confirmation count) but use separate rate constants, so a record can read
"Moderate confidence" while its star score sits near 5, or the reverse.
The two must not be reconciled.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

FEATURE_POINTS = 1.0
CONFIRMATION_POINTS = 0.8
HIGH_THRESHOLD = 4.0
MODERATE_THRESHOLD = 2.0

SCORE_BASE = 1.0
SCORE_PER_CONFIRMATION = 0.8
SCORE_PER_FEATURE = 0.2
SCORE_MAX = 5.0

HIGH = ("High confidence", "confidence-high")
MODERATE = ("Moderate confidence", "confidence-medium")
LOW = ("Needs verification", "confidence-low")


@dataclass(frozen=True)
class Assessment:
    points: float
    label: str
    css_class: str
    score: float

    @property
    def score_display(self) -> str:
        return f"{self.score:g}/5"


def compute_points(feature_count: int, confirmations: int) -> float:
    return feature_count * FEATURE_POINTS + confirmations * CONFIRMATION_POINTS


def confidence_for_points(points: float) -> tuple[str, str]:
    """Return ``(label, css_class)``; thresholds are inclusive lower bounds."""
    if points >= HIGH_THRESHOLD:
        return HIGH
    if points >= MODERATE_THRESHOLD:
        return MODERATE
    return LOW


def _round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def compute_score(feature_count: int, confirmations: int) -> float:
    """Bounded star score, rounded to one decimal place."""
    raw = min(
        SCORE_MAX,
        SCORE_BASE + confirmations * SCORE_PER_CONFIRMATION + feature_count * SCORE_PER_FEATURE,
    )
    return _round_half_up(raw)


def assess(feature_count: int, confirmations: int) -> Assessment:
    if feature_count < 0 or confirmations < 0:
        raise ValueError("feature_count and confirmations must be non-negative")
    points = compute_points(feature_count, confirmations)
    label, css_class = confidence_for_points(points)
    return Assessment(
        points=points,
        label=label,
        css_class=css_class,
        score=compute_score(feature_count, confirmations),
    )
