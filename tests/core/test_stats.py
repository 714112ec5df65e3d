"""Tests for calculate_stats / calculate_time_series — pure analytics, no IO."""

import math
from datetime import date

from decision_log.core.stats import (
    calculate_stats, calculate_time_series, confidence_label, round_half_up,
)

TODAY = date(2024, 3, 10)


def test_empty_collection_is_all_zero():
    stats = calculate_stats([], TODAY)
    assert stats.total_decisions == 0
    assert stats.avg_confidence == 0
    assert stats.avg_rating == 0
    assert stats.calibration_gap == 0
    assert stats.category_breakdown == {}
    assert stats.factor_breakdown == {}
    assert not math.isnan(stats.avg_rating)


def test_no_reviews_means_no_calibration(make_decision):
    stats = calculate_stats([make_decision(confidence=90)], TODAY)
    assert stats.reviewed_decisions == 0
    assert stats.calibration_gap == 0


def test_calibration_gap_overconfidence(make_decision):
    decisions = [
        make_decision(confidence=80, rating=3),
        make_decision(confidence=60, rating=3),
    ]
    stats = calculate_stats(decisions, TODAY)
    assert stats.avg_confidence == 70
    assert stats.avg_rating == 3.0
    assert stats.calibration_gap == 20


def test_average_rating(make_decision):
    stats = calculate_stats([make_decision(rating=5), make_decision(rating=3)], TODAY)
    assert stats.avg_rating == 4.0


def test_category_breakdown(make_decision):
    decisions = [
        make_decision(category="work", rating=2),
        make_decision(category="work", rating=4),
        make_decision(category="health", rating=5),
        make_decision(category="health"),
    ]
    breakdown = calculate_stats(decisions, TODAY).category_breakdown
    assert breakdown["work"].count == 2
    assert breakdown["work"].avg_rating == 3.0
    assert breakdown["health"].count == 1
    assert breakdown["health"].avg_rating == 5.0


def test_factor_breakdown_counts_each_factor(make_decision):
    decisions = [
        make_decision(rating=4, factors=["Luck", "Intuition"]),
        make_decision(rating=2, factors=["Luck"]),
    ]
    factors = calculate_stats(decisions, TODAY).factor_breakdown
    assert factors["Luck"].count == 2
    assert factors["Luck"].avg_rating == 3.0
    assert factors["Intuition"].count == 1


def test_stakes_breakdown_includes_confidence(make_decision):
    decisions = [
        make_decision(stakes="high", confidence=90, rating=2),
        make_decision(stakes="high", confidence=71, rating=3),
    ]
    high = calculate_stats(decisions, TODAY).stakes_by_rating["high"]
    assert high.avg_confidence == 81
    assert high.avg_rating == 2.5


def test_quality_vs_outcome_skips_unassessed(make_decision):
    decisions = [
        make_decision(rating=5, quality="good"),
        make_decision(rating=1),
    ]
    quality = calculate_stats(decisions, TODAY).quality_vs_outcome
    assert list(quality) == ["good"]


def test_this_month_and_pending(make_decision):
    decisions = [
        make_decision(date="2024-03-02", horizon_days=7),   # this month, due 03-09
        make_decision(date="2024-02-01", horizon_days=90),  # not due
        make_decision(date="2024-03-05", horizon_days=7, rating=4),
    ]
    stats = calculate_stats(decisions, TODAY)
    assert stats.decisions_this_month == 2
    assert stats.pending_reviews == 1


def test_to_camel_dict_keeps_breakdown_keys(make_decision):
    payload = calculate_stats(
        [make_decision(category="side_project", rating=4)], TODAY,
    ).to_camel_dict()
    assert payload["calibrationGap"] == -5
    assert "side_project" in payload["categoryBreakdown"]
    assert payload["categoryBreakdown"]["side_project"] == {"count": 1, "avgRating": 4.0}
    assert payload["stakesByRating"]["medium"]["avgConfidence"] == 70


def test_time_series_groups_by_decision_month(make_decision):
    decisions = [
        make_decision(date="2024-01-03", confidence=60, rating=4),
        make_decision(date="2024-01-20", confidence=81),
        make_decision(date="2023-12-31", confidence=50),
    ]
    points = calculate_time_series(decisions)
    assert [p.date for p in points] == ["2023-12", "2024-01"]
    assert points[0].rating is None
    assert points[1].confidence == 71
    assert points[1].rating == 4.0
    assert points[1].count == 2


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.25, 1) == 3.3


def test_confidence_labels():
    assert confidence_label(10) == "Total guess"
    assert confidence_label(50) == "Coin flip"
    assert confidence_label(86) == "I'd bet my cat"
