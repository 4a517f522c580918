"""Tests for repository health scores."""

import pytest

from repokeeper.sanitize.health import (
    MAX_HEALTH,
    calculate_health_score,
    calculate_improvement,
    calculate_release_health,
)


def test_base_score_without_cleanup():
    assert calculate_health_score(0, 0, 0) == 75.0


@pytest.mark.parametrize("runs,artifacts,security,expected", [
    (1, 0, 0, 77.0),
    (100, 0, 0, 85.0),
    (0, 2, 0, 78.0),
    (0, 100, 0, 83.0),
    (0, 0, 2, 85.0),
    (0, 0, 100, 87.0),
])
def test_category_contributions_are_capped(runs, artifacts, security, expected):
    assert calculate_health_score(runs, artifacts, security) == expected


def test_overall_score_never_exceeds_maximum():
    assert calculate_health_score(1000, 1000, 1000) == MAX_HEALTH


def test_score_is_monotonic_in_each_count():
    previous = calculate_health_score(0, 0, 0)
    for n in range(1, 20):
        current = calculate_health_score(n, n, n)
        assert current >= previous
        previous = current


def test_release_health():
    assert calculate_release_health(None) == 65.0
    assert calculate_release_health(0) == 70.0
    assert calculate_release_health(2) == 76.0
    assert calculate_release_health(50) == 95.0


def test_improvement_is_capped_at_100():
    assert calculate_improvement(80.0, 10.0) == 90.0
    assert calculate_improvement(95.0, 30.0) == 100.0
    assert calculate_improvement(50.0, -5.0) == 50.0
