"""
Repository health scores derived from sanitization results.
"""

BASE_HEALTH = 75.0
MAX_HEALTH = 98.0
MAX_IMPROVEMENT = 100.0

# (points per item, category cap)
RUNS_WEIGHT = (2.0, 10.0)
ARTIFACTS_WEIGHT = (1.5, 8.0)
SECURITY_WEIGHT = (5.0, 12.0)

RELEASE_BASE = 70.0
RELEASE_SKIPPED = 65.0
RELEASE_PER_ITEM = 3.0
RELEASE_CAP = 95.0


def _category(count: int, weight) -> float:
    per_item, cap = weight
    return min(max(count, 0) * per_item, cap)


def calculate_health_score(runs: int, artifacts: int, security: int) -> float:
    """Overall health: base 75 plus capped per-category contributions, at most 98."""
    score = (
        BASE_HEALTH
        + _category(runs, RUNS_WEIGHT)
        + _category(artifacts, ARTIFACTS_WEIGHT)
        + _category(security, SECURITY_WEIGHT)
    )
    return min(score, MAX_HEALTH)


def calculate_release_health(items_count) -> float:
    """Release hygiene score; ``None`` means the release stage did not run."""
    if items_count is None:
        return RELEASE_SKIPPED
    if items_count > 0:
        return min(RELEASE_BASE + items_count * RELEASE_PER_ITEM, RELEASE_CAP)
    return RELEASE_BASE


def calculate_improvement(before: float, gained: float) -> float:
    """Score after an improvement, never above 100."""
    return min(before + max(gained, 0.0), MAX_IMPROVEMENT)
