"""Health scoring for a routing configuration.

The score (0-100) weighs three dimensions and subtracts penalties:

- Completeness: share of slots configured (up to 50)
- Provider freshness: share of referenced providers that are not
  deprecated (up to 30)
- Model validity: share of well-formed slots naming a known model (up to 20)

Penalties: 5 per deprecated-provider slot, 10 per malformed or
missing-provider slot, 3 per unknown-model slot.
"""

import math
from dataclasses import dataclass
from enum import Enum

from .analyzer import AggregateStats


class HealthTier(str, Enum):
    """Coarse health label derived from the score."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True)
class TierThreshold:
    tier: HealthTier
    min_score: int
    message: str


# Single source for both the export label and the closing recommendation.
# Ordered from highest threshold down.
HEALTH_TIERS: tuple[TierThreshold, ...] = (
    TierThreshold(HealthTier.EXCELLENT, 90,
                  "Routing configuration is in excellent shape."),
    TierThreshold(HealthTier.GOOD, 70,
                  "Routing configuration is good; minor improvements are possible."),
    TierThreshold(HealthTier.FAIR, 50,
                  "Routing configuration is fair; several issues should be addressed."),
    TierThreshold(HealthTier.POOR, 0,
                  "Routing configuration is poor and needs attention."),
)

WEIGHTS = {
    "config": 50,
    "provider": 30,
    "model": 20,
}

PENALTIES = {
    "deprecated": 5,
    "format_error": 10,
    "unknown_model": 3,
}


def _round_half_up(value: float) -> int:
    # Trim float noise so x.5 boundaries round up consistently
    return math.floor(round(value, 9) + 0.5)


def score_health(stats: AggregateStats) -> int:
    """Compute the 0-100 health score for aggregated route stats."""
    if stats.total_slots == 0:
        return 0

    configured = stats.configured_slots
    config_score = configured / stats.total_slots * WEIGHTS["config"]

    valid_configs = configured - stats.format_error_hits
    # Without a referenced count every referenced provider is taken as active
    referenced = stats.referenced_provider_count
    if referenced is None:
        referenced = stats.active_provider_count
    provider_score = (
        min(stats.active_provider_count, referenced) / referenced * WEIGHTS["provider"]
        if configured > 0 and referenced > 0 else 0.0
    )
    model_score = (
        (valid_configs - stats.unknown_model_hits) / valid_configs * WEIGHTS["model"]
        if valid_configs > 0 else 0.0
    )

    raw = (
        config_score + provider_score + model_score
        - stats.deprecated_provider_hits * PENALTIES["deprecated"]
        - stats.format_error_hits * PENALTIES["format_error"]
        - stats.unknown_model_hits * PENALTIES["unknown_model"]
    )
    return max(0, min(100, _round_half_up(raw)))


def tier_for(score: int) -> TierThreshold:
    """Return the highest tier whose threshold the score reaches."""
    for threshold in HEALTH_TIERS:
        if score >= threshold.min_score:
            return threshold
    return HEALTH_TIERS[-1]


def health_tier(score: int) -> HealthTier:
    return tier_for(score).tier
