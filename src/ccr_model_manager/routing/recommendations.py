"""Recommendations derived from route statistics.

Rules are checked in declaration order and each fires independently.
A closing message for the health tier is always appended last.
"""

from dataclasses import dataclass
from typing import Callable

from .analyzer import AggregateStats
from .health import tier_for


@dataclass(frozen=True)
class RecommendationRule:
    name: str
    applies: Callable[[AggregateStats], bool]
    message: Callable[[AggregateStats], str]


RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        "configure_all_slots",
        lambda s: s.configured_slots < s.total_slots,
        lambda s: (
            f"Configure all route slots ({s.configured_slots}/{s.total_slots} "
            "configured) so every request type has a model."
        ),
    ),
    RecommendationRule(
        "replace_deprecated",
        lambda s: s.deprecated_provider_hits > 0,
        lambda s: (
            f"Replace deprecated providers in {s.deprecated_provider_hits} "
            "route(s) with active ones."
        ),
    ),
    RecommendationRule(
        "fix_unknown_models",
        lambda s: s.unknown_model_hits > 0,
        lambda s: (
            f"Fix {s.unknown_model_hits} route(s) referencing models that are "
            "not listed by their provider."
        ),
    ),
    RecommendationRule(
        "fix_format_errors",
        lambda s: s.format_error_hits > 0,
        lambda s: (
            f"Fix {s.format_error_hits} malformed route(s); use the "
            '"provider,model" format with an existing provider.'
        ),
    ),
    RecommendationRule(
        "add_active_provider",
        lambda s: s.active_provider_count == 0,
        lambda s: "Add at least one active (non-deprecated) provider to your routes.",
    ),
    RecommendationRule(
        "add_redundancy",
        lambda s: s.active_provider_count == 1 and s.configured_slots > 2,
        lambda s: (
            "All routes depend on a single provider; consider adding a second "
            "provider for redundancy."
        ),
    ),
)


def recommend(stats: AggregateStats, score: int) -> list[str]:
    """Build the ordered recommendation list for a configuration."""
    messages = [rule.message(stats) for rule in RULES if rule.applies(stats)]
    messages.append(tier_for(score).message)
    return messages
