"""Full routing report: per-slot results, stats, score and advice."""

from dataclasses import dataclass, field
from typing import Any

from .analyzer import AggregateStats, RouteInput, classify_routes, summarize
from .catalog import ProviderCatalog
from .health import HealthTier, health_tier, score_health
from .recommendations import recommend
from .validator import RouteValidation


@dataclass(frozen=True)
class RouterReport:
    """Everything the presentation layer needs to render routes."""
    validations: tuple[RouteValidation, ...]
    stats: AggregateStats
    score: int
    tier: HealthTier
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable export."""
        return {
            "summary": {
                "totalRouters": self.stats.total_slots,
                "configuredRouters": self.stats.configured_slots,
                "activeProviders": self.stats.active_provider_count,
                "healthScore": self.score,
                "healthStatus": self.tier.value,
            },
            "routers": [v.to_dict() for v in self.validations],
            "statistics": self.stats.to_dict(),
            "recommendations": list(self.recommendations),
        }


def build_report(routes: RouteInput, catalog: ProviderCatalog) -> RouterReport:
    validations = classify_routes(routes, catalog)
    stats = summarize(validations)
    score = score_health(stats)
    return RouterReport(
        validations=validations,
        stats=stats,
        score=score,
        tier=health_tier(score),
        recommendations=recommend(stats, score),
    )
