"""Route validation and health-scoring engine.

Pure, synchronous functions over immutable inputs:
- parse "provider,model" route strings
- look providers up in a read-only catalog
- classify each of the five route slots
- aggregate statistics, score health 0-100, and recommend fixes

No I/O happens here; loading the config file and rendering results are
handled by the callers.
"""

from ccr_model_manager.routing.analyzer import (
    AggregateStats,
    analyze_routes,
    classify_routes,
    normalize_routes,
    summarize,
)
from ccr_model_manager.routing.catalog import Provider, ProviderCatalog
from ccr_model_manager.routing.health import (
    HEALTH_TIERS,
    HealthTier,
    health_tier,
    score_health,
    tier_for,
)
from ccr_model_manager.routing.parser import ParsedRoute, RouteFormatError, parse_route
from ccr_model_manager.routing.recommendations import recommend
from ccr_model_manager.routing.report import RouterReport, build_report
from ccr_model_manager.routing.validator import (
    ROUTE_SLOTS,
    RawRoute,
    RouteSlot,
    RouteStatus,
    RouteValidation,
    validate_route,
)

__all__ = [
    "AggregateStats",
    "HEALTH_TIERS",
    "HealthTier",
    "ParsedRoute",
    "Provider",
    "ProviderCatalog",
    "ROUTE_SLOTS",
    "RawRoute",
    "RouteFormatError",
    "RouteSlot",
    "RouteStatus",
    "RouteValidation",
    "RouterReport",
    "analyze_routes",
    "build_report",
    "classify_routes",
    "health_tier",
    "normalize_routes",
    "parse_route",
    "recommend",
    "score_health",
    "summarize",
    "tier_for",
    "validate_route",
]
