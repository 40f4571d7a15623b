"""Aggregate route statistics across all slots."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .catalog import ProviderCatalog
from .validator import (
    ROUTE_SLOTS,
    RawRoute,
    RouteSlot,
    RouteStatus,
    RouteValidation,
    validate_route,
)

RouteInput = Sequence[RawRoute] | Mapping[Any, str | None]

# Statuses whose matched provider exists and is not deprecated
_ACTIVE_PROVIDER_STATUSES = frozenset({RouteStatus.ACTIVE, RouteStatus.UNKNOWN_MODEL})
_MATCHED_PROVIDER_STATUSES = _ACTIVE_PROVIDER_STATUSES | {RouteStatus.DEPRECATED_PROVIDER}


@dataclass(frozen=True)
class AggregateStats:
    """Summary counters over the five route slots."""
    total_slots: int = len(ROUTE_SLOTS)
    configured_slots: int = 0
    active_provider_count: int = 0
    deprecated_provider_hits: int = 0
    unknown_model_hits: int = 0
    format_error_hits: int = 0
    # Distinct existing providers named by parseable slots, deprecated or not.
    # Feeds the provider score only; not part of the export.
    referenced_provider_count: int | None = None

    def to_dict(self) -> dict[str, int]:
        return {
            "totalSlots": self.total_slots,
            "configuredSlots": self.configured_slots,
            "activeProviderCount": self.active_provider_count,
            "deprecatedProviderHits": self.deprecated_provider_hits,
            "unknownModelHits": self.unknown_model_hits,
            "formatErrorHits": self.format_error_hits,
        }


def normalize_routes(routes: RouteInput) -> tuple[RawRoute, ...]:
    """Order raw routes by the fixed slot order.

    Accepts either RawRoute records or a mapping of slot (enum or its
    string value) to route string. Slots not present are unconfigured;
    keys that are not known slots are ignored.
    """
    values: dict[RouteSlot, str | None] = {}
    if isinstance(routes, Mapping):
        for key, value in routes.items():
            try:
                values[RouteSlot(key)] = value
            except ValueError:
                continue
    else:
        for raw in routes:
            values[raw.slot] = raw.value
    return tuple(RawRoute(slot, values.get(slot)) for slot in ROUTE_SLOTS)


def classify_routes(routes: RouteInput, catalog: ProviderCatalog) -> tuple[RouteValidation, ...]:
    """Validate every slot in fixed order."""
    return tuple(validate_route(raw, catalog) for raw in normalize_routes(routes))


def summarize(validations: Sequence[RouteValidation]) -> AggregateStats:
    """Count outcomes of already-classified slots."""
    counts = {status: 0 for status in RouteStatus}
    active_providers: set[str] = set()
    referenced_providers: set[str] = set()

    for validation in validations:
        counts[validation.status] += 1
        if validation.status in _MATCHED_PROVIDER_STATUSES and validation.provider_name:
            referenced_providers.add(validation.provider_name)
            if validation.status in _ACTIVE_PROVIDER_STATUSES:
                active_providers.add(validation.provider_name)

    return AggregateStats(
        total_slots=len(ROUTE_SLOTS),
        configured_slots=len(validations) - counts[RouteStatus.NOT_CONFIGURED],
        active_provider_count=len(active_providers),
        deprecated_provider_hits=counts[RouteStatus.DEPRECATED_PROVIDER],
        unknown_model_hits=counts[RouteStatus.UNKNOWN_MODEL],
        format_error_hits=(
            counts[RouteStatus.FORMAT_ERROR] + counts[RouteStatus.PROVIDER_NOT_FOUND]
        ),
        referenced_provider_count=len(referenced_providers),
    )


def analyze_routes(routes: RouteInput, catalog: ProviderCatalog) -> AggregateStats:
    """Classify all slots and aggregate the results."""
    return summarize(classify_routes(routes, catalog))
