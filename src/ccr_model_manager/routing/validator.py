"""Per-slot route classification.

Each route slot is classified against the provider catalog into exactly
one RouteStatus. Rules are evaluated in order and the first match wins:

1. No value                         -> NOT_CONFIGURED
2. Not in "provider,model" form     -> FORMAT_ERROR
3. Provider missing from catalog    -> PROVIDER_NOT_FOUND
4. Provider flagged deprecated      -> DEPRECATED_PROVIDER
5. Model missing from provider list -> UNKNOWN_MODEL
6. Otherwise                        -> ACTIVE

Failures are outcomes, not exceptions.
"""

from dataclasses import dataclass
from enum import Enum

from .catalog import ProviderCatalog
from .parser import RouteFormatError, parse_route


class RouteSlot(str, Enum):
    """The five fixed routing purposes, in display order."""
    DEFAULT = "default"
    BACKGROUND = "background"
    THINK = "think"
    LONG_CONTEXT = "longContext"
    WEB_SEARCH = "webSearch"

    @property
    def display_name(self) -> str:
        return SLOT_DISPLAY_NAMES[self]


SLOT_DISPLAY_NAMES: dict[RouteSlot, str] = {
    RouteSlot.DEFAULT: "Default",
    RouteSlot.BACKGROUND: "Background",
    RouteSlot.THINK: "Think",
    RouteSlot.LONG_CONTEXT: "Long context",
    RouteSlot.WEB_SEARCH: "Web search",
}

ROUTE_SLOTS: tuple[RouteSlot, ...] = tuple(RouteSlot)


class RouteStatus(str, Enum):
    """Classification outcome for one route slot."""
    NOT_CONFIGURED = "not_configured"
    FORMAT_ERROR = "format_error"
    PROVIDER_NOT_FOUND = "provider_not_found"
    DEPRECATED_PROVIDER = "deprecated_provider"
    UNKNOWN_MODEL = "unknown_model"
    ACTIVE = "active"


@dataclass(frozen=True)
class RawRoute:
    """Unparsed configuration value for a slot."""
    slot: RouteSlot
    value: str | None = None


@dataclass(frozen=True)
class RouteValidation:
    """Result of classifying one slot."""
    slot: RouteSlot
    status: RouteStatus
    provider_name: str | None = None
    model_name: str | None = None
    error: str | None = None

    @property
    def is_configured(self) -> bool:
        return self.status is not RouteStatus.NOT_CONFIGURED

    def to_dict(self) -> dict[str, str | None]:
        return {
            "type": self.slot.value,
            "status": self.status.value,
            "provider": self.provider_name,
            "model": self.model_name,
            "error": self.error,
        }


def validate_route(raw: RawRoute, catalog: ProviderCatalog) -> RouteValidation:
    """Classify a single raw route against the catalog."""
    if not raw.value:
        return RouteValidation(raw.slot, RouteStatus.NOT_CONFIGURED,
                               error="Not configured")

    try:
        parsed = parse_route(raw.value)
    except RouteFormatError as e:
        return RouteValidation(raw.slot, RouteStatus.FORMAT_ERROR, error=str(e))

    def result(status: RouteStatus, error: str | None = None) -> RouteValidation:
        return RouteValidation(
            slot=raw.slot,
            status=status,
            provider_name=parsed.provider_name,
            model_name=parsed.model_name,
            error=error,
        )

    provider = catalog.find_by_name(parsed.provider_name)
    if provider is None:
        return result(RouteStatus.PROVIDER_NOT_FOUND,
                      f"Provider '{parsed.provider_name}' does not exist")

    # Deprecation outranks an unknown model
    if provider.deprecated:
        return result(RouteStatus.DEPRECATED_PROVIDER,
                      f"Provider '{provider.name}' is deprecated")

    if not provider.has_model(parsed.model_name):
        return result(RouteStatus.UNKNOWN_MODEL,
                      f"Model '{parsed.model_name}' is not offered by '{provider.name}'")

    return result(RouteStatus.ACTIVE)
