"""Parsing of raw ``provider,model`` route strings.

The provider is everything before the first comma, the model is
everything after it. Model names may contain further commas or slashes;
provider names containing a comma cannot be expressed in this format.
"""

from dataclasses import dataclass


class RouteFormatError(ValueError):
    """Raised when a raw route string is not in ``provider,model`` form."""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw


@dataclass(frozen=True)
class ParsedRoute:
    """A route string split into its provider and model parts."""
    provider_name: str
    model_name: str

    def __str__(self) -> str:
        return f"{self.provider_name},{self.model_name}"


def parse_route(raw: str) -> ParsedRoute:
    """Split a raw route string at its first comma.

    Args:
        raw: The route value, e.g. ``"openrouter,anthropic/claude-3.5"``.

    Returns:
        ParsedRoute with provider and model names, untrimmed.

    Raises:
        RouteFormatError: If there is no comma or either side is empty.
    """
    provider_name, sep, model_name = raw.partition(",")
    if not sep:
        raise RouteFormatError(
            'Invalid route format, expected "provider,model"', raw)
    if not provider_name or not model_name:
        raise RouteFormatError(
            "Provider name and model name must not be empty", raw)
    return ParsedRoute(provider_name=provider_name, model_name=model_name)
