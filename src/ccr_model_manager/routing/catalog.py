"""Read-only provider catalog."""

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True)
class Provider:
    """A configured upstream model provider."""
    name: str
    models: tuple[str, ...] = ()
    deprecated: bool = False
    api_base_url: str = ""
    api_key: str = field(default="", repr=False)

    def has_model(self, model_name: str) -> bool:
        return model_name in self.models


class ProviderCatalog:
    """Lookup over an ordered snapshot of providers.

    Names are matched exactly and case-sensitively. Duplicate names are
    an authoring error in the config file; the first entry wins.
    """

    def __init__(self, providers: Iterable[Provider] = ()):
        self._providers: tuple[Provider, ...] = tuple(providers)
        self._by_name: dict[str, Provider] = {}
        for provider in self._providers:
            self._by_name.setdefault(provider.name, provider)

    def __len__(self) -> int:
        return len(self._providers)

    def __iter__(self):
        return iter(self._providers)

    def find_by_name(self, name: str) -> Provider | None:
        """Return the provider named exactly ``name``, or None."""
        return self._by_name.get(name)

    def all(self) -> tuple[Provider, ...]:
        return self._providers

    def active(self) -> tuple[Provider, ...]:
        """Non-deprecated providers, in catalog order."""
        return tuple(p for p in self._providers if not p.deprecated)

    def search(self, query: str) -> tuple[list[Provider], list[tuple[Provider, str]]]:
        """Case-insensitive substring search over provider and model names.

        Returns:
            (matching providers, matching (provider, model) pairs)
        """
        needle = query.lower()
        providers = [p for p in self._providers if needle in p.name.lower()]
        models = [
            (p, model)
            for p in self._providers
            for model in p.models
            if needle in model.lower()
        ]
        return providers, models
