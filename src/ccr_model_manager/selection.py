"""Interactive provider -> model -> route slot selection.

Walks the user through picking a non-deprecated provider, one of its
models, and the route slots to point at it, then writes the result back
to the CCR config.
"""

from dataclasses import dataclass

from rich.prompt import Prompt
from rich.table import Table

from ccr_model_manager.config import ConfigStore, RouterConfig
from ccr_model_manager.display import console, show_error, show_info, show_success
from ccr_model_manager.routing import ROUTE_SLOTS, Provider, RouteSlot


@dataclass
class Selection:
    provider_name: str
    model_name: str
    slots: list[RouteSlot]


def selectable_providers(config: RouterConfig) -> list[Provider]:
    """Non-deprecated providers that offer at least one model."""
    return [p for p in config.catalog().active() if p.models]


def select_provider(providers: list[Provider]) -> Provider:
    console.print("[bold]Step 1:[/bold] Choose a model provider\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim")
    table.add_column("Provider")
    table.add_column("Models", justify="right")
    for i, provider in enumerate(providers, 1):
        table.add_row(str(i), provider.name, str(len(provider.models)))
    console.print(table)
    console.print()

    choice = Prompt.ask(
        "Select provider",
        choices=[str(i) for i in range(1, len(providers) + 1)],
        default="1",
    )
    return providers[int(choice) - 1]


def select_model(provider: Provider) -> str:
    console.print(f"\n[bold]Step 2:[/bold] Choose a model from {provider.name}\n")
    for i, model in enumerate(provider.models, 1):
        console.print(f"  {i}. {model}")
    console.print()

    choice = Prompt.ask(
        "Select model",
        choices=[str(i) for i in range(1, len(provider.models) + 1)],
        default="1",
    )
    model = provider.models[int(choice) - 1]
    show_info(f"You selected: {provider.name} - {model}")
    return model


def parse_slot_choice(answer: str) -> list[RouteSlot]:
    """Turn "1,3,5" (or "all") into route slots, keeping slot order.

    Raises:
        ValueError: On unknown numbers or an empty selection.
    """
    answer = answer.strip().lower()
    if answer in ("", "all", "a"):
        return list(ROUTE_SLOTS)

    picked: set[int] = set()
    for token in answer.replace(" ", ",").split(","):
        if not token:
            continue
        if not token.isdigit() or not 1 <= int(token) <= len(ROUTE_SLOTS):
            raise ValueError(f"Invalid route number: {token}")
        picked.add(int(token))

    if not picked:
        raise ValueError("Select at least one route")
    return [slot for i, slot in enumerate(ROUTE_SLOTS, 1) if i in picked]


def select_slots(config: RouterConfig) -> list[RouteSlot]:
    console.print("\n[bold]Step 3:[/bold] Choose the routes to update\n")
    for i, slot in enumerate(ROUTE_SLOTS, 1):
        current = config.router.get(slot) if config.router else None
        console.print(
            f"  {i}. {slot.display_name} [dim](current: {current or 'not configured'})[/dim]")
    console.print()

    while True:
        answer = Prompt.ask("Routes (comma separated numbers, or 'all')", default="all")
        try:
            return parse_slot_choice(answer)
        except ValueError as e:
            show_error(str(e))


def run_selection(store: ConfigStore) -> Selection | None:
    """Run the full prompt flow and save the result.

    Returns:
        The saved selection, or None if there was nothing to choose from.
    """
    config = store.load()
    providers = selectable_providers(config)
    if not providers:
        show_error("No active providers with models found")
        return None

    provider = select_provider(providers)
    model = select_model(provider)
    slots = select_slots(config)

    store.update_routes(slots, provider.name, model)
    show_success("Config file updated")
    return Selection(provider.name, model, slots)
