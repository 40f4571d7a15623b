"""Console rendering with rich.

All colors and labels live here; the routing engine only hands over
symbolic statuses and numbers.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ccr_model_manager.config import RouterConfig
from ccr_model_manager.routing import (
    HealthTier,
    Provider,
    ProviderCatalog,
    RouteFormatError,
    RouterReport,
    RouteSlot,
    RouteStatus,
    parse_route,
)

console = Console()

# status -> (label, rich style)
STATUS_STYLES: dict[RouteStatus, tuple[str, str]] = {
    RouteStatus.ACTIVE: ("🟢 Active", "green"),
    RouteStatus.DEPRECATED_PROVIDER: ("🟡 Deprecated", "yellow"),
    RouteStatus.UNKNOWN_MODEL: ("🔴 Unknown model", "red"),
    RouteStatus.PROVIDER_NOT_FOUND: ("🔴 No provider", "red"),
    RouteStatus.FORMAT_ERROR: ("🔴 Error", "red"),
    RouteStatus.NOT_CONFIGURED: ("Not configured", "red"),
}

TIER_STYLES: dict[HealthTier, str] = {
    HealthTier.EXCELLENT: "green",
    HealthTier.GOOD: "cyan",
    HealthTier.FAIR: "yellow",
    HealthTier.POOR: "red",
}


def show_error(message: str) -> None:
    console.print(f"[red]{message}[/red]")


def show_warning(message: str) -> None:
    console.print(f"[yellow]{message}[/yellow]")


def show_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def show_info(message: str) -> None:
    console.print(f"[blue]{message}[/blue]")


def render_router_table(report: RouterReport) -> Table:
    table = Table(title="Current CCR Router configuration")
    table.add_column("Router Type", style="bold")
    table.add_column("Provider")
    table.add_column("Model")
    table.add_column("Status")

    for validation in report.validations:
        label, style = STATUS_STYLES[validation.status]
        if validation.status in (RouteStatus.NOT_CONFIGURED, RouteStatus.FORMAT_ERROR):
            provider_text = model_text = "[dim]-[/dim]"
        else:
            provider_text = validation.provider_name or "-"
            model_text = validation.model_name or "-"
        table.add_row(
            validation.slot.value,
            provider_text,
            model_text,
            f"[{style}]{label}[/{style}]",
        )
    return table


def display_report(report: RouterReport) -> None:
    """Router table, statistics, health score and recommendations."""
    console.print()
    console.print(render_router_table(report))

    stats = report.stats
    console.print(
        f"[blue]Total: {stats.configured_slots}/{stats.total_slots} routes configured, "
        f"{stats.active_provider_count} active provider(s)[/blue]"
    )

    problems = [
        v for v in report.validations
        if v.status not in (RouteStatus.ACTIVE, RouteStatus.NOT_CONFIGURED) and v.error
    ]
    for validation in problems:
        console.print(f"  [dim]{validation.slot.value}:[/dim] {validation.error}")

    style = TIER_STYLES[report.tier]
    advice = "\n".join(f"• {line}" for line in report.recommendations)
    console.print()
    console.print(Panel(
        f"Health score: [bold {style}]{report.score}/100[/bold {style}] "
        f"([{style}]{report.tier.value}[/{style}])\n\n{advice}",
        title="Routing health",
        border_style=style,
    ))


def display_provider_list(catalog: ProviderCatalog) -> None:
    """Active providers and their models."""
    show_success("Available providers and models:")
    console.print()
    for provider in catalog.active():
        console.print(f"[yellow]Provider: {provider.name}[/yellow]")
        if provider.models:
            for model in provider.models:
                console.print(f"  - {model}")
        else:
            console.print("[red]  No models available[/red]")
        console.print()


def display_provider_stats(catalog: ProviderCatalog) -> None:
    providers = catalog.all()
    total_models = sum(len(p.models) for p in providers)
    deprecated = sum(1 for p in providers if p.deprecated)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Providers", str(len(providers)))
    table.add_row("Active", f"[green]{len(providers) - deprecated}[/green]")
    table.add_row("Deprecated", f"[yellow]{deprecated}[/yellow]")
    table.add_row("Models", str(total_models))
    console.print(table)
    console.print()

    for index, provider in enumerate(providers, 1):
        status, style = _provider_status(provider)
        console.print(f"{index}. [{style}]{provider.name}[/{style}] - {status}")
        console.print(f"   Models: {len(provider.models)}")
        if provider.models:
            more = "..." if len(provider.models) > 3 else ""
            console.print(f"   Available: {', '.join(provider.models[:3])}{more}")
        if provider.api_base_url:
            console.print(f"   API base URL: {provider.api_base_url}")
        console.print()


def display_search_results(catalog: ProviderCatalog, query: str) -> None:
    providers, models = catalog.search(query)
    show_info(f'Search results for "{query}":')
    console.print()

    if providers:
        show_success(f"Matching providers ({len(providers)}):")
        for provider in providers:
            status, style = _provider_status(provider)
            console.print(f"  - [{style}]{provider.name}[/{style}] - {status}")
        console.print()

    if models:
        show_success(f"Matching models ({len(models)}):")
        grouped: dict[str, tuple[Provider, list[str]]] = {}
        for provider, model in models:
            grouped.setdefault(provider.name, (provider, []))[1].append(model)
        for provider, names in grouped.values():
            _, style = _provider_status(provider)
            console.print(f"  [{style}]{provider.name}[/{style}]:")
            for name in names:
                console.print(f"    - {name}")
        console.print()

    if not providers and not models:
        show_warning(f'No providers or models match "{query}"')


def display_current_selection(config: RouterConfig) -> None:
    """Show the provider/model of the default route, if any."""
    value = config.router.get(RouteSlot.DEFAULT) if config.router else None
    if not value:
        return
    try:
        parsed = parse_route(value)
    except RouteFormatError:
        show_warning(f"Current default route is malformed: {value}")
        return
    show_info(f"Current selection: {parsed.provider_name} - {parsed.model_name}")


def provider_export(catalog: ProviderCatalog, exported_at: str) -> dict:
    """JSON-serializable provider listing for ``list --export``."""
    providers = catalog.all()
    return {
        "exportedAt": exported_at,
        "totalProviders": len(providers),
        "activeProviders": len(catalog.active()),
        "providers": [
            {
                "name": p.name,
                "status": "deprecated" if p.deprecated else "active",
                "apiBaseUrl": p.api_base_url,
                "models": list(p.models),
                "modelCount": len(p.models),
            }
            for p in providers
        ],
    }


def _provider_status(provider: Provider) -> tuple[str, str]:
    if provider.deprecated:
        return "🟡 Deprecated", "yellow"
    return "🟢 Active", "green"
