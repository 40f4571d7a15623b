"""CLI interface for CCR Model Manager.

Settings come from ~/.ccr-model-manager/settings.yaml; the CCR config
path can be overridden per run with --config.

Quick start:
    cmm routers                  # Route table, health score, advice
    cmm routers --json           # Machine-readable report
    cmm check                    # Structural check of config.json
    cmm list                     # Active providers and models
    cmm list --search claude     # Search providers and models
    cmm select                   # Pick provider/model/routes, restart CCR
    cs                           # Shortcut for `cmm select`
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import NoReturn

import typer

from ccr_model_manager import __version__
from ccr_model_manager.config import ConfigStore, Settings, check_document, load_settings
from ccr_model_manager.display import (
    console,
    display_current_selection,
    display_provider_list,
    display_provider_stats,
    display_report,
    display_search_results,
    provider_export,
    show_error,
    show_info,
    show_success,
    show_warning,
)
from ccr_model_manager.errors import ModelManagerError, OutputWriteError
from ccr_model_manager.logging_setup import setup_logging
from ccr_model_manager.restarter import ProcessRestarter
from ccr_model_manager.routing import build_report
from ccr_model_manager.updater import UpdateChecker

app = typer.Typer(
    name="cmm",
    help="CCR Model Manager: inspect and switch Claude Code Router models",
    no_args_is_help=True,
)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj


def _store(ctx: typer.Context) -> ConfigStore:
    return ConfigStore(_settings(ctx).config_path)


def _restarter(settings: Settings) -> ProcessRestarter:
    return ProcessRestarter(
        restart_command=settings.restart_command,
        timeout=settings.restart_timeout,
        status_command=settings.status_command,
        status_timeout=settings.status_timeout,
    )


def _fail(error: ModelManagerError) -> NoReturn:
    show_error(f"Error: {error}")
    raise typer.Exit(1)


def _write_output(path: Path, text: str) -> None:
    try:
        path.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        _fail(OutputWriteError(f"Could not write {path}: {e}", {"path": str(path)}))


def _restart_ccr(settings: Settings) -> bool:
    show_info("Restarting CCR...")
    result = _restarter(settings).restart()
    if result.success:
        show_success(result.message)
        return True
    show_error(result.message)
    if result.error:
        console.print(f"[dim]{result.error}[/dim]")
    show_warning("You can restart it manually with:")
    show_warning(f"  {settings.restart_command}")
    return False


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(
        None, "--config", "-c", help="Path to CCR config.json"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Inspect and switch Claude Code Router model routes."""
    try:
        settings = load_settings()
    except ModelManagerError as e:
        _fail(e)
    if config is not None:
        settings.config_path = config.expanduser()
    setup_logging(settings.log_level, verbose)
    ctx.obj = settings


@app.command()
def routers(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False, "--json", help="Print the report as JSON"),
    output: Path = typer.Option(
        None, "--output", "-o", help="Write the JSON report to a file"),
) -> None:
    """Show route assignments, health score and recommendations.

    Examples:
        cmm routers
        cmm routers --json
        cmm routers -o report.json
    """
    try:
        config = _store(ctx).load()
    except ModelManagerError as e:
        _fail(e)

    if config.router is None:
        show_error("No Router section found in the CCR config")
        raise typer.Exit(1)

    report = build_report(config.raw_routes(), config.catalog())

    if output is not None:
        _write_output(output, json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        show_success(f"Report written to {output}")
    elif json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        display_report(report)


@app.command()
def check(ctx: typer.Context) -> None:
    """Check config.json for missing fields, duplicates and bad routes."""
    try:
        config = _store(ctx).load()
    except ModelManagerError as e:
        _fail(e)

    result = check_document(config)
    for error in result.errors:
        show_error(f"✗ {error}")
    for warning in result.warnings:
        show_warning(f"! {warning}")

    if not result.is_valid:
        raise typer.Exit(1)
    show_success("Config is usable.")


@app.command("list")
def list_providers(
    ctx: typer.Context,
    stats: bool = typer.Option(
        False, "--stats", help="Show provider statistics, deprecated included"),
    search: str = typer.Option(
        None, "--search", "-s", help="Search providers and models"),
    export: str = typer.Option(
        None, "--export", "-e", help="Export providers as JSON to a file, or '-' for stdout"),
) -> None:
    """List providers and their models.

    Examples:
        cmm list
        cmm list --stats
        cmm list --search gpt
        cmm list --export providers.json
    """
    try:
        config = _store(ctx).load()
    except ModelManagerError as e:
        _fail(e)
    catalog = config.catalog()

    if export is not None:
        data = provider_export(catalog, datetime.now(timezone.utc).isoformat())
        text = json.dumps(data, indent=2, ensure_ascii=False)
        if export == "-":
            typer.echo(text)
        else:
            _write_output(Path(export), text)
            show_success(f"Providers exported to {export}")
        return

    if search:
        display_search_results(catalog, search)
        return

    if not len(catalog):
        show_error("No providers found in the CCR config")
        raise typer.Exit(1)

    if stats:
        display_provider_stats(catalog)
        return

    if not catalog.active():
        show_error("No active providers found in the CCR config")
        raise typer.Exit(1)

    display_provider_list(catalog)
    display_current_selection(config)


@app.command()
def select(ctx: typer.Context) -> None:
    """Choose a provider and model for one or more routes, then restart CCR."""
    _run_select(_settings(ctx))


def _run_select(settings: Settings) -> None:
    from ccr_model_manager.selection import run_selection

    show_info("Reading CCR config...")
    try:
        selection = run_selection(ConfigStore(settings.config_path))
    except ModelManagerError as e:
        _fail(e)

    if selection is None:
        raise typer.Exit(1)

    _restart_ccr(settings)
    show_success("Done!")


@app.command()
def restart(ctx: typer.Context) -> None:
    """Restart CCR so config changes take effect."""
    if not _restart_ccr(_settings(ctx)):
        raise typer.Exit(1)


@app.command()
def update(
    ctx: typer.Context,
    check_only: bool = typer.Option(
        False, "--check", help="Only check whether an update is available"),
) -> None:
    """Update CCR Model Manager to the latest release on PyPI."""
    checker = UpdateChecker(package_name=_settings(ctx).package_name)

    if check_only:
        show_info("Checking for updates...")
        try:
            info = checker.check()
        except ModelManagerError as e:
            _fail(e)
        if info.update_available:
            show_warning(
                f"New version available: {info.current_version} -> {info.latest_version}")
            console.print("Run [bold]cmm update[/bold] to install it.")
        else:
            show_success(f"Already on the latest version ({info.current_version})")
        return

    show_info("Checking for updates...")
    result = checker.perform_update()
    if result.success:
        show_success(result.message)
        if result.current_version != result.new_version:
            show_info("Restart your shell to use the new version.")
        return

    show_error(result.message)
    if result.suggestion:
        show_warning(f"Suggestion: {result.suggestion}")
    if result.error:
        console.print(f"[dim]Details: {result.error}[/dim]")
    raise typer.Exit(1)


@app.command()
def version(ctx: typer.Context) -> None:
    """Show the CCR Model Manager version and whether CCR is installed."""
    console.print(f"CCR Model Manager version {__version__}")
    status = _restarter(_settings(ctx)).status()
    if status.success:
        show_success(status.message)
    else:
        show_warning(f"{status.message}: {status.error}")


# ─── cs shortcut ────────────────────────────────────────────────

cs_app = typer.Typer(
    name="cs",
    help="Shortcut for `cmm select`: interactive model selection",
    add_completion=False,
)


@cs_app.command()
def cs_main(
    config: Path = typer.Option(
        None, "--config", "-c", help="Path to CCR config.json"),
    show_version: bool = typer.Option(
        False, "--version", help="Show version and exit"),
) -> None:
    """Interactively choose a provider and model, then restart CCR."""
    if show_version:
        console.print(__version__)
        raise typer.Exit()

    try:
        settings = load_settings()
    except ModelManagerError as e:
        _fail(e)
    if config is not None:
        settings.config_path = config.expanduser()
    setup_logging(settings.log_level)
    _run_select(settings)


if __name__ == "__main__":
    app()
