import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from weekplanner.planner import PlannerController
from weekplanner.settings import Settings, get_settings

app = typer.Typer(no_args_is_help=True)
cache_app = typer.Typer(help="Manage the offline asset cache.", no_args_is_help=True)
app.add_typer(cache_app, name="cache")

console = Console()

DayOption = typer.Option(None, "--day", min=1, max=7, help="Day of the week, 1 = Monday.")


def build_controller(settings: Settings | None = None) -> PlannerController:
    from weekplanner.services.storage import JsonFileStore, PlannerStore

    settings = settings or get_settings()
    store = PlannerStore(JsonFileStore(settings.data_dir))
    return PlannerController(store, confirm=lambda message: typer.confirm(message, default=False))


def _show(controller: PlannerController) -> None:
    from weekplanner.render import render_rich

    console.print(render_rich(controller.view()))


def _open(day: int | None) -> PlannerController:
    controller = build_controller()
    if day is not None and controller.state.current_day != day - 1:
        controller.select_day(day - 1)
    return controller


@app.callback()
def setup() -> None:
    """Weekly task planner."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.command()
def tui():
    """Open the interactive planner."""
    from weekplanner.tui.app import PlannerApp

    PlannerApp(build_controller()).run()


@app.command()
def show(day: int = DayOption):
    """Print the tasks and progress of a day."""
    _show(_open(day))


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title."),
    time: str = typer.Option("", "--time", "-t", help="Start time, HH:MM."),
    duration: str = typer.Option(None, "--duration", "-d", help="Duration in minutes."),
    day: int = DayOption,
):
    """Add a task to the selected day."""
    controller = _open(day)
    task = controller.add_task(title, time, duration)
    console.print(f"[green]Added[/green] {escape(task.title) or '(untitled)'}")
    _show(controller)


@app.command()
def toggle(
    position: int = typer.Argument(..., help="Task position as shown by `show`."),
    day: int = DayOption,
):
    """Mark a task done, or not done again."""
    controller = _open(day)
    if not controller.toggle_task(position - 1):
        console.print(f"[yellow]No task at position {position}.[/yellow]")
    _show(controller)


@app.command()
def delete(
    position: int = typer.Argument(..., help="Task position as shown by `show`."),
    day: int = DayOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
):
    """Delete a task after confirmation."""
    controller = _open(day)
    confirm = (lambda _message: True) if yes else None
    if controller.delete_task(position - 1, confirm=confirm):
        console.print("[green]Deleted.[/green]")
    _show(controller)


@app.command("day")
def select_day(day: int = typer.Argument(..., min=1, max=7, help="1 = Monday .. 7 = Sunday.")):
    """Select the current day."""
    controller = build_controller()
    controller.select_day(day - 1)
    _show(controller)


@app.command()
def theme():
    """Switch between dark and light theme."""
    controller = build_controller()
    new_theme = controller.toggle_theme()
    console.print(f"Theme: [bold]{new_theme.value}[/bold]")


def _asset_cache():
    from weekplanner.services.asset_cache import OfflineAssetCache

    settings = get_settings()
    return OfflineAssetCache(
        settings.asset_base_url,
        cache_dir=settings.data_dir / "cache",
        backend=settings.cache_backend,
        timeout=settings.request_timeout,
    )


@cache_app.command("install")
def cache_install():
    """Download every static asset into the cache."""
    from weekplanner.services.asset_cache import AssetCacheInstallError

    cache = _asset_cache()
    try:
        urls = cache.install()
    except AssetCacheInstallError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    finally:
        cache.close()
    for url in urls:
        console.print(f"[green]cached[/green] {url}")


@cache_app.command("fetch")
def cache_fetch(url: str = typer.Argument(..., help="Asset URL, relative to the base URL.")):
    """Fetch an asset, preferring the cached copy."""
    from weekplanner.services.asset_cache import AssetCacheError

    cache = _asset_cache()
    try:
        response = cache.fetch(url)
    except AssetCacheError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    finally:
        cache.close()
    source = "cache" if getattr(response, "from_cache", False) else "network"
    console.print(f"{response.status_code} {response.url} ({source}, {len(response.content)} bytes)")


def main():
    app()


if __name__ == "__main__":
    main()
