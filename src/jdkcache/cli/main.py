import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .. import config
from ..domain.errors import JdkCacheError
from ..registry.adoptium import AdoptiumRepository
from ..ui.progress import ProgressManager
from ..workspace.runtime import RuntimeWorkspace

app = typer.Typer(help="Download and cache JDK/JRE builds by major version.")
console = Console()


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def print_error(error: Exception):
    console.print(f"[red]Error:[/red] {escape(str(error))}")


def get_workspace(ctx: typer.Context) -> RuntimeWorkspace:
    root = ctx.obj["workspace"] if ctx.obj and ctx.obj.get("workspace") else config.get_workspace_root()
    repository = AdoptiumRepository(config.get_api_url())
    try:
        return RuntimeWorkspace.open(root, repository=repository, progress_manager=ProgressManager(console))
    except JdkCacheError as e:
        repository.close()
        print_error(e)
        raise typer.Exit(1)


@app.callback()
def main_callback(
    ctx: typer.Context,
    workspace: Optional[Path] = typer.Option(None, "--workspace", "-w", help="Workspace directory (overrides config)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """options shared by every command."""
    configure_logging(verbose)
    ctx.obj = {"workspace": workspace}


@app.command()
def install(
    ctx: typer.Context,
    major: int,
    platform: Optional[str] = typer.Option(None, "--platform", "-p", help="linux, mac or windows (default: host)"),
    arch: Optional[str] = typer.Option(None, "--arch", "-a", help="x64 or x86 (default: host)"),
    image_type: Optional[str] = typer.Option(None, "--image-type", "-t", help="jdk or jre"),
    force: bool = typer.Option(False, "--force", "-f", help="Reinstall even if already cached"),
):
    """download a runtime into the workspace."""
    with get_workspace(ctx) as workspace:
        existing = workspace.get_runtime(major)
        if existing and not force:
            console.print(f"[yellow]Runtime {major} is already installed at {existing.path}[/yellow]")
            console.print("Use --force to download it again.")
            return

        try:
            result = asyncio.run(
                workspace.install_runtime(
                    major,
                    platform or config.detect_platform(),
                    arch or config.detect_arch(),
                    image_type or config.get_default_image_type(),
                )
            )
        except JdkCacheError as e:
            print_error(e)
            raise typer.Exit(1)

    if result.replaced_existing:
        console.print(f"[yellow]Replaced previous contents of {result.path}[/yellow]")
    console.print(f"[green]✓[/green] Installed {result.release_name} as runtime {major} at {result.path}")


@app.command("list")
def list_runtimes(ctx: typer.Context):
    """list installed runtimes."""
    with get_workspace(ctx) as workspace:
        runtimes = workspace.list_runtimes()

    if not runtimes:
        console.print("No runtimes installed.")
        return

    table = Table(title=f"Runtimes in {workspace.directory}")
    table.add_column("Major", style="cyan", justify="right")
    table.add_column("Path")
    table.add_column("Bin", style="dim")
    for entry in runtimes:
        table.add_row(str(entry.major), entry.path, entry.bin)
    console.print(table)


@app.command()
def latest(ctx: typer.Context):
    """show the highest installed major version."""
    with get_workspace(ctx) as workspace:
        entry = workspace.get_latest_runtime_entry()
    if entry is None:
        console.print("No runtimes installed.")
        raise typer.Exit(1)
    console.print(f"{entry.major}\t{entry.path}", soft_wrap=True)


@app.command()
def which(ctx: typer.Context, major: int):
    """print the java executable of an installed runtime."""
    with get_workspace(ctx) as workspace:
        try:
            console.print(str(workspace.resolve_java_executable(major)), soft_wrap=True)
        except JdkCacheError as e:
            print_error(e)
            raise typer.Exit(1)


@app.command()
def remove(ctx: typer.Context, major: int):
    """delete an installed runtime."""
    with get_workspace(ctx) as workspace:
        try:
            entry = asyncio.run(workspace.remove_runtime(major))
        except JdkCacheError as e:
            print_error(e)
            raise typer.Exit(1)
    console.print(f"[green]✓[/green] Removed runtime {major} ({entry.path})")


@app.command()
def url(
    major: int = typer.Argument(8),
    platform: str = typer.Option("windows", "--platform", "-p"),
    arch: str = typer.Option("x64", "--arch", "-a"),
    image_type: str = typer.Option("jdk", "--image-type", "-t"),
):
    """print the release API query for a request without fetching it."""
    repository = AdoptiumRepository(config.get_api_url())
    try:
        console.print(
            repository.build_query_url(version=major, arch=arch, image_type=image_type, platform=platform),
            soft_wrap=True,
        )
    except JdkCacheError as e:
        print_error(e)
        raise typer.Exit(1)
    finally:
        repository.close()


@app.command("config")
def config_command(key: str, value: Optional[str] = typer.Argument(None)):
    """show or set a configuration value."""
    if key not in config.KNOWN_KEYS:
        console.print(f"[red]Error:[/red] unknown key {key}, expected one of {', '.join(config.KNOWN_KEYS)}")
        raise typer.Exit(1)

    if value is None:
        console.print(config.get_setting(key) or "[dim]not set[/dim]")
        return

    try:
        config.set_setting(key, value)
    except RuntimeError as e:
        print_error(e)
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] {key}={value}")


if __name__ == "__main__":
    app()
