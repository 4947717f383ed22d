"""Thin CLI wrapper for xgo_runner.

This module provides the command-line interface using Typer.
Flags are turned into immutable BuildConfig/BuildOptions/ImageRequest
values here; all build logic is delegated to core modules.
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from xgo_runner import __version__
from xgo_runner.config import Settings, get_settings, print_settings_json
from xgo_runner.types import BuildConfig, BuildOptions, ImageRequest

app = typer.Typer(
    name="xgo",
    help="xgo - cross compile Go packages inside the xgo Docker toolchain",
    no_args_is_help=True,
)
console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"xgo-runner version {__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _image_request(
    settings: Settings,
    go_version: str | None,
    docker_repo: str,
    docker_image: str,
) -> ImageRequest:
    return ImageRequest(
        go_version=go_version or settings.go_version,
        custom_image=docker_image,
        custom_repository=docker_repo,
        distribution=settings.docker_dist,
    )


def parse_targets(targets: str) -> tuple[str, ...]:
    """Split a comma separated target list."""
    return tuple(t.strip() for t in targets.split(",") if t.strip())


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """xgo - cross compile Go packages inside the xgo Docker toolchain."""


@app.command()
def build(
    repository: Annotated[
        str, typer.Argument(help="Path of the Go repository to build")
    ],
    build_dir: Annotated[
        Path | None,
        typer.Option(
            "--build-dir", "--buildDir", help="Build dir mounted as the build root"
        ),
    ] = None,
    go_version: Annotated[
        str | None,
        typer.Option("--go", help="Go release to use for cross compilation"),
    ] = None,
    pkg: Annotated[
        str, typer.Option("--pkg", help="Sub-package to build if not root import")
    ] = "",
    remote: Annotated[
        str, typer.Option("--remote", help="Version control remote repository")
    ] = "",
    branch: Annotated[
        str, typer.Option("--branch", help="Version control branch to build")
    ] = "",
    out: Annotated[
        str,
        typer.Option("--out", help="Prefix for output naming (empty = package name)"),
    ] = "",
    deps: Annotated[
        str,
        typer.Option("--deps", help="CGO dependencies (configure/make based archives)"),
    ] = "",
    deps_args: Annotated[
        str, typer.Option("--depsargs", help="CGO dependency configure arguments")
    ] = "",
    targets: Annotated[
        str, typer.Option("--targets", help="Comma separated targets to build for")
    ] = "*/*",
    docker_repo: Annotated[
        str,
        typer.Option(
            "--docker-repo",
            help="Use custom docker repo instead of official distribution",
        ),
    ] = "",
    docker_image: Annotated[
        str,
        typer.Option(
            "--docker-image",
            help="Use custom docker image instead of official distribution",
        ),
    ] = "",
    use_modules: Annotated[
        bool, typer.Option("--mod/--no-mod", help="Build in Go module mode")
    ] = False,
    go_path: Annotated[
        Path | None,
        typer.Option("--go-path", "--goPath", help="Host directory for the module cache"),
    ] = None,
    go_proxy: Annotated[
        str, typer.Option("--goproxy", help="Global proxy for Go modules")
    ] = "",
    verbose: Annotated[
        bool,
        typer.Option("-v", help="Print the names of packages as they are compiled"),
    ] = False,
    steps: Annotated[
        bool, typer.Option("-x", help="Print the commands as the build executes them")
    ] = False,
    race: Annotated[
        bool,
        typer.Option("--race", help="Enable data race detection (amd64 only)"),
    ] = False,
    tags: Annotated[
        str, typer.Option("--tags", help="Build tags to consider satisfied")
    ] = "",
    ldflags: Annotated[
        str, typer.Option("--ldflags", help="Arguments to pass to each go tool link")
    ] = "",
    buildmode: Annotated[
        str, typer.Option("--buildmode", help="Kind of object file to build")
    ] = "default",
    cache_dir: Annotated[
        Path | None,
        typer.Option("--cache-dir", help="Dependency cache directory"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level"),
    ] = None,
) -> None:
    """Cross compile a Go repository inside the xgo container."""
    from xgo_runner.builds.orchestrator import build_orchestrator
    from xgo_runner.errors import XgoError

    overrides: dict[str, object] = {}
    if cache_dir is not None:
        overrides["cache_dir"] = cache_dir
    if log_level is not None:
        overrides["log_level"] = log_level.upper()
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        console.print(f"[red]❌ Invalid settings: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None
    _configure_logging(settings.log_level)

    if build_dir is None:
        console.print("[red]❌ Missing build dir (--build-dir)[/red]")
        raise typer.Exit(code=1)

    config = BuildConfig(
        repository=repository,
        build_dir=build_dir.resolve(),
        sub_package=pkg,
        remote=remote,
        branch=branch,
        output_prefix=out,
        dependencies=tuple(deps.split()),
        dependency_args=deps_args,
        module_path=go_path.resolve() if go_path is not None else None,
        targets=parse_targets(targets),
        use_modules=use_modules,
        module_proxy=go_proxy,
    )
    options = BuildOptions(
        verbose=verbose,
        steps=steps,
        race=race,
        tags=tags,
        ldflags=ldflags,
        buildmode=buildmode,
    )
    request = _image_request(settings, go_version, docker_repo, docker_image)

    console.print(f"[blue]🚀 Start xgo {__version__}[/blue]")
    with httpx.Client() as client:
        orchestrator = build_orchestrator(settings, client)
        try:
            outcome = orchestrator.run(config, options, request)
        except XgoError as e:
            console.print(f"[red]❌ {escape(e.describe())}[/red]")
            raise typer.Exit(code=1) from None

    duration = (outcome.finished_at - outcome.started_at).total_seconds()
    console.print(
        f"[green]🏁 Finished {escape(repository)} with {escape(outcome.image.image)} "
        f"in {duration:.1f}s[/green]"
    )


@app.command()
def image(
    go_version: Annotated[
        str | None,
        typer.Option("--go", help="Go release to use for cross compilation"),
    ] = None,
    docker_repo: Annotated[
        str, typer.Option("--docker-repo", help="Custom docker repo")
    ] = "",
    docker_image: Annotated[
        str, typer.Option("--docker-image", help="Custom docker image")
    ] = "",
) -> None:
    """Show the toolchain image a build would use."""
    from xgo_runner.docker.image import resolve_image

    settings = get_settings()
    request = _image_request(settings, go_version, docker_repo, docker_image)
    console.print(resolve_image(request), markup=False, highlight=False)


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        console.print(print_settings_json(settings), soft_wrap=True)
    else:
        timeout_display = (
            f"{settings.fetch_timeout}s" if settings.fetch_timeout else "(unbounded)"
        )
        console.print("[bold]Effective Configuration:[/bold]")
        console.print()
        console.print("[bold]Paths:[/bold]")
        console.print(f"  Cache directory:     {settings.cache_dir}")
        console.print()
        console.print("[bold]Toolchain:[/bold]")
        console.print(f"  Docker distribution: {settings.docker_dist}")
        console.print(f"  Go version:          {settings.go_version}")
        console.print(f"  Docker binary:       {settings.docker_binary}")
        console.print()
        console.print("[bold]Operational:[/bold]")
        console.print(f"  Fetch timeout:       {timeout_display}")
        console.print(f"  Log level:           {settings.log_level}")


cache_app = typer.Typer(help="Inspect the dependency cache")
app.add_typer(cache_app, name="cache")


@cache_app.command("list")
def cache_list(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List cached dependency archives."""
    from xgo_runner.deps.cache import DependencyCache

    settings = get_settings()
    entries = DependencyCache(settings.cache_dir).entries()

    if json_output:
        output = [
            {"name": e.name, "path": str(e.path), "size_bytes": e.size_bytes}
            for e in entries
        ]
        console.print(json.dumps(output, indent=2), soft_wrap=True)
        return

    if not entries:
        console.print("[yellow]No cached dependencies[/yellow]")
        return

    console.print(f"[bold]Found {len(entries)} cached dependenc(ies):[/bold]")
    console.print()
    for e in entries:
        console.print(f"  [green]{escape(e.name)}[/green]  {e.size_bytes} bytes")


__all__ = ["app"]
