"""gapforge command-line interface.

The CLI only collects arguments, renders progress and maps the pipeline
outcome to an exit code; all sequencing lives in `core.services`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from cli import doctor
from cli.ui_components import build_cache_table, build_result_panel, print_banner, stage_label
from core.config import AppSettings
from core.domain.errors import InvalidRequest
from core.domain.models import CreateRequest, PipelineStage
from core.services.create_pipeline import PipelineHooks, create_project
from core.services.template_cache import FileSystemTemplateCache

EXIT_FAILED = 1
EXIT_INVALID_REQUEST = 2

app = typer.Typer(no_args_is_help=True, help="Create mobile app projects from versioned templates.")
cache_app = typer.Typer(no_args_is_help=True, help="Inspect and clean the global template cache.")
app.add_typer(cache_app, name="cache")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.command()
def create(
    path: Path = typer.Argument(..., help="Directory of the new project (missing or empty)."),
    version: str | None = typer.Option(None, "--version", "-v", help="Platform/template version."),
    app_id: str | None = typer.Option(None, "--id", help="Reverse-domain app id, e.g. com.example.app."),
    name: str | None = typer.Option(None, "--name", help="Display name written to config.xml."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print the final result."),
) -> None:
    """Create a new project at PATH."""

    settings = AppSettings()
    try:
        request = CreateRequest(
            destination_path=str(path),
            platform_version=version or settings.default_platform_version,
            app_id=app_id,
            app_name=name,
        )
    except ValidationError as exc:
        _console.print(f"[red]Invalid request:[/red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_INVALID_REQUEST) from exc

    if not quiet:
        print_banner(_console)

    def on_stage(stage: PipelineStage) -> None:
        if not quiet and not stage.terminal:
            _console.print(f"[cyan]>[/cyan] {stage_label(stage)}...")

    def on_download(template_version: str, url: str) -> None:
        if not quiet:
            _console.print(f"  downloading template {template_version} from [dim]{url}[/dim]")

    hooks = PipelineHooks(stage=on_stage, download=on_download)
    try:
        result = asyncio.run(create_project(settings=settings, request=request, hooks=hooks))
    except InvalidRequest as exc:
        _console.print(f"[red]Invalid request:[/red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_INVALID_REQUEST) from exc

    _console.print(build_result_panel(result))
    if not result.ok:
        raise typer.Exit(code=EXIT_FAILED)


@cache_app.command("list")
def cache_list() -> None:
    """Show cached template versions and their state."""

    settings = AppSettings()
    cache = FileSystemTemplateCache(settings.templates_dir())
    entries = cache.entries()
    if not entries:
        _console.print(f"[dim]No cached templates in {cache.root}[/dim]")
        return
    _console.print(build_cache_table(entries))


@cache_app.command("clean")
def cache_clean(
    version: str | None = typer.Argument(None, help="Version to remove; all versions when omitted."),
) -> None:
    """Remove cached templates so the next `create` downloads them again."""

    settings = AppSettings()
    cache = FileSystemTemplateCache(settings.templates_dir())
    versions = [version] if version else [entry.version for entry in cache.entries()]

    removed = 0
    for item in versions:
        try:
            if cache.remove(item):
                removed += 1
                _console.print(f"[green]Removed[/green] {item}")
            else:
                _console.print(f"[yellow]Not cached:[/yellow] {item}")
        except InvalidRequest as exc:
            _console.print(f"[red]{escape(str(exc))}[/red]")
            raise typer.Exit(code=EXIT_INVALID_REQUEST) from exc
    _console.print(f"{removed} template(s) removed from {cache.root}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
