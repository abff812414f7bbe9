"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import DEFAULT_TEMPLATE_URL, AppSettings, write_user_env_vars
from core.domain.models import TemplateState
from core.services.template_cache import FileSystemTemplateCache

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.head(url)
        return response.is_success, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc)


def _check_cache_dir(root: Path) -> tuple[bool, str]:
    """Create the cache root if needed and write a throwaway file into it."""

    try:
        root.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=root, prefix=".doctor-"):
            pass
        return True, str(root)
    except OSError as exc:
        return False, f"{root}: {exc}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    cache = FileSystemTemplateCache(settings.templates_dir())
    version = settings.default_platform_version

    table = Table(title="gapforge doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok_cache, detail_cache = _check_cache_dir(cache.root)
    table.add_row("Cache directory", "OK" if ok_cache else "FAIL", detail_cache)

    url = settings.template_url_for(version)
    ok_http, detail_http = asyncio.run(_check_http(settings, url))
    table.add_row("Template download", "OK" if ok_http else "FAIL", f"{detail_http} {url}")

    state = cache.state(cache.locate(version))
    status = {
        TemplateState.VALID: "OK",
        TemplateState.ABSENT: "OPTIONAL",
        TemplateState.CORRUPT: "WARN",
    }[state]
    table.add_row(f"Template {version}", status, state.value)

    _console.print(table)

    if state is TemplateState.CORRUPT:
        _console.print(
            "\n[yellow]Note:[/yellow] The corrupt template is replaced automatically on the next `create`."
        )


@app.command()
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()

    template_url = typer.prompt(
        "Template URL (must contain {version})",
        default=settings.template_url or DEFAULT_TEMPLATE_URL,
        show_default=True,
    ).strip()
    cache_dir = typer.prompt(
        "Template cache directory",
        default=str(settings.templates_dir()),
        show_default=True,
    ).strip()
    version = typer.prompt(
        "Default platform version",
        default=settings.default_platform_version,
        show_default=True,
    ).strip()

    if "{version}" not in template_url:
        raise typer.BadParameter("template URL must contain {version}")
    if not cache_dir or not version:
        raise typer.BadParameter("cache directory and version are required")

    env_path = write_user_env_vars(
        {
            "GAPFORGE_TEMPLATE_URL": template_url,
            "GAPFORGE_TEMPLATE_CACHE_DIR": cache_dir,
            "GAPFORGE_DEFAULT_PLATFORM_VERSION": version,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
