"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `create`, `cache` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import CacheEntry, PipelineStage, TemplateState
from core.services.create_pipeline import PipelineResult

_STAGE_LABELS: dict[PipelineStage, str] = {
    PipelineStage.VALIDATING: "Checking destination",
    PipelineStage.FETCHING: "Preparing template",
    PipelineStage.MATERIALIZING: "Creating project",
    PipelineStage.COMPLETE: "Done",
    PipelineStage.FAILED: "Failed",
}

_STATE_STYLES: dict[TemplateState, str] = {
    TemplateState.VALID: "green",
    TemplateState.CORRUPT: "red",
    TemplateState.ABSENT: "dim",
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (`--quiet`).
    """

    title = Text("gapforge", style="bold cyan")
    subtitle = Text("Mobile app projects from versioned templates", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def stage_label(stage: PipelineStage) -> str:
    return _STAGE_LABELS.get(stage, stage.value)


def build_cache_table(entries: list[CacheEntry]) -> Table:
    """Tabla Rich con las versiones presentes en la caché."""

    table = Table(title="Template cache")
    table.add_column("Version", style="cyan", no_wrap=True)
    table.add_column("State", style="white")
    table.add_column("Location", style="magenta")
    for entry in entries:
        style = _STATE_STYLES.get(entry.state, "white")
        table.add_row(entry.version, Text(entry.state.value, style=style), str(entry.location))
    return table


def build_result_panel(result: PipelineResult) -> Panel:
    """Panel con el resultado final del pipeline."""

    body = Text()
    if result.ok:
        body.append("Project created at ", style="bold")
        body.append(str(result.destination), style="green")
        return Panel(body, title=Text("Complete", style="bold green"), border_style="green")

    body.append(f"{type(result.error).__name__}: ", style="bold")
    body.append(str(result.error))
    cause = result.error.__cause__ if result.error is not None else None
    if cause is not None:
        body.append(f"\nCaused by: {cause}", style="dim")
    return Panel(body, title=Text("Error", style="bold red"), border_style="red")
