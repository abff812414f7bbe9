"""Project creation orchestration.

This module chains the creation stages (validate the destination, make sure
the template is cached, materialize the project) into a single asyncio task.
Stages are injected, so entry-points (CLI, tests, future APIs) can swap any
of them, and side-effects like printing stay in the UI layer through hooks.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from adapters.template_downloader import HttpTemplateDownloader
from core.config import AppSettings
from core.domain.errors import InvalidRequest
from core.domain.models import CreateRequest, PipelineStage
from core.interfaces.stages import PathValidator, ProjectMaterializer, TemplateFetcher
from core.services.path_validator import EmptyDirectoryValidator
from core.services.project_materializer import TemplateProjectMaterializer
from core.services.template_cache import FileSystemTemplateCache
from core.services.template_fetcher import CachingTemplateFetcher


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress)."""

    stage: Callable[[PipelineStage], None] | None = None
    download: Callable[[str, str], None] | None = None


@dataclass
class PipelineResult:
    """Terminal outcome of a pipeline run; `error` is None on success."""

    destination: Path
    error: Exception | None = None
    stages: list[PipelineStage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def _require_request(request: CreateRequest | None) -> CreateRequest:
    if request is None:
        raise InvalidRequest("a create request is required")
    if not getattr(request, "destination_path", None):
        raise InvalidRequest("a destination path is required")
    if not getattr(request, "platform_version", None):
        raise InvalidRequest("a platform version is required")
    return request


class CreatePipeline:
    """validate -> fetch -> materialize, reported as one `PipelineResult`."""

    def __init__(
        self,
        *,
        validator: PathValidator,
        fetcher: TemplateFetcher,
        materializer: ProjectMaterializer,
        hooks: PipelineHooks | None = None,
    ) -> None:
        self._validator = validator
        self._fetcher = fetcher
        self._materializer = materializer
        self._hooks = hooks or PipelineHooks()

    def create(self, request: CreateRequest | None) -> asyncio.Task[PipelineResult]:
        """Start a pipeline run and return its task.

        Malformed requests raise `InvalidRequest` right away. Otherwise no
        stage runs until the next loop turn, so callers can attach done
        callbacks before anything happens. The task always resolves to a
        `PipelineResult` and never raises for stage failures.

        Must be called with a running event loop.
        """

        request = _require_request(request)
        loop = asyncio.get_running_loop()
        return loop.create_task(self._run(request))

    async def _run(self, request: CreateRequest) -> PipelineResult:
        # yield once even under an eager task factory
        await asyncio.sleep(0)
        result = PipelineResult(destination=request.destination)
        try:
            self._enter(result, PipelineStage.VALIDATING)
            self._validator.validate(result.destination)
            await asyncio.sleep(0)

            self._enter(result, PipelineStage.FETCHING)
            await self._fetcher.ensure(request.platform_version)
            await asyncio.sleep(0)

            self._enter(result, PipelineStage.MATERIALIZING)
            self._materializer.create(request)
        except Exception as exc:
            result.error = exc
            self._enter(result, PipelineStage.FAILED)
            return result

        self._enter(result, PipelineStage.COMPLETE)
        return result

    def _enter(self, result: PipelineResult, stage: PipelineStage) -> None:
        result.stages.append(stage)
        if self._hooks.stage:
            self._hooks.stage(stage)


def build_create_pipeline(
    settings: AppSettings,
    *,
    hooks: PipelineHooks | None = None,
) -> CreatePipeline:
    """Wire the default stages from settings."""

    hooks = hooks or PipelineHooks()
    cache = FileSystemTemplateCache(settings.templates_dir())
    fetcher = CachingTemplateFetcher(
        cache=cache,
        downloader=HttpTemplateDownloader(settings),
        url_for=settings.template_url_for,
        on_download=hooks.download,
    )
    return CreatePipeline(
        validator=EmptyDirectoryValidator(),
        fetcher=fetcher,
        materializer=TemplateProjectMaterializer(cache),
        hooks=hooks,
    )


async def create_project(
    *,
    settings: AppSettings,
    request: CreateRequest,
    hooks: PipelineHooks | None = None,
) -> PipelineResult:
    pipeline = build_create_pipeline(settings, hooks=hooks)
    return await pipeline.create(request)
