from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from pydantic import ValidationError

from core.domain.errors import FetchFailure, InvalidDestination, InvalidRequest
from core.domain.models import CreateRequest, PipelineStage
from core.config import AppSettings
from core.services.create_pipeline import CreatePipeline, PipelineHooks, create_project
from core.services.path_validator import EmptyDirectoryValidator
from core.services.project_materializer import TemplateProjectMaterializer
from core.services.template_cache import FileSystemTemplateCache
from core.services.template_fetcher import CachingTemplateFetcher


def _url_for(version: str) -> str:
    return f"https://example.test/{version}.zip"


class FakeValidator:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[Path] = []

    def validate(self, path: Path) -> None:
        self.calls.append(path)
        if self.error is not None:
            raise self.error


class FakeFetcher:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[str] = []

    async def ensure(self, version: str) -> Path:
        self.calls.append(version)
        if self.error is not None:
            raise self.error
        return Path("/cache") / version


class FakeMaterializer:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[CreateRequest] = []

    def create(self, request: CreateRequest) -> Path:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return request.destination


class FakeDownloader:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, Path]] = []

    async def download(self, url: str, destination: Path) -> None:
        self.calls.append((url, destination))
        if self.error is not None:
            raise self.error
        (destination / "www").mkdir(parents=True)
        (destination / "www" / "config.xml").write_text("<widget/>", encoding="utf-8")


@pytest.fixture
def request_33() -> CreateRequest:
    return CreateRequest(destination_path="app", platform_version="3.3.0")


def _pipeline(validator=None, fetcher=None, materializer=None, hooks=None) -> CreatePipeline:
    return CreatePipeline(
        validator=validator or FakeValidator(),
        fetcher=fetcher or FakeFetcher(),
        materializer=materializer or FakeMaterializer(),
        hooks=hooks,
    )


def _run(pipeline: CreatePipeline, request: CreateRequest):
    async def scenario():
        return await pipeline.create(request)

    return asyncio.run(scenario())


def test_create_requires_a_request() -> None:
    with pytest.raises(InvalidRequest):
        _pipeline().create(None)


@pytest.mark.parametrize(
    "fields",
    [
        {"destination_path": None, "platform_version": "3.3.0"},
        {"destination_path": "", "platform_version": "3.3.0"},
        {"destination_path": "app", "platform_version": None},
        {"destination_path": "app", "platform_version": ""},
    ],
)
def test_create_requires_path_and_version(fields: dict) -> None:
    request = CreateRequest.model_construct(**fields)
    validator = FakeValidator()

    with pytest.raises(InvalidRequest):
        _pipeline(validator=validator).create(request)
    assert validator.calls == []


def test_request_model_rejects_empty_fields() -> None:
    with pytest.raises(ValidationError):
        CreateRequest(destination_path="", platform_version="3.3.0")
    with pytest.raises(ValidationError):
        CreateRequest(destination_path="app", platform_version="  ")
    with pytest.raises(ValidationError):
        CreateRequest(destination_path="app", platform_version="3.3.0", app_id="not an id")
    with pytest.raises(ValidationError):
        CreateRequest(destination_path="app", platform_version="../3.3.0")


@pytest.mark.skipif(not hasattr(asyncio, "eager_task_factory"), reason="eager tasks need Python 3.12+")
def test_work_is_deferred_with_eager_task_factory(request_33: CreateRequest) -> None:
    validator = FakeValidator()
    seen: list[PipelineStage] = []

    async def scenario():
        asyncio.get_running_loop().set_task_factory(asyncio.eager_task_factory)
        task = _pipeline(validator=validator, hooks=PipelineHooks(stage=seen.append)).create(request_33)
        assert validator.calls == []
        assert seen == []
        return await task

    result = asyncio.run(scenario())

    assert result.ok
    assert len(validator.calls) == 1


def test_work_is_deferred_until_the_next_loop_turn(request_33: CreateRequest) -> None:
    validator = FakeValidator()
    done: list[object] = []

    async def scenario():
        task = _pipeline(validator=validator).create(request_33)
        assert isinstance(task, asyncio.Task)
        assert validator.calls == []
        task.add_done_callback(lambda t: done.append(t.result()))
        return await task

    result = asyncio.run(scenario())

    assert result.ok
    assert len(validator.calls) == 1
    assert done == [result]


def test_stages_are_reported_in_order(request_33: CreateRequest) -> None:
    seen: list[PipelineStage] = []
    result = _run(_pipeline(hooks=PipelineHooks(stage=seen.append)), request_33)

    expected = [
        PipelineStage.VALIDATING,
        PipelineStage.FETCHING,
        PipelineStage.MATERIALIZING,
        PipelineStage.COMPLETE,
    ]
    assert seen == expected
    assert result.stages == expected


def test_cached_template_completes_without_download(
    tmp_path: Path, cache_root: Path, make_template, request_33: CreateRequest
) -> None:
    make_template("3.3.0")
    downloader = FakeDownloader()
    materializer = FakeMaterializer()
    fetcher = CachingTemplateFetcher(
        cache=FileSystemTemplateCache(cache_root), downloader=downloader, url_for=_url_for
    )

    result = _run(_pipeline(fetcher=fetcher, materializer=materializer), request_33)

    assert result.ok
    assert result.destination == (tmp_path / "app").resolve()
    assert len(materializer.calls) == 1
    assert downloader.calls == []


def test_missing_template_is_downloaded_then_created(
    cache_root: Path, request_33: CreateRequest
) -> None:
    downloader = FakeDownloader()
    materializer = FakeMaterializer()
    fetcher = CachingTemplateFetcher(
        cache=FileSystemTemplateCache(cache_root), downloader=downloader, url_for=_url_for
    )

    result = _run(_pipeline(fetcher=fetcher, materializer=materializer), request_33)

    assert result.ok
    assert downloader.calls == [(_url_for("3.3.0"), cache_root / "3.3.0")]
    assert materializer.calls == [request_33]


def test_failed_download_reports_error_and_skips_creation(
    cache_root: Path, request_33: CreateRequest
) -> None:
    boom = RuntimeError("network down")
    materializer = FakeMaterializer()
    fetcher = CachingTemplateFetcher(
        cache=FileSystemTemplateCache(cache_root),
        downloader=FakeDownloader(error=boom),
        url_for=_url_for,
    )

    result = _run(_pipeline(fetcher=fetcher, materializer=materializer), request_33)

    assert not result.ok
    assert isinstance(result.error, FetchFailure)
    assert result.error.__cause__ is boom
    assert result.stages[-1] is PipelineStage.FAILED
    assert materializer.calls == []


def test_non_empty_destination_stops_before_fetching(tmp_path: Path, request_33: CreateRequest) -> None:
    (tmp_path / "app").mkdir()
    (tmp_path / "app" / "file.js").write_text("// mine\n", encoding="utf-8")
    fetcher = FakeFetcher()
    materializer = FakeMaterializer()

    result = _run(
        _pipeline(validator=EmptyDirectoryValidator(), fetcher=fetcher, materializer=materializer),
        request_33,
    )

    assert isinstance(result.error, InvalidDestination)
    assert fetcher.calls == []
    assert materializer.calls == []


def test_materialization_error_is_delivered_once(request_33: CreateRequest) -> None:
    failure = OSError("read-only filesystem")
    seen: list[PipelineStage] = []

    result = _run(
        _pipeline(materializer=FakeMaterializer(error=failure), hooks=PipelineHooks(stage=seen.append)),
        request_33,
    )

    assert result.error is failure
    assert seen.count(PipelineStage.FAILED) == 1
    assert PipelineStage.COMPLETE not in seen


def test_end_to_end_lifts_config_xml(tmp_path: Path, cache_root: Path, make_template) -> None:
    make_template("3.3.0")
    cache = FileSystemTemplateCache(cache_root)
    pipeline = CreatePipeline(
        validator=EmptyDirectoryValidator(),
        fetcher=CachingTemplateFetcher(cache=cache, downloader=FakeDownloader(), url_for=_url_for),
        materializer=TemplateProjectMaterializer(cache),
    )

    result = _run(pipeline, CreateRequest(destination_path="my-app", platform_version="3.3.0"))

    project = tmp_path / "my-app"
    assert result.ok
    assert (project / "config.xml").is_file()
    assert not (project / "www" / "config.xml").exists()
    assert (project / "www" / "index.html").is_file()
    assert sorted(p.name for p in project.iterdir()) == [
        ".cordova",
        "config.xml",
        "hooks",
        "platforms",
        "plugins",
        "www",
    ]


def test_create_project_uses_settings_cache(tmp_path: Path, make_template) -> None:
    make_template("3.3.0")
    seen: list[PipelineStage] = []

    result = asyncio.run(
        create_project(
            settings=AppSettings(),
            request=CreateRequest(destination_path="wired-app", platform_version="3.3.0"),
            hooks=PipelineHooks(stage=seen.append),
        )
    )

    assert result.ok, result.error
    assert (tmp_path / "wired-app" / "config.xml").is_file()
    assert seen[-1] is PipelineStage.COMPLETE
