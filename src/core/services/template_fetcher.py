"""Make sure a usable template exists in the cache for a version."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from core.domain.errors import FetchFailure
from core.domain.models import TemplateState
from core.interfaces.stages import TemplateCache, TemplateDownloader


class CachingTemplateFetcher:
    """Return the cached template, downloading it when absent or corrupt.

    A failed download is not cleaned up and never retried here: the next call
    sees the location as absent/corrupt again and starts over.
    """

    def __init__(
        self,
        *,
        cache: TemplateCache,
        downloader: TemplateDownloader,
        url_for: Callable[[str], str],
        on_download: Callable[[str, str], None] | None = None,
    ) -> None:
        self._cache = cache
        self._downloader = downloader
        self._url_for = url_for
        self._on_download = on_download

    async def ensure(self, version: str) -> Path:
        location = self._cache.locate(version)
        if self._cache.state(location) is TemplateState.VALID:
            return location

        url: str | None = None
        try:
            url = self._url_for(version)
            if self._on_download:
                self._on_download(version, url)
            self._cache.evict_if_corrupt(location)
            await self._downloader.download(url, location)
        except Exception as exc:
            raise FetchFailure(version, url) from exc
        return location
