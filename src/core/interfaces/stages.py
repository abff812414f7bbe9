"""Contratos de las etapas del pipeline de creación.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El orquestador recibe cada etapa inyectada, así los tests sustituyen
  cualquiera por un fake sin tocar estado global.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from core.domain.models import CacheEntry, CreateRequest, TemplateState


@runtime_checkable
class PathValidator(Protocol):
    """Comprueba que el destino sea usable como raíz de proyecto."""

    def validate(self, path: Path) -> None:
        """Lanza `InvalidDestination` si el destino no es usable."""

        ...


@runtime_checkable
class TemplateCache(Protocol):
    """Mapea versiones a directorios de la caché global."""

    def locate(self, version: str) -> Path:
        ...

    def state(self, location: Path) -> TemplateState:
        ...

    def evict_if_corrupt(self, location: Path) -> bool:
        ...

    def entries(self) -> list[CacheEntry]:
        ...

    def remove(self, version: str) -> bool:
        ...


@runtime_checkable
class TemplateDownloader(Protocol):
    """Colaborador de transporte: descarga y expande un archivo."""

    async def download(self, url: str, destination: Path) -> None:
        """Descarga `url` y la expande en `destination`; lanza si falla."""

        ...


@runtime_checkable
class TemplateFetcher(Protocol):
    """Garantiza una plantilla válida en caché para una versión."""

    async def ensure(self, version: str) -> Path:
        """Devuelve la ubicación de la plantilla; lanza `FetchFailure` si falla."""

        ...


@runtime_checkable
class ProjectMaterializer(Protocol):
    """Crea el proyecto en disco a partir de la plantilla en caché."""

    def create(self, request: CreateRequest) -> Path:
        """Devuelve el destino creado; lanza `MaterializationFailure` si falla."""

        ...
