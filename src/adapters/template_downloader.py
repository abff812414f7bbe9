"""Descarga de plantillas (colaborador de transporte).

Por qué un adaptador:
- El Core solo necesita "descargar y expandir en un directorio"; aquí viven
  los detalles de HTTP (httpx) y del formato zip.
- Los archivos de GitHub traen un directorio raíz (`repo-<version>/`) que se
  elimina al extraer para que la caché quede con el layout de la plantilla.
"""

from __future__ import annotations

import shutil
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings

ClientFactory = Callable[[AppSettings], httpx.AsyncClient]


class TemplateArchiveError(ValueError):
    """Archivo de plantilla vacío o con entradas inseguras."""


def _common_root(names: Iterable[str]) -> str | None:
    roots: set[str] = set()
    for name in names:
        parts = PurePosixPath(name).parts
        if len(parts) < 2:
            return None
        roots.add(parts[0])
    if len(roots) != 1:
        return None
    return roots.pop() + "/"


def extract_template_archive(archive_path: Path, target_dir: Path) -> list[str]:
    """Extrae un zip en `target_dir`, quitando el directorio raíz común.

    Rechaza rutas absolutas y entradas con `..`. Todas las entradas se validan
    antes de escribir nada, así un zip inválido no deja una plantilla a medias.
    Devuelve las rutas relativas escritas.
    """

    extracted: list[str] = []
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = [m for m in zf.infolist() if not m.is_dir()]
        if not members:
            raise TemplateArchiveError(f"template archive is empty: {archive_path}")

        root_prefix = _common_root(m.filename.replace("\\", "/") for m in members)

        target_resolved = target_dir.resolve()
        plan: list[tuple[zipfile.ZipInfo, PurePosixPath, Path]] = []
        for member in members:
            raw_name = member.filename.replace("\\", "/")
            if raw_name.startswith("/") or raw_name.startswith("../"):
                raise TemplateArchiveError(f"unsafe archive entry: {raw_name}")

            rel_name = raw_name[len(root_prefix) :] if root_prefix else raw_name
            if not rel_name:
                continue
            rel_path = PurePosixPath(rel_name)
            if any(part == ".." for part in rel_path.parts):
                raise TemplateArchiveError(f"unsafe archive entry: {raw_name}")

            dest_path = target_dir.joinpath(*rel_path.parts)
            if not dest_path.parent.resolve().is_relative_to(target_resolved):
                raise TemplateArchiveError(f"unsafe archive destination: {raw_name}")
            plan.append((member, rel_path, dest_path))

        target_dir.mkdir(parents=True, exist_ok=True)
        for member, rel_path, dest_path in plan:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(member, "r") as src, dest_path.open("wb") as dst:
                shutil.copyfileobj(src, dst)
            extracted.append(str(rel_path))
    return extracted


class HttpTemplateDownloader:
    """Descarga el zip de la plantilla y lo expande en la caché."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client_factory: ClientFactory = build_async_client,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client_factory = client_factory

    async def download(self, url: str, destination: Path) -> None:
        with tempfile.TemporaryDirectory(prefix="gapforge-") as tmp:
            archive = Path(tmp) / "template.zip"
            async with self._client_factory(self._settings) as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    with archive.open("wb") as out:
                        async for chunk in response.aiter_bytes():
                            out.write(chunk)
            extract_template_archive(archive, Path(destination))
