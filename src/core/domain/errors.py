"""Taxonomía de errores del pipeline de creación.

Por qué una jerarquía propia:
- Cada etapa lanza un error tipado; el orquestador los convierte en un único
  `PipelineResult` sin inspeccionar mensajes.
- La CLI puede mapear tipos a códigos de salida.
"""

from __future__ import annotations


class CreateError(Exception):
    """Base de todos los fallos del pipeline."""


class InvalidRequest(CreateError, ValueError):
    """Faltan campos obligatorios (o no son usables) en la petición."""


class InvalidDestination(CreateError):
    """El destino existe y no es un directorio vacío."""

    def __init__(self, path: object, reason: str = "destination not empty") -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class FetchFailure(CreateError):
    """No se pudo obtener la plantilla de la versión pedida."""

    def __init__(self, version: str, url: str | None) -> None:
        if url is None:
            super().__init__(f"failed to resolve the template url for {version}")
        else:
            super().__init__(f"failed to download template {version} from {url}")
        self.version = version
        self.url = url


class MaterializationFailure(CreateError):
    """Falló una operación de filesystem al crear el proyecto."""
