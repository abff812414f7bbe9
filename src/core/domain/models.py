"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- La petición de creación es inmutable una vez validada (`frozen`).

Nota:
- Estos modelos describen *qué* se crea, no *cómo* se obtiene la plantilla.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

# Marcador de plantilla válida y archivo que se eleva a la raíz del proyecto.
CONFIG_XML = "config.xml"

# Subárbol de contenido que se copia desde la plantilla.
PAYLOAD_DIR = "www"

# Directorios auxiliares creados en todo proyecto nuevo.
SKELETON_DIRS: tuple[str, ...] = (".cordova", "hooks", "platforms", "plugins")


class TemplateState(str, Enum):
    """Estado de una plantilla en caché, recalculado en cada consulta."""

    ABSENT = "absent"
    CORRUPT = "corrupt"
    VALID = "valid"


class PipelineStage(str, Enum):
    """Estados del pipeline de creación."""

    VALIDATING = "validating"
    FETCHING = "fetching"
    MATERIALIZING = "materializing"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (PipelineStage.COMPLETE, PipelineStage.FAILED)


class CreateRequest(BaseModel):
    """Petición de creación de un proyecto.

    Por qué existe:
    - Agrupa lo que la CLI recoge (ruta, versión, id/nombre opcionales) en una
      estructura validada antes de cualquier I/O.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    destination_path: str = Field(
        ...,
        min_length=1,
        description="Ruta del directorio del proyecto a crear.",
    )
    platform_version: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9][A-Za-z0-9._+-]*$",
        description="Versión de la plantilla (p.ej. '3.3.0').",
    )
    app_id: str | None = Field(
        default=None,
        pattern=r"^[A-Za-z][A-Za-z0-9_]*(\.[A-Za-z][A-Za-z0-9_]*)+$",
        description="Identificador reverse-domain (p.ej. 'com.example.app').",
    )
    app_name: str | None = Field(
        default=None,
        min_length=1,
        max_length=128,
        description="Nombre visible de la app en config.xml.",
    )

    @property
    def destination(self) -> Path:
        return Path(self.destination_path).expanduser().resolve()


class CacheEntry(BaseModel):
    """Una versión presente en la caché global de plantillas."""

    version: str = Field(..., min_length=1)
    location: Path
    state: TemplateState
