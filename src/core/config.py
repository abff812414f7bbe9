"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/descarga) y servicios (caché de plantillas)
  lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "gapforge"

DEFAULT_TEMPLATE_URL = (
    "https://github.com/phonegap/phonegap-app-hello-world/archive/{version}.zip"
)


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def get_user_cache_dir() -> Path:
    """Directorio de caché por usuario.

    Las plantillas descargadas viven aquí: son globales al usuario y se
    comparten entre todos los proyectos creados con la misma versión.
    """

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("LOCALAPPDATA", str(Path.home())))
        return base / APP_DIR_NAME / "Cache"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".cache" / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        try:
            existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError):
            existing = {}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# gapforge user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="GAPFORGE_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout por request (segundos) al descargar plantillas.",
    )
    user_agent: str = Field(
        default="gapforge/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las descargas.",
    )

    template_url: str = Field(
        default=DEFAULT_TEMPLATE_URL,
        min_length=8,
        description="URL del archivo zip de la plantilla; debe contener '{version}'.",
    )
    template_cache_dir: Path | None = Field(
        default=None,
        description="Raíz de la caché de plantillas (por defecto, caché de usuario).",
    )
    default_platform_version: str = Field(
        default="3.3.0",
        min_length=1,
        description="Versión de plataforma usada cuando la CLI no recibe --version.",
    )

    @field_validator("template_url")
    @classmethod
    def _require_version_placeholder(cls, value: str) -> str:
        if "{version}" not in value:
            raise ValueError("template_url must contain a '{version}' placeholder")
        try:
            value.format(version="0")
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"template_url may only use the '{{version}}' placeholder: {exc}") from exc
        return value

    def templates_dir(self) -> Path:
        """Raíz efectiva de la caché (override o directorio de usuario)."""

        if self.template_cache_dir is not None:
            return self.template_cache_dir.expanduser()
        return get_user_cache_dir() / "templates"

    def template_url_for(self, version: str) -> str:
        return self.template_url.format(version=version)
