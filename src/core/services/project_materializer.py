"""Turn a cached template into a new project directory."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from xml.etree.ElementTree import ParseError

from adapters.config_xml import update_widget
from core.domain.errors import MaterializationFailure
from core.domain.models import CONFIG_XML, PAYLOAD_DIR, SKELETON_DIRS, CreateRequest
from core.interfaces.stages import TemplateCache


class TemplateProjectMaterializer:
    """Copy the template payload and lay out the project skeleton.

    Layout produced under the destination:

        config.xml   (lifted out of www/ when the template ships one)
        www/
        .cordova/  hooks/  platforms/  plugins/

    The cached template is only read. Every check and move happens on the
    destination copy so the cache stays reusable for later projects.
    """

    def __init__(self, cache: TemplateCache) -> None:
        self._cache = cache

    def create(self, request: CreateRequest) -> Path:
        destination = request.destination
        template = self._cache.locate(request.platform_version)
        try:
            destination.mkdir(parents=True, exist_ok=True)
            shutil.copytree(
                template / PAYLOAD_DIR,
                destination / PAYLOAD_DIR,
                dirs_exist_ok=True,
            )
            for name in SKELETON_DIRS:
                (destination / name).mkdir(exist_ok=True)

            config = self._lift_config_xml(destination)
            if config is not None and (request.app_id or request.app_name):
                update_widget(config, app_id=request.app_id, app_name=request.app_name)
        except (OSError, ParseError) as exc:
            raise MaterializationFailure(
                f"failed to create project at {destination}: {exc}"
            ) from exc
        return destination

    @staticmethod
    def _lift_config_xml(destination: Path) -> Path | None:
        nested = destination / PAYLOAD_DIR / CONFIG_XML
        root = destination / CONFIG_XML
        if nested.is_file():
            os.replace(nested, root)
        return root if root.is_file() else None
