"""Edición del `config.xml` (widget W3C) de un proyecto recién creado.

Por qué aquí:
- El formato XML es un detalle de I/O; el materializador solo pide "pon este
  id/nombre".
- Se registran los namespaces habituales para no reescribirlos como `ns0:`.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

WIDGET_NS = "http://www.w3.org/ns/widgets"

_KNOWN_NAMESPACES = {
    "": WIDGET_NS,
    "gap": "http://phonegap.com/ns/1.0",
    "cdv": "http://cordova.apache.org/ns/1.0",
    "android": "http://schemas.android.com/apk/res/android",
}

for _prefix, _uri in _KNOWN_NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)


def _find_name(root: ET.Element) -> ET.Element | None:
    found = root.find(f"{{{WIDGET_NS}}}name")
    if found is None:
        found = root.find("name")
    return found


def update_widget(path: Path, *, app_id: str | None = None, app_name: str | None = None) -> bool:
    """Actualiza `widget/@id` y `widget/name`. Devuelve si hubo cambios."""

    if not app_id and not app_name:
        return False

    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    tree = ET.parse(path, parser=parser)
    root = tree.getroot()

    if app_id:
        root.set("id", app_id)
    if app_name:
        name = _find_name(root)
        if name is None:
            ns = WIDGET_NS if root.tag.startswith(f"{{{WIDGET_NS}}}") else None
            name = ET.SubElement(root, f"{{{ns}}}name" if ns else "name")
        name.text = app_name

    tree.write(path, encoding="utf-8", xml_declaration=True)
    return True


def read_widget(path: Path) -> dict[str, str | None]:
    """Lee `id`, `version` y `name` del widget (útil para CLI/tests)."""

    root = ET.parse(path).getroot()
    name = _find_name(root)
    return {
        "id": root.get("id"),
        "version": root.get("version"),
        "name": name.text if name is not None else None,
    }
