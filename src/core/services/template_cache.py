"""Global, version-keyed template cache.

Every location lives under a single user-level root and is derived from the
version only, so two projects created with the same version share one copy.
State is always recomputed from disk; nothing is remembered between calls,
which lets an interrupted download heal itself on the next run.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from core.domain.errors import InvalidRequest
from core.domain.models import CONFIG_XML, PAYLOAD_DIR, CacheEntry, TemplateState

# Templates either keep config.xml at the root or inside the payload.
MARKER_CANDIDATES: tuple[Path, ...] = (
    Path(CONFIG_XML),
    Path(PAYLOAD_DIR) / CONFIG_XML,
)


class FileSystemTemplateCache:
    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def locate(self, version: str) -> Path:
        cleaned = (version or "").strip()
        if not cleaned or cleaned in (".", "..") or any(sep in cleaned for sep in ("/", "\\")):
            raise InvalidRequest(f"invalid platform version: {version!r}")
        return self._root / cleaned

    def state(self, location: Path) -> TemplateState:
        if not location.is_dir():
            return TemplateState.ABSENT
        if any((location / marker).is_file() for marker in MARKER_CANDIDATES):
            return TemplateState.VALID
        return TemplateState.CORRUPT

    def evict_if_corrupt(self, location: Path) -> bool:
        """Delete `location` only if it is corrupt. Safe to call unconditionally."""

        if self.state(location) is not TemplateState.CORRUPT:
            return False
        shutil.rmtree(location)
        return True

    def entries(self) -> list[CacheEntry]:
        if not self._root.is_dir():
            return []
        return [
            CacheEntry(version=child.name, location=child, state=self.state(child))
            for child in sorted(self._root.iterdir())
            if child.is_dir()
        ]

    def remove(self, version: str) -> bool:
        location = self.locate(version)
        if not location.exists():
            return False
        shutil.rmtree(location)
        return True
