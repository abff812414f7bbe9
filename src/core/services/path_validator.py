"""Destination checks run before any template work."""

from __future__ import annotations

import os
from pathlib import Path

from core.domain.errors import InvalidDestination

_DIR_MARKERS = (".", "..")


class EmptyDirectoryValidator:
    """Accept a destination only when it is missing or an empty directory.

    Contents are never inspected: a single unrelated entry is enough to
    refuse, so existing user data is never overwritten.
    """

    def validate(self, path: Path) -> None:
        if not os.path.exists(path):
            return
        if not os.path.isdir(path):
            raise InvalidDestination(path, reason="destination is not a directory")

        entries = [name for name in os.listdir(path) if name not in _DIR_MARKERS]
        if entries:
            raise InvalidDestination(path)
