import sys
from pathlib import Path

import pytest

# Ensure `src/` is on sys.path so tests can import `core`, `adapters`, `cli`.
SRC = str(Path(__file__).resolve().parents[1] / "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)


CONFIG_XML_TEXT = """<?xml version='1.0' encoding='utf-8'?>
<widget xmlns="http://www.w3.org/ns/widgets" xmlns:gap="http://phonegap.com/ns/1.0" id="com.phonegap.helloworld" version="1.0.0">
    <name>Hello World</name>
    <!-- platforms -->
    <gap:platform name="ios" />
</widget>
"""


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep user-level config/cache and any local .env out of the tests.
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.setenv("GAPFORGE_TEMPLATE_CACHE_DIR", str(tmp_path / "cache"))
    for name in (
        "GAPFORGE_TEMPLATE_URL",
        "GAPFORGE_DEFAULT_PLATFORM_VERSION",
        "GAPFORGE_HTTP_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def make_template(cache_root: Path):
    """Write a hello-world style template into the cache and return its path."""

    def _make(version: str = "3.3.0", *, with_config: bool = True) -> Path:
        location = cache_root / version
        www = location / "www"
        (www / "js").mkdir(parents=True, exist_ok=True)
        (www / "index.html").write_text("<html></html>\n", encoding="utf-8")
        (www / "js" / "index.js").write_text("var app = {};\n", encoding="utf-8")
        if with_config:
            (www / "config.xml").write_text(CONFIG_XML_TEXT, encoding="utf-8")
        return location

    return _make


@pytest.fixture
def config_xml(tmp_path: Path) -> Path:
    path = tmp_path / "config.xml"
    path.write_text(CONFIG_XML_TEXT, encoding="utf-8")
    return path
