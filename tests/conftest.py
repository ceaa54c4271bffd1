"""Shared fixtures.

httpx traffic is mocked with ``respx``; the FastAPI app is driven through
``TestClient``. Async unit tests run on asyncio through the anyio plugin.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.fetcher import StaticFetcher
from app.main import create_app


PAGE_URL = "https://www.mediafire.com/file/abc123/name.zip/file"
DIRECT_LINK = "https://download.mediafire.com/name.zip?token=1"


def page_html(href: str | None = None, scrambled: str | None = None, script: str = "") -> str:
    attrs = ""
    if href is not None:
        attrs += f' href="{href}"'
    if scrambled is not None:
        attrs += f' data-scrambled-url="{scrambled}"'
    return f"""\
<!DOCTYPE html>
<html>
<head><title>name.zip - MediaFire</title></head>
<body>
  <div class="download_link">
    <a class="input popsok" id="downloadButton"{attrs}>Download (1.2MB)</a>
  </div>
  <script>{script}</script>
</body>
</html>
"""


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(render_mode="static", request_timeout=5, browser_timeout=1)


@pytest.fixture
def client(settings):
    app = create_app(settings=settings, fetcher=StaticFetcher(settings))
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
