"""Shared fixtures for unit tests."""

import io
import zipfile

import httpx
import pytest

from jdss_doc_mcp.fetcher import DocumentFetcher
from jdss_doc_mcp.models import DocsConfig
from jdss_doc_mcp.revealer import HtmlRevealer, PassthroughRevealer
from jdss_doc_mcp.service import DocumentationService


BASE_URL = "http://docs.test/"

INDEX_HTML = """
<html>
    <body>
        <h1>Documentation</h1>
        <ul>
            <li><a href="docs/EDSS/JEFFERSONVILLE/documentation/v4/">JEFFERSONVILLE v4</a></li>
            <li><a href="docs/EDSS/trunk/documentation/v4/">trunk v4</a></li>
        </ul>
    </body>
</html>
"""

LATEST_PAGE = """
<html><body>
<h2>Pools</h2>
<p>List all pools.</p>
GET /api/v4/pools
<h2>Volumes</h2>
<p>Create a volume.</p>
POST /api/v4/pools/{pool}/volumes {"name": "string", "size": "integer"}
Authorization: Bearer token
</body></html>
"""

TRUNK_PAGE = """
<html><body>
<h2>Pools</h2>
GET /api/v4/pools
<h2>Snapshots</h2>
DELETE /api/v4/snapshots/{snapshot}
</body></html>
"""


class RecordingRevealer(HtmlRevealer):
    """Revealer that records its calls and returns fixed markup."""

    def __init__(self):
        self.calls = []

    async def reveal(self, html, script_library):
        self.calls.append((html, script_library))
        return "<html>revealed</html>"


def make_zip(entries):
    """Build a ZIP archive in memory from (name, content) pairs, in order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as archive:
        for name, content in entries:
            archive.writestr(name, content)
    return buffer.getvalue()


def make_client(routes):
    """
    Create an httpx client backed by a MockTransport.

    Args:
        routes: Mapping of URL to httpx.Response, or to an exception to raise
    """
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(route, Exception):
            raise route
        # A fresh response per request so routes can be served repeatedly
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client.requests = requests
    return client


@pytest.fixture
def config():
    return DocsConfig(base_url=BASE_URL, revealer='none')


@pytest.fixture
def doc_routes():
    latest = BASE_URL + "docs/EDSS/JEFFERSONVILLE/documentation/v4/"
    trunk = BASE_URL + "docs/EDSS/trunk/documentation/v4/"
    return {
        BASE_URL: httpx.Response(200, text=INDEX_HTML),
        latest: httpx.Response(200, text=LATEST_PAGE),
        trunk: httpx.Response(200, text=TRUNK_PAGE),
    }


@pytest.fixture
def service_factory(config):
    """Build a DocumentationService over a mocked documentation host."""
    def factory(routes, revealer=None):
        client = make_client(routes)
        fetcher = DocumentFetcher(client=client, config=config)
        service = DocumentationService(config, fetcher=fetcher, revealer=revealer or PassthroughRevealer())
        return service, client
    return factory
