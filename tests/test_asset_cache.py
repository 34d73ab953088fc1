import io
from urllib.parse import urljoin

import pytest
import requests_cache
from requests.adapters import HTTPAdapter
from urllib3 import HTTPResponse

from weekplanner.services.asset_cache import (
    ASSETS,
    CACHE_NAME,
    AssetCacheError,
    AssetCacheInstallError,
    OfflineAssetCache,
)

BASE_URL = "http://planner.test/app/"


class StubAdapter(HTTPAdapter):
    """Answers requests from a fixed route table instead of the network."""

    def __init__(self, routes: dict[str, bytes], failing: set[str] | None = None) -> None:
        super().__init__()
        self.routes = routes
        self.failing = failing or set()
        self.calls: list[str] = []

    def send(self, request, **kwargs):
        self.calls.append(request.url)
        if request.url in self.failing:
            body, status, reason = b"", 500, "Server Error"
        elif request.url in self.routes:
            body, status, reason = self.routes[request.url], 200, "OK"
        else:
            body, status, reason = b"", 404, "Not Found"
        raw = HTTPResponse(
            body=io.BytesIO(body),
            headers={"Content-Type": "text/plain", "Content-Length": str(len(body))},
            status=status,
            reason=reason,
            preload_content=False,
        )
        return self.build_response(request, raw)


def _routes(assets: list[str]) -> dict[str, bytes]:
    urls = [urljoin(BASE_URL, asset) for asset in assets]
    return {url: f"body of {url}".encode() for url in urls}


@pytest.fixture
def stub():
    return StubAdapter(_routes(ASSETS))


@pytest.fixture
def cache(stub):
    session = requests_cache.CachedSession(CACHE_NAME, backend="memory")
    session.mount("http://", stub)
    session.mount("https://", stub)
    asset_cache = OfflineAssetCache(BASE_URL, session=session)
    yield asset_cache
    asset_cache.close()


def test_asset_urls_resolve_relative_entries(cache):
    urls = cache.asset_urls()

    assert urls[0] == BASE_URL
    assert urls[1] == BASE_URL + "index.html"
    assert urls[4] == BASE_URL + "manifest.json"
    assert urls[5] == "https://unpkg.com/lucide@latest"
    assert len(urls) == len(ASSETS)


def test_install_stores_every_asset(cache, stub):
    assert cache.install() == cache.asset_urls()

    for url in cache.asset_urls():
        cached = cache.match(url)
        assert cached is not None
        assert cached.content == f"body of {url}".encode()


def test_fetch_prefers_cache_after_install(cache, stub):
    cache.install()
    calls_after_install = len(stub.calls)

    response = cache.fetch("./style.css")

    assert response.status_code == 200
    assert response.content == f"body of {BASE_URL}style.css".encode()
    assert len(stub.calls) == calls_after_install


def test_fetch_miss_goes_to_network_without_caching(cache, stub):
    stub.routes[BASE_URL + "extra.js"] = b"extra"

    first = cache.fetch("./extra.js")
    second = cache.fetch("./extra.js")

    assert first.content == b"extra"
    assert second.content == b"extra"
    assert stub.calls == [BASE_URL + "extra.js", BASE_URL + "extra.js"]
    assert cache.match("./extra.js") is None


def test_install_is_all_or_nothing(stub):
    stub.failing.add(BASE_URL + "app.js")
    session = requests_cache.CachedSession(CACHE_NAME, backend="memory")
    session.mount("http://", stub)
    session.mount("https://", stub)
    cache = OfflineAssetCache(BASE_URL, session=session)

    with pytest.raises(AssetCacheInstallError):
        cache.install()

    for url in cache.asset_urls():
        assert cache.match(url) is None


def test_install_error_is_an_asset_cache_error():
    assert issubclass(AssetCacheInstallError, AssetCacheError)
    assert issubclass(AssetCacheError, RuntimeError)
