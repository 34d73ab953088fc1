from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urljoin

import requests
import requests_cache

logger = logging.getLogger(__name__)

CACHE_NAME = "study-planner-v1"
ASSETS = [
    "./",
    "./index.html",
    "./style.css",
    "./app.js",
    "./manifest.json",
    "https://unpkg.com/lucide@latest",
    "https://fonts.googleapis.com/css2?family=Inter:wght@400;600;700&family=Noto+Sans+JP:wght@400;500;700&display=swap",
]


class AssetCacheError(RuntimeError):
    """Raised when the offline asset cache cannot serve a request."""


class AssetCacheInstallError(AssetCacheError):
    """Raised when any asset fails to download during install."""


class OfflineAssetCache:
    """Named response cache for the planner's static assets.

    `install` pre-fetches the whole asset list or nothing; `fetch` answers
    from the cache first and falls back to the network without storing.
    """

    def __init__(
        self,
        base_url: str,
        *,
        cache_dir: Path | None = None,
        backend: str = "sqlite",
        timeout: float = 10.0,
        assets: list[str] | None = None,
        session: requests_cache.CachedSession | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._assets = list(ASSETS if assets is None else assets)
        if session is None:
            cache_root = cache_dir or Path(".weekplanner") / "cache"
            if backend == "sqlite":
                cache_root.mkdir(parents=True, exist_ok=True)
            session = requests_cache.CachedSession(str(cache_root / CACHE_NAME), backend=backend)
        self._session = session

    @property
    def session(self) -> requests_cache.CachedSession:
        return self._session

    def asset_urls(self) -> list[str]:
        return [self.resolve(asset) for asset in self._assets]

    def resolve(self, url: str) -> str:
        return urljoin(self._base_url, url)

    def install(self) -> list[str]:
        urls = self.asset_urls()
        responses: list[requests.Response] = []
        with self._session.cache_disabled():
            for url in urls:
                try:
                    response = self._session.get(url, timeout=self._timeout)
                    response.raise_for_status()
                except requests.RequestException as exc:
                    raise AssetCacheInstallError(f"Could not cache {url}: {exc}") from exc
                responses.append(response)

        for response in responses:
            self._session.cache.save_response(response)
        logger.info("Cached %d assets in %s", len(responses), CACHE_NAME)
        return urls

    def match(self, url: str) -> requests.Response | None:
        request = self._session.prepare_request(requests.Request("GET", self.resolve(url)))
        return self._session.cache.get_response(self._session.cache.create_key(request))

    def fetch(self, url: str) -> requests.Response:
        cached = self.match(url)
        if cached is not None:
            return cached
        resolved = self.resolve(url)
        logger.debug("Cache miss for %s, fetching from network", resolved)
        try:
            with self._session.cache_disabled():
                return self._session.get(resolved, timeout=self._timeout)
        except requests.RequestException as exc:
            raise AssetCacheError(f"Could not fetch {resolved}: {exc}") from exc

    def close(self) -> None:
        self._session.close()
