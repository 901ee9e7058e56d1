"""
Remote Fetcher
==============

The shared "cached remote check" used by the profile checkers. A URL is
requested once, the response is snapshotted into a ``RemoteResponse`` and
stored in the cache under a hashed, namespaced key. Later calls for the same
URL are answered from the cache until the entry's TTL runs out.

Transport failures (timeouts, DNS, refused connections) are cached too, as a
``None`` entry, so a failing endpoint is not hit again on every request.
Callers receive ``None`` for such failures and decide how to degrade.
"""

import logging
from typing import Dict, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from cache import CacheStore, MISS, make_cache_key

logger = logging.getLogger(__name__)

WEEK_IN_SECONDS = 7 * 24 * 3600


class RemoteResponse(BaseModel):
    """Cacheable snapshot of an HTTP response."""
    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "RemoteResponse":
        return cls(
            status_code=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            body=response.text,
        )


class RemoteFetcher:
    """
    Blocking HTTP fetcher with per-URL response caching.

    Attributes:
        cache (CacheStore): Where response snapshots are kept
        client (httpx.Client): HTTP client used for outbound requests
        ttl (int): Lifetime of cache entries, in seconds
        key_prefix (str): Namespace for cache keys
    """

    def __init__(
        self,
        cache: CacheStore,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
        verify: bool = True,
        ttl: int = WEEK_IN_SECONDS,
        key_prefix: str = "gvsfp"
    ):
        self.cache = cache
        self.client = client or httpx.Client(timeout=timeout, verify=verify, follow_redirects=True)
        self.timeout = timeout
        self.ttl = ttl
        self.key_prefix = key_prefix
        if not verify:
            logger.warning("TLS certificate verification is disabled for outbound profile checks")

    def cache_key(self, url: str) -> str:
        return make_cache_key(url, self.key_prefix)

    def request(self, url: str, method: str = "GET") -> Optional[RemoteResponse]:
        """
        Perform an uncached request.

        Any status code, 404 included, is returned as a snapshot. Only
        transport-level failures yield ``None``.

        Args:
            url (str): URL to fetch
            method (str): HTTP method, e.g. GET or HEAD

        Returns:
            Optional[RemoteResponse]: The response snapshot, or None on error
        """
        logger.debug(f"{method} {url}")
        try:
            response = self.client.request(method, url, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.warning(f"Request to {url} failed: {e!r}")
            return None
        return RemoteResponse.from_httpx(response)

    def get_url(self, url: str, method: str = "GET") -> Optional[RemoteResponse]:
        """
        Fetch a URL through the cache.

        Args:
            url (str): URL to fetch
            method (str): HTTP method, e.g. GET or HEAD

        Returns:
            Optional[RemoteResponse]: The (possibly cached) response snapshot,
                or None if the request failed now or when it was cached
        """
        key = self.cache_key(url)
        try:
            cached = self.cache.get(key)
        except SQLAlchemyError as e:
            logger.warning(f"Cache lookup for {url} failed, fetching directly: {e}")
            cached = MISS

        if cached is not MISS:
            logger.debug(f"Cache hit for {url}")
            if cached is None:
                return None
            try:
                return RemoteResponse.model_validate(cached)
            except ValidationError:
                logger.warning(f"Ignoring malformed cache entry for {url}")

        response = self.request(url, method)

        if response is None:
            logger.warning(f"Caching failed lookup for {url} for {self.ttl} seconds")

        try:
            self.cache.set(key, response.model_dump() if response is not None else None, self.ttl)
        except SQLAlchemyError as e:
            logger.warning(f"Could not cache response for {url}: {e}")

        return response

    def close(self) -> None:
        self.client.close()
