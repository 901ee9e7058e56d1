"""
Shared pytest fixtures and configuration
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict, List, Tuple, Union

import httpx
import pytest

# Add the project root to Python path to make imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["PUBLISHER_API_KEYS"] = "test-publisher-key"
os.environ["CACHE_BACKEND"] = "memory"

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from cache import InMemoryCache
from entry_meta import InMemoryEntryMetaStore
from oembed import OEmbedProvider
from plugin_manager import plugin_manager
from remote import RemoteFetcher
from tweet_field import TweetEmbedResolver

# Create in-memory SQLite database for testing
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Handler = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeRemote:
    """
    Scripted stand-in for the network.

    Routes are keyed by method and URL without its query string. Requests
    to unrouted URLs fail with a connection error, like an unreachable host.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls: List[httpx.Request] = []

    def add(self, method: str, url: str, handler: Handler) -> None:
        self.routes[(method.upper(), url)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        handler = self.routes.get((request.method, url))

        if handler is None:
            raise httpx.ConnectError(f"No route to {url}", request=request)
        if isinstance(handler, Exception):
            raise handler
        if isinstance(handler, httpx.Response):
            return handler
        return handler(request)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handle))

    def calls_to(self, url: str) -> List[httpx.Request]:
        return [
            r for r in self.calls
            if f"{r.url.scheme}://{r.url.host}{r.url.path}" == url
        ]


@pytest.fixture(scope="function")
def test_db_session_factory():
    """
    Create all tables in the test database and hand out its session factory.
    Tear down the tables after the test is complete.
    """
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    """A controllable clock: call it for the time, ``advance`` to move it."""
    class Clock:
        def __init__(self):
            self.now = 1_700_000_000.0

        def __call__(self):
            return self.now

        def advance(self, seconds):
            self.now += seconds

    return Clock()


@pytest.fixture
def fake_remote():
    return FakeRemote()


@pytest.fixture
def memory_cache(clock):
    return InMemoryCache(clock=clock)


@pytest.fixture
def fetcher(memory_cache, fake_remote):
    return RemoteFetcher(memory_cache, client=fake_remote.client(), ttl=3600)


@pytest.fixture
def meta_store():
    return InMemoryEntryMetaStore()


@pytest.fixture
def oembed_provider(fake_remote):
    return OEmbedProvider(client=fake_remote.client())


@pytest.fixture
def embed_resolver(meta_store, oembed_provider):
    return TweetEmbedResolver(meta_store, oembed_provider)


@pytest.fixture
def plugins():
    """The plugin manager with the bundled checkers loaded."""
    plugin_manager.discover_plugins()
    return plugin_manager
