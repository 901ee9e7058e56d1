"""
Shared collaborators for the HTTP routes.

Each factory builds its object once per process from the settings. Routes
receive them through FastAPI's ``Depends`` so tests can replace any of them
with ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache

from cache import CacheStore, InMemoryCache, SQLAlchemyCache
from config import get_settings
from database import SessionLocal
from entry_meta import EntryMetaStore, SQLAlchemyEntryMetaStore
from form_validation import FormValidator
from oembed import OEmbedProvider
from plugin_manager import PluginManager, plugin_manager
from remote import RemoteFetcher
from tweet_field import TweetEmbedResolver, TweetField

logger = logging.getLogger(__name__)


@lru_cache()
def get_cache() -> CacheStore:
    settings = get_settings()
    if settings.CACHE_BACKEND == "database":
        logger.info("Using database cache backend")
        return SQLAlchemyCache(SessionLocal)
    if settings.CACHE_BACKEND != "memory":
        logger.warning(f"Unknown CACHE_BACKEND '{settings.CACHE_BACKEND}', using memory")
    return InMemoryCache()


@lru_cache()
def get_remote_fetcher() -> RemoteFetcher:
    settings = get_settings()
    return RemoteFetcher(
        get_cache(),
        timeout=settings.REMOTE_TIMEOUT_SECONDS,
        verify=settings.REMOTE_VERIFY_TLS,
        ttl=settings.CACHE_TTL_SECONDS,
        key_prefix=settings.CACHE_KEY_PREFIX,
    )


@lru_cache()
def get_entry_meta_store() -> EntryMetaStore:
    return SQLAlchemyEntryMetaStore(SessionLocal)


@lru_cache()
def get_oembed_provider() -> OEmbedProvider:
    settings = get_settings()
    return OEmbedProvider(
        endpoint=settings.OEMBED_ENDPOINT,
        timeout=settings.REMOTE_TIMEOUT_SECONDS,
        verify=settings.REMOTE_VERIFY_TLS,
    )


def get_plugin_manager() -> PluginManager:
    return plugin_manager


def get_form_validator() -> FormValidator:
    return FormValidator(get_plugin_manager(), get_remote_fetcher())


def get_tweet_field() -> TweetField:
    return TweetField(TweetEmbedResolver(get_entry_meta_store(), get_oembed_provider()))
