"""
Tweet Field
===========

A form field whose value is the URL of a single tweet.

On submission the value must look like a tweet status URL. At render time
the URL is turned into an embedded tweet card through oEmbed. The rendered
HTML is kept in the entry's metadata under ``tweet_output_<form>:<field>``,
so each entry only reaches the provider once; privileged viewers can force
a refresh with a ``cache`` or ``nocache`` query parameter.
"""

import logging
import re
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from entry_meta import EntryMetaStore
from oembed import OEmbedProvider

logger = logging.getLogger(__name__)

FIELD_TYPE = "tweet"

# Capability allowed to bypass the embed cache
BYPASS_CACHE_CAPABILITY = "publish_views"

TWEET_URL_PATTERN = re.compile(
    r"https?://(?:www\.)?(?:twitter|x)\.com/(?:.*?)/status/(\d+)/?",
    re.IGNORECASE | re.MULTILINE | re.DOTALL
)

INVALID_URL_MESSAGE = "Please enter a valid Website URL (e.g. https://example.com)."
INVALID_TWEET_MESSAGE = "Not a valid Tweet URL."

_http_url = TypeAdapter(HttpUrl)


class TemplateContext(BaseModel):
    """What the rendering layer knows about the field being rendered."""
    value: str = ""
    entry: Dict[str, Any] = Field(default_factory=dict)
    form_id: int
    field_id: int
    field_type: str = FIELD_TYPE
    oembed_tweet: bool = True


def tweet_cache_meta_key(form_id: int, field_id: int) -> str:
    """Entry meta key holding the rendered embed HTML of a tweet field."""
    return "tweet_output_%d:%d" % (int(form_id), int(field_id))


def tweet_id(url: str) -> Optional[str]:
    match = TWEET_URL_PATTERN.search(url or "")
    return match.group(1) if match else None


def validate_tweet_url(value: Optional[str]) -> Tuple[bool, str]:
    """
    Validate a submitted tweet URL.

    Blank values pass; whether the field is required is decided by the form
    engine. Anything else must be an http(s) URL pointing at a tweet status.

    Returns:
        Tuple[bool, str]: (is_valid, validation_message)
    """
    if value is None or not value.strip():
        return True, ""

    try:
        _http_url.validate_python(value.strip())
    except ValidationError:
        return False, INVALID_URL_MESSAGE

    if tweet_id(value) is None:
        return False, INVALID_TWEET_MESSAGE

    return True, ""


def tweet_field_options(field_options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Adjust the display options offered for a tweet field.

    Linking options make no sense for an embedded card, so they are removed
    and replaced by the ``oembed_tweet`` toggle.
    """
    options = dict(field_options)
    options.pop("show_as_link", None)
    options.pop("new_window", None)
    options["oembed_tweet"] = {
        "type": "checkbox",
        "value": True,
        "label": "Show as Embedded Tweet",
        "desc": "Display the tweet as an embedded card. If disabled, will display a link to the tweet.",
    }
    return options


def cache_allowed(has_capability: bool, query_params: Mapping[str, Any]) -> bool:
    """Whether the embed cache should be read and written for this request."""
    if not has_capability:
        return True
    return "cache" not in query_params and "nocache" not in query_params


class TweetEmbedResolver:
    """
    Resolve tweet URLs to embed HTML, caching the result per entry.

    Args:
        meta_store (EntryMetaStore): Entry-scoped storage for rendered HTML
        oembed (OEmbedProvider): Source of embed HTML
    """

    def __init__(self, meta_store: EntryMetaStore, oembed: OEmbedProvider):
        self.meta_store = meta_store
        self.oembed = oembed

    def resolve(
        self,
        tweet_url: str,
        entry_id: int,
        form_id: int,
        field_id: int,
        use_cache: bool = True,
        set_cache: bool = True,
        owner_form_id: Optional[int] = None
    ) -> Optional[str]:
        """
        Get embed HTML for a tweet.

        Args:
            tweet_url (str): The submitted tweet URL
            entry_id (int): Entry whose metadata holds the cached HTML
            form_id (int): Form the field belongs to
            field_id (int): The tweet field
            use_cache (bool): Read previously stored HTML if present
            set_cache (bool): Store freshly fetched HTML
            owner_form_id (Optional[int]): Form that owns the entry, if it
                differs from ``form_id``

        Returns:
            Optional[str]: Embed HTML, or None if the tweet is not embeddable
        """
        meta_key = tweet_cache_meta_key(form_id, field_id)

        if use_cache:
            try:
                cached_output = self.meta_store.get(entry_id, meta_key)
            except SQLAlchemyError as e:
                logger.warning(f"Embed cache lookup failed for entry {entry_id} ({meta_key}): {e}")
                cached_output = None
            if cached_output:
                logger.debug(f"Using cached embed for entry {entry_id} ({meta_key})")
                return cached_output

        html = self.oembed.fetch(tweet_url)

        if not html:
            return None

        if set_cache:
            try:
                self.meta_store.set(
                    entry_id,
                    meta_key,
                    html,
                    owner_form_id if owner_form_id is not None else form_id
                )
            except SQLAlchemyError as e:
                logger.warning(f"Could not store embed for entry {entry_id} ({meta_key}): {e}")

        return html


class TweetField:
    """Render hook for tweet fields."""

    def __init__(self, resolver: TweetEmbedResolver):
        self.resolver = resolver

    def filter_output(self, output: str, context: TemplateContext, use_cache: bool = True) -> str:
        """
        Replace the default field output with an embedded tweet.

        Returns:
            str: Embed HTML when the tweet can be embedded, ``output`` otherwise
        """
        entry_id = context.entry.get("id")
        if not entry_id:
            return output

        if context.field_type != FIELD_TYPE:
            return output

        if not context.oembed_tweet:
            return output

        embed_code = self.resolver.resolve(
            context.value,
            entry_id,
            context.form_id,
            context.field_id,
            use_cache=use_cache,
            set_cache=use_cache,
            owner_form_id=context.entry.get("form_id"),
        )

        return embed_code if embed_code else output
