"""
Tweet Embed Routes
==================

Renders the value of a tweet field for an entry. The embedded card is
served from the entry's cache when available. Callers with the
``publish_views`` capability can add ``?cache`` or ``?nocache`` to refetch
it from the oEmbed provider.
"""

import html
import logging
from typing import Set

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from auth import PUBLISH_VIEWS, get_capabilities
from dependencies import get_tweet_field
from tweet_field import TemplateContext, TweetField, cache_allowed

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/entries", tags=["Tweets"])

def render_link(url: str) -> str:
    escaped = html.escape(url, quote=True)
    return f'<a href="{escaped}" rel="noopener">{escaped}</a>'

@router.get("/{entry_id}/tweet", response_class=HTMLResponse)
def render_tweet(
    request: Request,
    entry_id: int,
    form_id: int,
    field_id: int,
    url: str,
    oembed_tweet: bool = Query(True),
    capabilities: Set[str] = Depends(get_capabilities),
    tweet_field: TweetField = Depends(get_tweet_field)
):
    """Render a tweet field as an embedded card, or as a link if it can't be embedded."""
    use_cache = cache_allowed(PUBLISH_VIEWS in capabilities, request.query_params)
    if not use_cache:
        logger.info(f"Refreshing tweet embed for entry {entry_id}, field {field_id}")

    context = TemplateContext(
        value=url,
        entry={"id": entry_id, "form_id": form_id},
        form_id=form_id,
        field_id=field_id,
        oembed_tweet=oembed_tweet,
    )

    return HTMLResponse(tweet_field.filter_output(render_link(url), context, use_cache=use_cache))
