"""
Capability checks
=================

Resolves what the caller of a request is allowed to do. Callers presenting
one of the configured publisher API keys as a bearer token hold the
``publish_views`` capability, which lets them bypass the tweet embed cache.
"""

import logging
import secrets
from typing import Optional, Set

from fastapi import Request

from config import get_settings

logger = logging.getLogger(__name__)

PUBLISH_VIEWS = "publish_views"


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def get_capabilities(request: Request) -> Set[str]:
    """
    FastAPI dependency returning the capabilities of the caller.

    Args:
        request: The request object

    Returns:
        Set[str]: Capability names; empty for anonymous callers
    """
    token = _bearer_token(request)
    if not token:
        return set()

    # compare_digest only accepts ASCII str, so compare the encoded bytes
    presented = token.encode("utf-8")
    for key in get_settings().publisher_api_keys:
        if secrets.compare_digest(presented, key.encode("utf-8")):
            return {PUBLISH_VIEWS}

    logger.debug("Bearer token does not match any publisher key")
    return set()
