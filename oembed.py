"""
oEmbed provider client.

Asks the provider endpoint for ready-to-embed HTML for a URL. Every failure
mode (transport error, error status, undecodable body, no ``html`` member)
is logged and reported as ``None``.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://publish.twitter.com/oembed"


class OEmbedProvider:

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 10.0,
        verify: bool = True
    ):
        self.client = client or httpx.Client(timeout=timeout, verify=verify, follow_redirects=True)
        self.endpoint = endpoint
        self.timeout = timeout

    def fetch(self, url: str) -> Optional[str]:
        """
        Fetch embed HTML for ``url``.

        Returns:
            Optional[str]: The embed HTML, or None if the URL is not embeddable
        """
        try:
            response = self.client.get(self.endpoint, params={"url": url}, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.warning(f"oEmbed request for {url} failed: {e!r}")
            return None

        if response.status_code != 200:
            logger.info(f"oEmbed provider returned {response.status_code} for {url}")
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.warning(f"oEmbed provider returned invalid JSON for {url}")
            return None

        html = payload.get("html") if isinstance(payload, dict) else None
        if not isinstance(html, str) or not html.strip():
            logger.info(f"oEmbed response for {url} has no embed HTML")
            return None

        return html
