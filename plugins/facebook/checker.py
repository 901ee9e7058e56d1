# plugins/facebook/checker.py
"""
Facebook Profile Checker
========================

Validates Facebook pages and accounts. The submitted value may be a bare
account name or any of the usual Facebook URL shapes; the account name is
extracted and looked up on the public graph endpoint.

Names that cannot be a Facebook account are rejected without a lookup.
Otherwise the graph answers error code 803 ("alias does not exist") for
unknown names, and that is the only answer that rejects a value. Successful
lookups, other errors, undecodable bodies and failed requests all leave it
valid.
"""

import json
import logging
import re
from typing import Optional

from plugins import ProfileCheckerPlugin
from plugins.facebook.config import FacebookSettings, get_facebook_settings

logger = logging.getLogger(__name__)

# Groups: 1. scheme, 2. account name, 3. query string
FACEBOOK_URL_PATTERN = re.compile(
    r"^(https?://)?(?:www\.)?facebook\.com/(?:(?:\w\.)*#!/)?(?:pages/)?(?:[\w\-\.]*/)*([\w\-\.]*)(\?.+)?",
    re.IGNORECASE | re.MULTILINE | re.DOTALL
)

ALIAS_DOES_NOT_EXIST = 803

ACCOUNT_PATTERN = re.compile(r"[\w.\-]+")


def extract_account(value: str) -> str:
    """
    Get the account name out of a Facebook URL.

    Returns the last non-empty path segment before the query string, or
    ``value`` unchanged when it is not a Facebook URL.
    """
    match = FACEBOOK_URL_PATTERN.search(value)
    if not match:
        return value

    if match.group(2):
        return match.group(2)

    # Trailing slash: retry without it so the last real segment is captured
    path, _, _ = value.partition("?")
    stripped = path.rstrip("/")
    if stripped != path:
        match = FACEBOOK_URL_PATTERN.search(stripped)
        if match and match.group(2):
            return match.group(2)

    return value


def is_valid_account(account: str) -> bool:
    return ACCOUNT_PATTERN.fullmatch(account) is not None


def is_missing_alias(body: str) -> bool:
    try:
        payload = json.loads(body)
    except ValueError:
        return False

    if not isinstance(payload, dict):
        return False

    error = payload.get("error")
    if not isinstance(error, dict):
        return False

    try:
        return int(error.get("code")) == ALIAS_DOES_NOT_EXIST
    except (TypeError, ValueError):
        return False


class FacebookProfileChecker(ProfileCheckerPlugin):
    """
    Checker for the ``facebook`` kind.

    Class Attributes:
        service_name (str): "facebook"
        invalid_message (str): Default failure message
    """

    service_name = "facebook"
    invalid_message = get_facebook_settings().INVALID_MESSAGE

    def __init__(self, fetcher=None, settings: Optional[FacebookSettings] = None):
        super().__init__(fetcher)
        self.settings = settings or get_facebook_settings()

    def graph_url(self, account: str) -> str:
        return self.settings.GRAPH_URL.format(account=account)

    def is_valid(self, value: str) -> bool:
        """
        Check the Facebook graph for the account.

        Args:
            value (str): The submitted account name or URL

        Returns:
            bool: True if the account is valid or empty, False if it is invalid
        """
        if value is None or value.strip() == "":
            return True

        account = extract_account(value.strip())
        if not is_valid_account(account):
            logger.info(f"Unparseable Facebook account {value!r}")
            return False

        if self.fetcher is None:
            return True

        response = self.fetcher.get_url(self.graph_url(account))

        # A failed request says nothing about the account
        if response is None:
            return True

        if is_missing_alias(response.body):
            logger.info(f"Facebook account {account} does not exist")
            return False

        return True
