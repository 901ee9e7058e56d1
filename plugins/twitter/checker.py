# plugins/twitter/checker.py
"""
Twitter Profile Checker
=======================

Validates Twitter handles. A handle must match Twitter's username grammar
(1-15 letters, digits or underscores, optionally prefixed with "@"); values
that don't are rejected without touching the network.

Well-formed handles are then probed with a HEAD request against the public
profile page. Only a 404 rejects the handle. Any other status, and any
request failure, leaves it valid.
"""

import logging
import re
from typing import Optional

from plugins import ProfileCheckerPlugin
from plugins.twitter.config import TwitterSettings, get_twitter_settings

logger = logging.getLogger(__name__)

HANDLE_PATTERN = re.compile(r"^@?[A-Za-z0-9_]{1,15}$")


def is_valid_handle(value: str) -> bool:
    return HANDLE_PATTERN.fullmatch(value) is not None


class TwitterProfileChecker(ProfileCheckerPlugin):
    """
    Checker for the ``twitter`` kind.

    Class Attributes:
        service_name (str): "twitter"
        invalid_message (str): Default failure message
    """

    service_name = "twitter"
    invalid_message = get_twitter_settings().INVALID_MESSAGE

    def __init__(self, fetcher=None, settings: Optional[TwitterSettings] = None):
        super().__init__(fetcher)
        self.settings = settings or get_twitter_settings()

    def profile_url(self, value: str) -> str:
        return self.settings.PROFILE_URL.format(handle=value)

    def is_valid(self, value: str) -> bool:
        """
        Verify a Twitter account.

        Args:
            value (str): The submitted handle

        Returns:
            bool: True if the account is valid or empty, False if it is invalid
        """
        if value is None or value.strip() == "":
            return True

        if not is_valid_handle(value):
            return False

        if not self.settings.VERIFY_REMOTE or self.fetcher is None:
            return True

        # HEAD is enough to learn whether the profile page exists
        response = self.fetcher.get_url(self.profile_url(value), method="HEAD")

        if response is None:
            return True

        if response.status_code == 404:
            logger.info(f"Twitter account {value} does not exist")
            return False

        return True
