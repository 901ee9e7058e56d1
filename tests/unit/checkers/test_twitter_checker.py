"""
Unit tests for the Twitter profile checker
"""

import httpx
import pytest

from plugins.twitter.checker import TwitterProfileChecker, is_valid_handle
from plugins.twitter.config import TwitterSettings

pytestmark = [pytest.mark.unit, pytest.mark.checkers]


@pytest.fixture
def checker(fetcher):
    return TwitterProfileChecker(fetcher=fetcher, settings=TwitterSettings())


class TestHandleGrammar:

    @pytest.mark.parametrize("handle", ["jack", "@jack", "a", "_under_score_", "A1234567890bcde"])
    def test_valid_handles(self, handle):
        assert is_valid_handle(handle)

    @pytest.mark.parametrize("handle", [
        "",
        "@",
        "has space",
        "hyphen-ated",
        "A1234567890bcdef",  # 16 characters
        "@@jack",
        "https://twitter.com/jack",
        "jack\n",
    ])
    def test_invalid_handles(self, handle):
        assert not is_valid_handle(handle)


class TestTwitterProfileChecker:
    """Test the twitter checker"""

    def test_service_name(self):
        assert TwitterProfileChecker.service_name == "twitter"
        assert TwitterProfileChecker.invalid_message == "The Twitter account is not valid"

    @pytest.mark.parametrize("value", ["", "   ", "\t\n"])
    def test_blank_is_valid(self, checker, fake_remote, value):
        assert checker.is_valid(value) is True
        assert fake_remote.calls == []

    @pytest.mark.parametrize("value", ["not a handle", "waytoolonghandle123", "bad!chars"])
    def test_malformed_rejected_without_network(self, checker, fake_remote, value):
        assert checker.is_valid(value) is False
        assert fake_remote.calls == []

    def test_existing_account(self, checker, fake_remote):
        fake_remote.add("HEAD", "https://twitter.com/jack", httpx.Response(200))

        assert checker.is_valid("jack") is True
        assert fake_remote.calls[0].method == "HEAD"

    def test_missing_account(self, checker, fake_remote):
        fake_remote.add("HEAD", "https://twitter.com/nobody_here", httpx.Response(404))

        assert checker.is_valid("nobody_here") is False

    @pytest.mark.parametrize("status", [301, 403, 429, 500, 503])
    def test_other_statuses_are_valid(self, checker, fake_remote, status):
        fake_remote.add("HEAD", "https://twitter.com/jack", httpx.Response(status))

        assert checker.is_valid("jack") is True

    def test_network_error_is_valid(self, checker, fake_remote):
        fake_remote.add("HEAD", "https://twitter.com/jack", httpx.ConnectTimeout("timed out"))

        assert checker.is_valid("jack") is True

    def test_network_error_is_cached(self, checker, fake_remote):
        fake_remote.add("HEAD", "https://twitter.com/jack", httpx.ConnectTimeout("timed out"))

        assert checker.is_valid("jack") is True
        assert checker.is_valid("jack") is True
        assert len(fake_remote.calls) == 1

    def test_result_is_cached(self, checker, fake_remote):
        fake_remote.add("HEAD", "https://twitter.com/nobody_here", httpx.Response(404))

        assert checker.is_valid("nobody_here") is False
        assert checker.is_valid("nobody_here") is False
        assert len(fake_remote.calls) == 1

    def test_remote_verification_can_be_disabled(self, fetcher, fake_remote):
        checker = TwitterProfileChecker(fetcher=fetcher, settings=TwitterSettings(VERIFY_REMOTE=False))
        fake_remote.add("HEAD", "https://twitter.com/nobody_here", httpx.Response(404))

        assert checker.is_valid("nobody_here") is True
        assert fake_remote.calls == []

    def test_at_sign_is_sent_as_submitted(self, checker, fake_remote):
        fake_remote.add("HEAD", "https://twitter.com/@jack", httpx.Response(200))

        assert checker.is_valid("@jack") is True
        assert len(fake_remote.calls_to("https://twitter.com/@jack")) == 1
