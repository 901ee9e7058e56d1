# plugins/twitter/__init__.py
"""
Twitter Plugin Package
======================

Provides the ``twitter`` validation kind. Fields with the CSS class
``validate-twitter`` are checked with TwitterProfileChecker: the handle
grammar is enforced locally and, unless TWITTER_VERIFY_REMOTE is off, the
profile page is probed to confirm the account exists.

The checker is registered with the plugin system when this package is
imported.
"""

from .checker import TwitterProfileChecker

from plugins import register_profile_checker

register_profile_checker(TwitterProfileChecker)
