# plugins/facebook/__init__.py
"""
Facebook Plugin Package
=======================

Provides the ``facebook`` validation kind. Fields with the CSS class
``validate-facebook`` are checked with FacebookProfileChecker, which looks
the page or account up on the public graph endpoint.

The checker is registered with the plugin system when this package is
imported.
"""

from .checker import FacebookProfileChecker

from plugins import register_profile_checker

register_profile_checker(FacebookProfileChecker)
