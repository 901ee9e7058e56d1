# plugin_manager.py
"""
Plugin Manager for Social Fields
================================

This module discovers, loads and dispatches to the social profile checkers.
It is the single entry point the form validation orchestrator and the HTTP
routes use to answer "is this value valid for this kind?".

Key capabilities:
- Dynamic discovery of checker packages under 'plugins/' at runtime
- Ordered list of validation kinds (configured order first, then any
  other registered kinds)
- Checker instantiation with the shared RemoteFetcher
- Fail-open dispatch: unknown kinds, blank values and checker crashes are valid
- Per-kind invalid messages with a generic fallback

Usage:
------
    from plugin_manager import plugin_manager

    plugin_manager.discover_plugins()
    plugin_manager.check("twitter", "@jack", fetcher)
"""

import importlib
import logging
import os
from typing import Dict, List, Optional, Type

from config import get_settings
from plugins import (
    ProfileCheckerPlugin,
    get_all_profile_checkers,
    get_profile_checker
)

logger = logging.getLogger(__name__)

GENERIC_INVALID_MESSAGE = "The value for this field is invalid"


class PluginManager:
    """
    Manager for profile checker plugins.

    Args:
        accounts (Optional[List[str]]): Validation kinds in match order.
            Defaults to the SOCIAL_ACCOUNTS setting.
    """

    def __init__(self, accounts: Optional[List[str]] = None):
        self._plugin_dir = os.path.join(os.path.dirname(__file__), "plugins")
        self._loaded_plugins = set()
        self._accounts = list(accounts) if accounts is not None else None

    def discover_plugins(self):
        """
        Import every plugin package in the plugins directory.

        Each package registers its checkers on import. Packages already
        loaded are skipped; packages that fail to import are logged and
        skipped.
        """
        for item in sorted(os.listdir(self._plugin_dir)):
            if os.path.isdir(os.path.join(self._plugin_dir, item)) and not item.startswith('__'):
                module_name = f"plugins.{item}"
                if module_name not in self._loaded_plugins:
                    try:
                        importlib.import_module(module_name)
                        self._loaded_plugins.add(module_name)
                        logger.info(f"Discovered plugin: {module_name}")
                    except ImportError as e:
                        logger.error(f"Error loading plugin {module_name}: {e}")

    def get_accounts(self) -> List[str]:
        """
        Get the validation kinds in the order fields are matched against them.

        The configured kinds come first, in configured order; kinds registered
        by third parties but not configured follow in registration order.

        Returns:
            List[str]: Ordered, de-duplicated kind names
        """
        configured = self._accounts if self._accounts is not None else get_settings().social_accounts
        accounts = list(dict.fromkeys(configured))
        for kind in get_all_profile_checkers():
            if kind not in accounts:
                accounts.append(kind)
        return accounts

    def get_profile_checker(self, kind: str) -> Optional[Type[ProfileCheckerPlugin]]:
        return get_profile_checker(kind)

    def create_profile_checker(self, kind: str, **kwargs) -> Optional[ProfileCheckerPlugin]:
        """
        Create an instance of the checker for ``kind``.

        Args:
            kind (str): The validation kind
            **kwargs: Passed to the checker's constructor (e.g. fetcher)

        Returns:
            Optional[ProfileCheckerPlugin]: The checker, or None if the kind is unknown
        """
        plugin_class = self.get_profile_checker(kind)
        if plugin_class:
            return plugin_class(**kwargs)
        return None

    def check(self, kind: str, value, fetcher=None) -> bool:
        """
        Validate a submitted value against a kind.

        Args:
            kind (str): The validation kind, e.g. "twitter"
            value: The submitted value
            fetcher (Optional[RemoteFetcher]): Shared cached fetcher

        Returns:
            bool: True unless the checker confirms the value is invalid
        """
        if value is None or str(value).strip() == "":
            return True

        try:
            checker = self.create_profile_checker(kind, fetcher=fetcher)
            if checker is None:
                logger.debug(f"No profile checker registered for '{kind}'; treating value as valid")
                return True
            return bool(checker.is_valid(str(value)))
        except Exception as e:
            logger.error(f"Profile checker '{kind}' failed on {value!r}: {e}")
            return True

    def get_invalid_message(self, kind: str) -> str:
        """
        Get the invalid message for a kind.

        Returns:
            str: The checker's message, or the generic fallback
        """
        plugin_class = self.get_profile_checker(kind)
        if plugin_class and plugin_class.invalid_message:
            return plugin_class.invalid_message
        return get_settings().DEFAULT_INVALID_MESSAGE or GENERIC_INVALID_MESSAGE

    def get_all_plugin_metadata(self) -> Dict[str, Dict]:
        return {
            kind: plugin_class.get_metadata()
            for kind, plugin_class in get_all_profile_checkers().items()
        }


# Create a singleton instance
plugin_manager = PluginManager()
