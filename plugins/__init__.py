# plugins/__init__.py
"""
Plugin System for Social Fields
===============================

This module provides the foundation for the social profile checkers. It
defines the base interface every checker implements and the registry that
maps a validation kind (e.g. "twitter") to its checker class.

A form field opts into a check by carrying the CSS class ``validate-<kind>``.
When the form is submitted the orchestrator looks the kind up here and asks
the checker whether the submitted value is valid.

Design Philosophy:
-----------------
- One checker per kind, registered explicitly by name
- Unknown kinds are valid: a field is only rejected by a checker that exists
- Checkers only reject on definitive evidence (malformed input, confirmed
  nonexistence); network trouble never rejects a value
- Remote lookups go through the shared RemoteFetcher so they are cached

Plugin Lifecycle:
---------------
1. Checker classes are defined in packages under 'plugins/'
2. Each package registers its checkers when imported
3. The plugin manager discovers and imports the packages at startup
4. A checker instance is created, with the shared fetcher, per check

Adding a New Kind:
----------------
Either subclass ProfileCheckerPlugin and call register_profile_checker(),
or register a plain function:

    >>> def is_valid_mastodon(value, fetcher):
    ...     return "@" in value
    >>> register_profile_check("mastodon", is_valid_mastodon,
    ...                        invalid_message="Not a Mastodon address.")
"""

from typing import Any, Callable, Dict, Optional, Type
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class PluginType(str, Enum):
    """
    Types of plugins supported by the system.

    Types:
        PROFILE_CHECKER: Plugins that validate a submitted social profile value
    """
    PROFILE_CHECKER = "profile_checker"


class PluginBase:
    """
    Base class for all plugins.

    Class Attributes:
        plugin_type (PluginType): The type of plugin
        service_name (str): Unique identifier for the kind this plugin handles
                           (e.g., "twitter", "facebook")
    """

    plugin_type: PluginType
    service_name: str

    @classmethod
    def get_metadata(cls) -> Dict[str, Any]:
        """
        Return metadata about the plugin for discovery and introspection.

        Returns:
            Dict[str, Any]: plugin_type, service_name and class_name
        """
        return {
            "plugin_type": cls.plugin_type,
            "service_name": cls.service_name,
            "class_name": cls.__name__
        }


class ProfileCheckerPlugin(PluginBase):
    """
    Base class for social profile checkers.

    A checker decides whether a submitted value (a handle or a profile URL)
    refers to an account of its kind. Checkers are constructed with the
    shared RemoteFetcher so their remote lookups are cached.

    Class Attributes:
        plugin_type (PluginType): Set to PROFILE_CHECKER
        invalid_message (Optional[str]): Default message shown on failure
    """

    plugin_type = PluginType.PROFILE_CHECKER
    invalid_message: Optional[str] = None

    def __init__(self, fetcher=None):
        self.fetcher = fetcher

    def is_valid(self, value: str) -> bool:
        """
        Check a submitted value.

        Args:
            value (str): The submitted value, never blank

        Returns:
            bool: False only when the value is known to be invalid

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement is_valid")


# Plugin registry
_profile_checkers: Dict[str, Type[ProfileCheckerPlugin]] = {}


def register_profile_checker(plugin_class: Type[ProfileCheckerPlugin]) -> None:
    """
    Register a profile checker under its service_name.

    Registering a second checker for the same kind replaces the first.

    Args:
        plugin_class (Type[ProfileCheckerPlugin]): The checker class to register
    """
    _profile_checkers[plugin_class.service_name] = plugin_class
    logger.info(f"Registered profile checker: {plugin_class.service_name}")


def register_profile_check(
    kind: str,
    check: Callable[[str, Any], bool],
    invalid_message: Optional[str] = None
) -> Type[ProfileCheckerPlugin]:
    """
    Register a plain function as the checker for ``kind``.

    Args:
        kind (str): The validation kind, used in the ``validate-<kind>`` class
        check (Callable[[str, Any], bool]): Called with the submitted value
            and the RemoteFetcher
        invalid_message (Optional[str]): Default failure message for the kind

    Returns:
        Type[ProfileCheckerPlugin]: The generated checker class
    """
    def is_valid(self, value: str) -> bool:
        return check(value, self.fetcher)

    plugin_class = type(
        f"{kind.title().replace('-', '').replace('_', '')}ProfileChecker",
        (ProfileCheckerPlugin,),
        {"service_name": kind, "invalid_message": invalid_message, "is_valid": is_valid}
    )
    register_profile_checker(plugin_class)
    return plugin_class


def unregister_profile_checker(kind: str) -> None:
    if _profile_checkers.pop(kind, None) is not None:
        logger.info(f"Unregistered profile checker: {kind}")


def get_profile_checker(kind: str) -> Optional[Type[ProfileCheckerPlugin]]:
    """
    Get a profile checker class by kind.

    Args:
        kind (str): The validation kind

    Returns:
        Optional[Type[ProfileCheckerPlugin]]: The checker class if registered, None otherwise
    """
    return _profile_checkers.get(kind)


def get_all_profile_checkers() -> Dict[str, Type[ProfileCheckerPlugin]]:
    """
    Get all registered profile checkers, in registration order.

    The dictionary is a copy of the internal registry, so modifying it will
    not affect the registry.
    """
    return _profile_checkers.copy()
