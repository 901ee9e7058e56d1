"""
Authentication module for Social Fields.

Provides capability resolution for incoming requests.
"""

from .capabilities import (
    PUBLISH_VIEWS,
    get_capabilities
)

__all__ = [
    "PUBLISH_VIEWS",
    "get_capabilities",
]
