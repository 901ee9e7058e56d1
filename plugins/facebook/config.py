# plugins/facebook/config.py
"""
Configuration for Facebook plugin
"""

from pydantic_settings import BaseSettings
from functools import lru_cache

class FacebookSettings(BaseSettings):
    """
    Facebook-specific settings

    These settings can be configured via environment variables
    prefixed with FACEBOOK_, e.g., FACEBOOK_GRAPH_URL
    """
    # Public graph lookup; {account} is the extracted page or account name
    GRAPH_URL: str = "https://graph.facebook.com/{account}"

    INVALID_MESSAGE: str = "This is not a valid Facebook page or account."

    class Config:
        env_prefix = "FACEBOOK_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_facebook_settings():
    """
    Get the Facebook settings, cached to avoid reloading
    """
    return FacebookSettings()
