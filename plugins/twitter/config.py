# plugins/twitter/config.py
"""
Configuration for Twitter plugin
"""

from pydantic_settings import BaseSettings
from functools import lru_cache

class TwitterSettings(BaseSettings):
    """
    Twitter-specific settings

    These settings can be configured via environment variables
    prefixed with TWITTER_, e.g., TWITTER_VERIFY_REMOTE
    """
    # Probe twitter.com to confirm the account exists
    VERIFY_REMOTE: bool = True

    # Profile page probed for existence; {handle} is the submitted value
    PROFILE_URL: str = "https://twitter.com/{handle}"

    INVALID_MESSAGE: str = "The Twitter account is not valid"

    class Config:
        env_prefix = "TWITTER_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_twitter_settings():
    """
    Get the Twitter settings, cached to avoid reloading
    """
    return TwitterSettings()
