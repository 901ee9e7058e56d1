from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///social_fields.db"

    # Cache Settings
    CACHE_BACKEND: str = "memory"  # "memory" or "database"
    CACHE_TTL_SECONDS: int = 7 * 24 * 3600  # One week
    CACHE_KEY_PREFIX: str = "gvsfp"

    # Outbound request settings
    REMOTE_TIMEOUT_SECONDS: float = 10.0
    REMOTE_VERIFY_TLS: bool = True  # Set to False only for hosts with broken certificate stores

    # oEmbed Settings
    OEMBED_ENDPOINT: str = "https://publish.twitter.com/oembed"

    # Social profile kinds, in the order they are matched against field classes
    SOCIAL_ACCOUNTS: str = "twitter facebook"

    # Plugin System Settings
    PLUGINS_AUTO_DISCOVER: bool = True

    # Bearer tokens that may bypass the tweet embed cache
    PUBLISHER_API_KEYS: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Optional generic invalid message override
    DEFAULT_INVALID_MESSAGE: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"  # Allow extra fields from environment variables

    @property
    def social_accounts(self) -> List[str]:
        return [account for account in self.SOCIAL_ACCOUNTS.split() if account]

    @property
    def publisher_api_keys(self) -> List[str]:
        return [key for key in self.PUBLISHER_API_KEYS.split() if key]

@lru_cache()
def get_settings():
    return Settings()
