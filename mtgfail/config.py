from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class CollisionPolicy(str, Enum):
    """How the catalog parser handles two records with the same normalized name."""

    LAST_WINS = "last_wins"
    FIRST_WINS = "first_wins"
    # Last record wins, every collision is logged and reported
    REPORT = "report"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MTGFAIL_")

    app_name: str = "mtgfail"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/mtgfail"

    catalog_index_url: str = "https://api.scryfall.com/bulk-data"
    catalog_type: str = "default_cards"

    # Bulk upload
    upload_workers: int = 100
    # 1 means a failed write is never retried
    upload_write_attempts: int = 1
    collision_policy: CollisionPolicy = CollisionPolicy.LAST_WINS

    # Deck list retrieval, timeouts are per attempt
    tappedout_fetch_attempts: int = 3
    tappedout_timeout: float = 5.0
    deckbox_fetch_attempts: int = 10
    deckbox_timeout: float = 30.0
    fetch_retry_delay: float = 0.1

    user_agent: str = "mtgfail/0.1"


settings = Settings()


# =============================================================================
# DOCUMENT STORE
# =============================================================================

# Collection holding one document per normalized card name
CARDS_COLLECTION = "cards"
