from pydantic_settings import BaseSettings
import os
from pathlib import Path

# Try to load .env file explicitly before creating Settings
try:
    from dotenv import load_dotenv
    import logging
    _logger = logging.getLogger(__name__)

    # Look for .env in api directory (parent of forum directory)
    api_dir = Path(__file__).parent.parent.parent
    env_path = api_dir / ".env"

    if env_path.exists():
        load_dotenv(env_path, override=True)
        _logger.info(f"Loaded .env file from: {env_path}")
    else:
        # Fallback to current directory
        current_env = Path(".env")
        if current_env.exists():
            load_dotenv(current_env, override=True)
            _logger.info(f"Loaded .env file from: {current_env.absolute()}")
except Exception as e:
    import logging
    _logger = logging.getLogger(__name__)
    _logger.warning(f"Error loading .env file: {e}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - hosting platforms provide DATABASE_URL (uppercase)
    database_url: str = "sqlite:///./forum.db"

    # API
    api_v1_prefix: str = "/api/v1"
    environment: str = "production"

    # CORS
    cors_origins: list[str] = ["*"]

    # Public address of the forum, used for links in moderator posts
    base_url: str = "http://localhost:8000"

    # Site settings - read at call time so they can be changed at runtime
    allow_duplicate_topic_titles: bool = False
    title_fancy_entities: bool = False
    min_topic_title_length: int = 15
    max_topic_title_length: int = 255
    min_private_message_title_length: int = 2
    ninja_edit_window: int = 300  # seconds

    # Rate limits
    rate_limits_enabled: bool = True
    max_topics_per_day: int = 20
    max_favorites_per_day: int = 20

    # Similar topic suggestions
    max_similar_results: int = 5
    min_similar_terms: int = 2
    similar_candidate_limit: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        # Ensure we read DATABASE_URL from environment (platforms provide it uppercase)
        if not kwargs.get("database_url") and os.getenv("DATABASE_URL"):
            kwargs["database_url"] = os.getenv("DATABASE_URL")
        super().__init__(**kwargs)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")


# Create settings instance
settings = Settings()
