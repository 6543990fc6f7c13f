import os  # Read configuration from environment variables.
from dataclasses import dataclass

from dotenv import load_dotenv  # Load variables from a .env file.

load_dotenv()  # Pull values from .env into process environment.


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Service Provider API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    api_prefix: str = os.getenv("API_PREFIX", "/api/v1")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    database_url: str = os.getenv("DATABASE_URL", "")
    db_echo: bool = _flag("DB_ECHO")
    seed_on_startup: bool = _flag("SEED_ON_STARTUP")

    # Bearer tokens are HMAC signed with this key.
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    default_page_limit: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "10"))
    max_page_limit: int = int(os.getenv("MAX_PAGE_LIMIT", "100"))


# Values are read once at import, so the environment must be prepared first.
settings = Settings()
