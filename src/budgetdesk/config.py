"""Runtime configuration and logging setup."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

DEFAULT_SECRET_KEY = "dev-secret"


@dataclass(frozen=True)
class Config:
    """Application settings, normally read from the environment."""

    database_url: Optional[str] = None
    database_path: Optional[str] = None
    secret_key: str = DEFAULT_SECRET_KEY
    token_ttl_hours: int = 24
    log_level: str = "INFO"
    testing: bool = False

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        """Build settings from environment variables (and a .env file if present).

        Keyword overrides win over the environment, which lets the CLI pass
        its --db-path option through unchanged.
        """
        load_dotenv()
        values = {
            "database_url": os.getenv("BUDGETDESK_DATABASE_URL"),
            "database_path": os.getenv("BUDGETDESK_DB_PATH"),
            "secret_key": os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY),
            "token_ttl_hours": int(os.getenv("BUDGETDESK_TOKEN_TTL_HOURS", "24")),
            "log_level": os.getenv("BUDGETDESK_LOG_LEVEL", "INFO"),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the budgetdesk logger."""
    logger = logging.getLogger("budgetdesk")
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
