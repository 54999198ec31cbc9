"""Configuration management for refsync.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Library database
    db_path: Path

    # Notion (fallbacks for unset preferences)
    notion_token: Optional[str]
    notion_database_id: Optional[str]

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "REFSYNC_DB_PATH",
            str(Path.home() / ".refsync" / "library.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            notion_token=os.environ.get("NOTION_TOKEN"),
            notion_database_id=os.environ.get("NOTION_DATABASE_ID"),
        )

    def has_notion_config(self) -> bool:
        """Check if Notion configuration is present in the environment."""
        return bool(self.notion_token and self.notion_database_id)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
