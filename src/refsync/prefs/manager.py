"""Store for user preferences.

Preferences live in the library database. The Notion token and database
ID fall back to the environment configuration when they are unset.
"""

from typing import Any, Optional

from ..config import Config, get_config
from ..db.sqlite import Database
from .models import Preference
from .schemas import PageTitleFormat, Pref, PreferenceResponse


class MissingPreferenceError(Exception):
    """Raised when a required preference has no value."""

    def __init__(self, pref: Pref):
        self.pref = pref
        super().__init__(f"Missing required preference: {pref.value}")


PREFS_METADATA: dict[Pref, dict[str, Any]] = {
    Pref.NOTION_TOKEN: {
        "type": "str",
        "secret": True,
        "env": "notion_token",
        "description": "Notion integration token",
    },
    Pref.NOTION_DATABASE_ID: {
        "type": "str",
        "env": "notion_database_id",
        "description": "ID of the Notion database pages are saved to",
    },
    Pref.PAGE_TITLE_FORMAT: {
        "type": "enum",
        "enum": PageTitleFormat,
        "options": [e.value for e in PageTitleFormat],
        "description": "Format of the Notion page title",
    },
    Pref.QUICK_COPY_FORMAT: {
        "type": "str",
        "description": "Citation format, e.g. bibliography=http://www.zotero.org/styles/apa",
    },
}


class PreferenceStore:
    """Reads and writes preferences."""

    def __init__(self, db: Database, config: Optional[Config] = None):
        self.db = db
        self.config = config or get_config()

    def _parse_value(self, pref: Pref, value: str) -> Any:
        """Convert a stored string to the preference's type."""
        metadata = PREFS_METADATA[pref]
        if metadata["type"] == "enum":
            try:
                return metadata["enum"](value)
            except ValueError:
                return None
        return value

    def get_raw(self, pref: Pref) -> Optional[str]:
        """Get the stored string, or the environment fallback."""
        with self.db.get_session() as session:
            row = session.get(Preference, pref.value)
            if row is not None:
                return row.value

        env_attr = PREFS_METADATA[pref].get("env")
        if env_attr:
            return getattr(self.config, env_attr)
        return None

    def get(self, pref: Pref) -> Any:
        """Get the parsed value of a preference, or None."""
        value = self.get_raw(pref)
        if value is None:
            return None
        return self._parse_value(pref, value)

    def get_required(self, pref: Pref) -> Any:
        """Get a preference that must be set.

        Raises:
            MissingPreferenceError: If the value is missing or empty
        """
        value = self.get(pref)
        if value is None or value == "":
            raise MissingPreferenceError(pref)
        return value

    def set(self, pref: Pref, value: str) -> PreferenceResponse:
        """Set a preference.

        Raises:
            ValueError: If an enum preference gets a value outside its options
        """
        metadata = PREFS_METADATA[pref]
        if metadata["type"] == "enum" and value not in metadata["options"]:
            options = ", ".join(metadata["options"])
            raise ValueError(f"Invalid value for {pref.value}: {value}. Options: {options}")

        with self.db.get_session() as session:
            row = session.get(Preference, pref.value)
            if row is None:
                session.add(Preference(key=pref.value, value=value))
            else:
                row.value = value

        return self.describe(pref)

    def unset(self, pref: Pref) -> bool:
        """Remove a stored preference. Returns False if it wasn't set."""
        with self.db.get_session() as session:
            row = session.get(Preference, pref.value)
            if row is None:
                return False
            session.delete(row)
            return True

    def describe(self, pref: Pref) -> PreferenceResponse:
        """Get a preference with its metadata for display."""
        metadata = PREFS_METADATA[pref]
        return PreferenceResponse(
            key=pref,
            value=self.get_raw(pref),
            description=metadata.get("description"),
            options=metadata.get("options"),
            secret=metadata.get("secret", False),
        )

    def all(self) -> list[PreferenceResponse]:
        """Get every preference for display."""
        return [self.describe(pref) for pref in Pref]
