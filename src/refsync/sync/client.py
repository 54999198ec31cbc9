"""Notion API client construction and error types."""

from notion_client import Client

from ..constants import NOTION_VERSION
from ..prefs import Pref, PreferenceStore


class NotionError(Exception):
    """Base exception for Notion sync errors."""

    pass


class NotionConfigError(NotionError):
    """Raised when Notion is not properly configured."""

    pass


class MissingReadCapabilityError(NotionError):
    """Raised when Notion returns a partial page because the integration can't read content."""

    def __init__(self):
        super().__init__(
            "Failed to create Notion link attachment. "
            "This will result in duplicate Notion pages. "
            'Please ensure that the "read content" capability is enabled '
            "for the integration at www.notion.so/my-integrations."
        )


def get_notion_client(prefs: PreferenceStore) -> Client:
    """Build a Notion client from the stored integration token.

    Raises:
        NotionConfigError: If no token is configured
    """
    token = prefs.get(Pref.NOTION_TOKEN)
    if not token:
        raise NotionConfigError(
            "Notion token not set. Run 'refsync prefs set notion_token <token>' "
            "or set NOTION_TOKEN."
        )

    return Client(auth=token, notion_version=NOTION_VERSION)
