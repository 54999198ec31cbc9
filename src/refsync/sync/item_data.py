"""Sync bookkeeping stored on library items."""

from typing import Optional

from ..constants import LINK_ATTACHMENT_TITLE, SYNCED_TAG
from ..db.models import Attachment, Item
from ..db.sqlite import Database
from .notion_utils import FullPage, convert_web_url_to_app_url


def get_notion_page_id(db: Database, item: Item) -> Optional[str]:
    """Get the ID of the Notion page saved for an item.

    Always read from the library; the given copy of the item may predate a
    page created earlier in the same job.
    """
    stored = db.get_item(item.id)
    if stored is None:
        return None
    return stored.notion_page_id or None


def save_notion_tag(db: Database, item: Item) -> None:
    """Tag an item as synced to Notion."""
    db.add_tag(item.id, SYNCED_TAG)
    if not item.has_tag(SYNCED_TAG):
        item.set_tags(item.get_tags() + [SYNCED_TAG])


def save_notion_link_attachment(db: Database, item: Item, page: FullPage) -> Attachment:
    """Link an item to its Notion page and remember the page ID."""
    app_url = convert_web_url_to_app_url(page.url)
    with db.get_session() as session:
        attachment = db.save_link_attachment(
            item.id, LINK_ATTACHMENT_TITLE, app_url, session=session
        )
        db.set_notion_page_id(item.id, page.page_id, session=session)
        session.flush()
        session.expunge(attachment)

    item.notion_page_id = page.page_id
    return attachment
