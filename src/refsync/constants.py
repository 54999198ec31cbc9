"""Shared constants."""

# Quick-copy setting used when the user has not picked a citation style
APA_STYLE = "bibliography=http://www.zotero.org/styles/apa"

# Written after every note body when notes are folded into their parent
NOTE_SEPARATOR = "\n---\n"

# Tag added to items once they have a Notion page
SYNCED_TAG = "notion"

# Title of the link attachment pointing back at the Notion page
LINK_ATTACHMENT_TITLE = "Notion"

# Notion API version the client is pinned to
NOTION_VERSION = "2022-06-28"

# Notion request limits
RICH_TEXT_CHUNK_LENGTH = 2000
RICH_TEXT_MAX_CHUNKS = 100
SELECT_NAME_MAX_LENGTH = 100
