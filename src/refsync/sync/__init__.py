"""Sync module for saving library items to a Notion database."""

from .client import (
    MissingReadCapabilityError,
    NotionConfigError,
    NotionError,
    get_notion_client,
)
from .notion_utils import FullPage, PageResult, PartialPage, to_page_result
from .progress import ProgressWindow
from .property_builder import build_properties
from .sync_job import (
    ItemSyncError,
    ItemSyncState,
    SyncJob,
    SyncJobParams,
    perform_sync_job,
)

__all__ = [
    # Notion client
    "MissingReadCapabilityError",
    "NotionConfigError",
    "NotionError",
    "get_notion_client",
    # Responses
    "FullPage",
    "PageResult",
    "PartialPage",
    "to_page_result",
    # Sync job
    "ItemSyncError",
    "ItemSyncState",
    "ProgressWindow",
    "SyncJob",
    "SyncJobParams",
    "build_properties",
    "perform_sync_job",
]
