"""Database module for the local library store."""

from .models import Attachment, Item
from .schemas import CreatorSchema, CreatorType, ItemCreate, ItemType, NoteCreate
from .sqlite import Database, get_db, reset_db

__all__ = [
    "Attachment",
    "Item",
    "CreatorSchema",
    "CreatorType",
    "ItemCreate",
    "ItemType",
    "NoteCreate",
    "Database",
    "get_db",
    "reset_db",
]
