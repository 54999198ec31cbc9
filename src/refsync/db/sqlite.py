"""SQLite database operations.

Handles database connection, session management, and CRUD operations
for library items, notes and link attachments.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterable, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..utils import unique
from .models import Attachment, Base, Item
from .schemas import ItemCreate, ItemType, NoteCreate


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     REFSYNC_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "REFSYNC_DB_PATH",
                str(Path.home() / ".refsync" / "library.db"),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # For in-memory databases, use StaticPool to reuse the same connection
        # This ensures all sessions share the same in-memory database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        # Import preference models to register them with Base
        from ..prefs.models import Preference  # noqa: F401

        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Item Operations
    # ========================================================================

    def create_item(self, item: ItemCreate, session: Optional[Session] = None) -> Item:
        """Create a new regular item."""

        def _create(s: Session) -> Item:
            db_item = Item(
                item_type=item.item_type.value,
                title=item.title,
                short_title=item.short_title,
                abstract=item.abstract,
                date=item.date,
                publication=item.publication,
                volume=item.volume,
                issue=item.issue,
                pages=item.pages,
                publisher=item.publisher,
                url=item.url,
                doi=item.doi,
                extra=item.extra,
                citation_key=item.citation_key,
            )
            # Set JSON fields
            db_item.set_creators(item.creators)
            db_item.set_tags(item.tags)
            db_item.set_collections(item.collections)

            s.add(db_item)
            s.flush()
            return db_item

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                db_item = _create(s)
                s.refresh(db_item)
                s.expunge(db_item)
                return db_item

    def create_note(self, note: NoteCreate, session: Optional[Session] = None) -> Item:
        """Create a note, optionally as a child of a regular item.

        Raises:
            ValueError: If the parent does not exist or is itself a note
        """

        def _create(s: Session) -> Item:
            if note.parent_id is not None:
                parent = s.get(Item, note.parent_id)
                if parent is None:
                    raise ValueError(f"Parent item {note.parent_id} not found")
                if parent.is_note():
                    raise ValueError("Notes cannot be children of other notes")

            db_note = Item(
                item_type=ItemType.NOTE.value,
                note=note.note,
                parent_id=note.parent_id,
            )
            s.add(db_note)
            s.flush()
            return db_note

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                db_note = _create(s)
                s.refresh(db_note)
                s.expunge(db_note)
                return db_note

    def get_item(self, item_id: int, session: Optional[Session] = None) -> Optional[Item]:
        """Get an item by ID."""

        def _get(s: Session) -> Optional[Item]:
            return s.get(Item, item_id)

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                item = _get(s)
                if item:
                    s.expunge(item)
                return item

    def get_items(
        self, item_ids: Iterable[int], session: Optional[Session] = None
    ) -> list[Item]:
        """Get items by ID, in the order given.

        IDs that no longer resolve are dropped; repeated IDs are returned once.
        """
        ids = unique(item_ids)

        def _get(s: Session) -> list[Item]:
            if not ids:
                return []
            stmt = select(Item).where(Item.id.in_(ids))
            found = {item.id: item for item in s.execute(stmt).scalars().all()}
            return [found[item_id] for item_id in ids if item_id in found]

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                items = _get(s)
                for item in items:
                    s.expunge(item)
                return items

    def get_all_items(
        self, include_notes: bool = False, session: Optional[Session] = None
    ) -> list[Item]:
        """Get all items ordered by ID."""

        def _get(s: Session) -> list[Item]:
            stmt = select(Item).order_by(Item.id)
            if not include_notes:
                stmt = stmt.where(Item.item_type != ItemType.NOTE.value)
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                items = _get(s)
                for item in items:
                    s.expunge(item)
                return items

    def get_items_in_collection(
        self, collection: str, session: Optional[Session] = None
    ) -> list[Item]:
        """Get the regular items filed under a collection."""
        return [
            item
            for item in self.get_all_items(session=session)
            if collection in item.get_collections()
        ]

    def get_notes(self, item_id: int, session: Optional[Session] = None) -> list[int]:
        """Get the IDs of an item's child notes, oldest first."""

        def _get(s: Session) -> list[int]:
            stmt = (
                select(Item.id)
                .where(Item.parent_id == item_id, Item.item_type == ItemType.NOTE.value)
                .order_by(Item.id)
            )
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                return _get(s)

    def delete_item(self, item_id: int, session: Optional[Session] = None) -> bool:
        """Delete an item and its attachments.

        Child notes are kept; their parent reference no longer resolves.
        """

        def _delete(s: Session) -> bool:
            db_item = s.get(Item, item_id)
            if not db_item:
                return False
            s.delete(db_item)
            return True

        if session:
            return _delete(session)
        else:
            with self.get_session() as s:
                return _delete(s)

    # ========================================================================
    # Sync Data Operations
    # ========================================================================

    def add_tag(self, item_id: int, tag: str, session: Optional[Session] = None) -> bool:
        """Add a tag to an item. Returns False if the item doesn't exist."""

        def _add(s: Session) -> bool:
            db_item = s.get(Item, item_id)
            if not db_item:
                return False
            tags = db_item.get_tags()
            if tag not in tags:
                db_item.set_tags(tags + [tag])
            return True

        if session:
            return _add(session)
        else:
            with self.get_session() as s:
                return _add(s)

    def set_notion_page_id(
        self, item_id: int, page_id: Optional[str], session: Optional[Session] = None
    ) -> None:
        """Record (or clear) the Notion page associated with an item."""

        def _set(s: Session) -> None:
            db_item = s.get(Item, item_id)
            if db_item:
                db_item.notion_page_id = page_id

        if session:
            _set(session)
        else:
            with self.get_session() as s:
                _set(s)

    def get_link_attachment(
        self, item_id: int, title: str, session: Optional[Session] = None
    ) -> Optional[Attachment]:
        """Get an item's link attachment by title."""

        def _get(s: Session) -> Optional[Attachment]:
            stmt = select(Attachment).where(
                Attachment.item_id == item_id, Attachment.title == title
            )
            return s.execute(stmt).scalars().first()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                attachment = _get(s)
                if attachment:
                    s.expunge(attachment)
                return attachment

    def save_link_attachment(
        self, item_id: int, title: str, url: str, session: Optional[Session] = None
    ) -> Attachment:
        """Create or update the link attachment with the given title."""

        def _save(s: Session) -> Attachment:
            attachment = self.get_link_attachment(item_id, title, session=s)
            if attachment:
                attachment.url = url
            else:
                attachment = Attachment(item_id=item_id, title=title, url=url)
                s.add(attachment)
            s.flush()
            return attachment

        if session:
            return _save(session)
        else:
            with self.get_session() as s:
                attachment = _save(s)
                s.expunge(attachment)
                return attachment


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
