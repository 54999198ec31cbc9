"""refsync - save reference library items to a Notion database."""

__version__ = "0.1.0"
