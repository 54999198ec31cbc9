"""Main entry point for the refsync package."""

from refsync.cli import main

if __name__ == "__main__":
    main()
