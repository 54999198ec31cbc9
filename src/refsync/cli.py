"""Command-line interface for refsync.

Built with Typer for commands and Rich for output.
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .constants import LINK_ATTACHMENT_TITLE, SYNCED_TAG
from .db import get_db
from .db.schemas import CreatorSchema, CreatorType, ItemCreate, ItemType, NoteCreate
from .prefs import Pref, PreferenceStore

# Create the main app
app = typer.Typer(
    name="refsync",
    help="Save your reference library to a Notion database.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
prefs_app = typer.Typer(help="View and change preferences.")
app.add_typer(prefs_app, name="prefs")

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def format_item_table(items: list, title: str = "Items") -> Table:
    """Create a rich table for displaying items."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=50)
    table.add_column("Authors", style="green", max_width=30)
    table.add_column("Type", style="yellow")
    table.add_column("Notion", justify="center")

    for item in items:
        authors = "; ".join(c.last_name for c in item.get_creators_of_type(CreatorType.AUTHOR))
        table.add_row(
            str(item.id),
            item.get_display_title(),
            authors or "-",
            item.item_type,
            "✓" if item.notion_page_id else "-",
        )

    return table


def parse_pref(key: str) -> Pref:
    try:
        return Pref(key)
    except ValueError:
        options = ", ".join(p.value for p in Pref)
        print_error(f"Unknown preference: {key}. Options: {options}")
        raise typer.Exit(1)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Save your reference library to a Notion database."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# ============================================================================
# Library Commands
# ============================================================================


@app.command()
def add(
    title: str = typer.Argument(..., help="Item title"),
    item_type: ItemType = typer.Option(ItemType.JOURNAL_ARTICLE, "--type", "-t", help="Item type"),
    authors: Optional[list[str]] = typer.Option(
        None, "--author", "-a", help="Author as 'Last, First' (repeatable)"
    ),
    editors: Optional[list[str]] = typer.Option(
        None, "--editor", "-e", help="Editor as 'Last, First' (repeatable)"
    ),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Publication date"),
    publication: Optional[str] = typer.Option(None, "--publication", "-p", help="Journal or site"),
    url: Optional[str] = typer.Option(None, "--url", help="URL"),
    doi: Optional[str] = typer.Option(None, "--doi", help="DOI"),
    citation_key: Optional[str] = typer.Option(None, "--citation-key", "-k", help="Citation key"),
    abstract: Optional[str] = typer.Option(None, "--abstract", help="Abstract"),
    tags: Optional[list[str]] = typer.Option(None, "--tag", help="Tag (repeatable)"),
    collections: Optional[list[str]] = typer.Option(
        None, "--collection", "-c", help="Collection (repeatable)"
    ),
) -> None:
    """Add an item to the library."""
    if item_type == ItemType.NOTE:
        print_error("Use 'refsync note' to add notes.")
        raise typer.Exit(1)

    creators = [CreatorSchema.parse(a, CreatorType.AUTHOR) for a in authors or []]
    creators += [CreatorSchema.parse(e, CreatorType.EDITOR) for e in editors or []]

    item = get_db().create_item(
        ItemCreate(
            item_type=item_type,
            title=title,
            abstract=abstract,
            date=date,
            publication=publication,
            url=url,
            doi=doi,
            citation_key=citation_key,
            creators=creators,
            tags=tags or [],
            collections=collections or [],
        )
    )
    print_success(f"Added item {item.id}: {item.title}")


@app.command()
def note(
    item_id: int = typer.Argument(..., help="Parent item ID"),
    text: str = typer.Argument(..., help="Note body (HTML allowed)"),
) -> None:
    """Attach a note to an item."""
    try:
        created = get_db().create_note(NoteCreate(parent_id=item_id, note=text))
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Added note {created.id} to item {item_id}")


@app.command("list")
def list_items(
    collection: Optional[str] = typer.Option(None, "--collection", "-c", help="Only this collection"),
) -> None:
    """List library items."""
    db = get_db()
    items = db.get_items_in_collection(collection) if collection else db.get_all_items()

    if not items:
        print_info("No items found.")
        return

    console.print(format_item_table(items, title=collection or "Items"))


@app.command()
def show(item_id: int = typer.Argument(..., help="Item ID")) -> None:
    """Show an item with its notes and Notion link."""
    db = get_db()
    item = db.get_item(item_id)
    if not item:
        print_error(f"Item {item_id} not found")
        raise typer.Exit(1)

    lines = [
        f"[bold]Type:[/bold] {item.item_type}",
        f"[bold]Key:[/bold] {item.key}",
    ]
    if item.is_note():
        lines.append(f"[bold]Parent:[/bold] {item.parent_id or '-'}")
    else:
        creators = "; ".join(c.full_name for c in item.get_creators()) or "-"
        lines.append(f"[bold]Creators:[/bold] {creators}")
        lines.append(f"[bold]Date:[/bold] {item.date or '-'}")
        lines.append(f"[bold]Tags:[/bold] {', '.join(item.get_tags()) or '-'}")
        lines.append(f"[bold]Collections:[/bold] {', '.join(item.get_collections()) or '-'}")
        lines.append(f"[bold]Notes:[/bold] {len(db.get_notes(item.id))}")

    link = db.get_link_attachment(item.id, LINK_ATTACHMENT_TITLE)
    lines.append(f"[bold]Notion:[/bold] {link.url if link else '-'}")

    console.print(Panel("\n".join(lines), title=item.get_display_title()))


@app.command()
def delete(item_id: int = typer.Argument(..., help="Item ID")) -> None:
    """Delete an item. Its notes stay in the library."""
    if not get_db().delete_item(item_id):
        print_error(f"Item {item_id} not found")
        raise typer.Exit(1)
    print_success(f"Deleted item {item_id}")


# ============================================================================
# Sync Commands
# ============================================================================


@app.command()
def sync(
    item_ids: Optional[list[int]] = typer.Argument(None, help="IDs of items or notes to sync"),
    collection: Optional[str] = typer.Option(
        None, "--collection", "-c", help="Sync every item in a collection"
    ),
    sync_all: bool = typer.Option(False, "--all", help="Sync the whole library"),
    status_only: bool = typer.Option(False, "--status", "-s", help="Show sync status only"),
) -> None:
    """Save items to the Notion database."""
    from .sync import perform_sync_job

    db = get_db()

    if status_only:
        all_items = db.get_all_items()
        synced = sum(1 for item in all_items if item.has_tag(SYNCED_TAG))
        console.print(
            Panel(f"[bold]{synced}[/bold] of {len(all_items)} items synced", title="Sync Status")
        )
        return

    ids = list(item_ids or [])
    if collection:
        ids += [item.id for item in db.get_items_in_collection(collection)]
    if sync_all:
        ids += [item.id for item in db.get_all_items()]

    if not ids:
        print_info("Nothing to sync.")
        return

    if not perform_sync_job(ids, db=db, console=console):
        raise typer.Exit(1)


# ============================================================================
# Preference Commands
# ============================================================================


@prefs_app.command("show")
def prefs_show() -> None:
    """Show all preferences."""
    table = Table(title="Preferences", show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Description", style="dim")

    for pref in PreferenceStore(get_db()).all():
        description = pref.description or ""
        if pref.options:
            description += f" ({', '.join(pref.options)})"
        table.add_row(pref.key.value, pref.display_value, description)

    console.print(table)


@prefs_app.command("set")
def prefs_set(
    key: str = typer.Argument(..., help="Preference key"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a preference."""
    pref = parse_pref(key)
    try:
        result = PreferenceStore(get_db()).set(pref, value)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"{pref.value} = {result.display_value}")


@prefs_app.command("unset")
def prefs_unset(key: str = typer.Argument(..., help="Preference key")) -> None:
    """Remove a stored preference."""
    pref = parse_pref(key)
    if PreferenceStore(get_db()).unset(pref):
        print_success(f"Removed {pref.value}")
    else:
        print_info(f"{pref.value} was not set")


# ============================================================================
# Version Command
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"refsync version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
