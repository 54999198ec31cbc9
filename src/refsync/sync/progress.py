"""Terminal progress display for sync jobs."""

from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from ..db.models import Item


class ProgressWindow:
    """Shows per-item progress of a sync job and its final outcome."""

    def __init__(self, item_count: int, console: Optional[Console] = None):
        self.item_count = item_count
        self.console = console or Console()
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=self.console,
        )
        self._task_id = self._progress.add_task(self._saving_text(0), total=item_count)
        self._progress.start()
        self.finished = False

    def _saving_text(self, step: int) -> str:
        noun = "item" if self.item_count == 1 else "items"
        return f"Saving {step} of {self.item_count} {noun} to Notion..."

    def update_text(self, step: int) -> None:
        """Announce that the item at ``step`` (1-indexed) is being saved."""
        self._progress.update(self._task_id, description=self._saving_text(step))

    def update_progress(self, step: int) -> None:
        """Mark the item at ``step`` as done."""
        self._progress.update(self._task_id, completed=step)

    def complete(self) -> None:
        self._progress.update(self._task_id, completed=self.item_count)
        self.close()
        noun = "item" if self.item_count == 1 else "items"
        self.console.print(
            f"[bold green]✓[/bold green] Saved {self.item_count} {noun} to Notion"
        )

    def fail(self, message: str, failed_item: Optional[Item] = None) -> None:
        self.close()
        if failed_item is not None:
            self.console.print(
                f"Failed to sync item: {failed_item.get_display_title()}",
                style="bold red",
                markup=False,
            )
        self.console.print(message, style="red", markup=False)

    def close(self) -> None:
        """Stop the live display. Safe to call more than once."""
        if not self.finished:
            self._progress.stop()
            self.finished = True
