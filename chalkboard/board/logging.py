"""
Rich console logging for board sessions.

Provides colored feedback for page creation, pointer moves and the two
generation stages.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel


class BoardLogger:
    """Rich console logger for board operations with visual feedback."""

    def __init__(self, chat_id: str, verbose: bool = True, console: Optional[Console] = None) -> None:
        self.chat_id = chat_id
        self.verbose = verbose
        self._console = console or Console()
        self._logger = logging.getLogger(__name__)

        self._styles = {
            "blue": "bold blue",
            "cyan": "bold cyan",
            "green": "bold green",
            "yellow": "bold yellow",
            "orange": "bold rgb(255,165,0)",
            "red": "bold red",
            "magenta": "bold magenta",
            "dim": "dim",
            "white": "white",
        }

    def log(
        self,
        message: str,
        style: str = "white",
        emoji: str = "",
        level: str = "info",
    ) -> None:
        """Log a message with styling."""
        log_method = getattr(self._logger, level, self._logger.info)
        log_method(message)

        if not self.verbose:
            return

        rich_style = self._styles.get(style, style)
        prefix = f"{emoji} " if emoji else ""
        self._console.print(f"{prefix}[{rich_style}]{message}[/{rich_style}]")

    def log_page_created(self, page_id: int, title: str, auto_switch: bool) -> None:
        switch = "switched" if auto_switch else "background"
        self.log(f"Page {page_id} created: {title} ({switch})", "green", "📄")

    def log_authoring_switch(self, old_id: Optional[int], new_id: int) -> None:
        self.log(f"Authoring: {old_id} → {new_id}", "yellow", "✏️")

    def log_stage_started(self, stage: str, request: Dict[str, Any]) -> None:
        """Log a remote stage invocation."""
        if not self.verbose:
            self._logger.info(f"{stage} stage started for page {request.get('page_id')}")
            return
        fields = "\n".join(
            f"[bold white]{key}:[/bold white] [cyan]{value}[/cyan]"
            for key, value in request.items()
            if key not in ("layout", "components", "document")
        )
        panel = Panel(
            fields,
            title=f"[bold orange]🧠 {stage.upper()} STAGE[/bold orange]",
            border_style="rgb(255,165,0)",
        )
        self._console.print(panel)

    def log_stage_finished(self, stage: str, event_count: int) -> None:
        self.log(f"{stage} stage finished: {event_count} event(s)", "orange", "📤")

    def log_operation_failed(self, operation: Dict[str, Any], error: Optional[str]) -> None:
        self.log(f"Operation {operation.get('type')} failed: {error}", "red", "⚠️", "warning")

    def log_reconciled(self, created: List[int], operation_count: int) -> None:
        """Log the outcome of a bulk reconciliation."""
        if not self.verbose:
            self._logger.info(f"Reconciled {operation_count} operation(s), created pages {created}")
            return
        created_str = ", ".join(str(c) for c in created) if created else "none"
        panel = Panel(
            f"[bold white]Operations applied:[/bold white] [cyan]{operation_count}[/cyan]\n"
            f"[bold white]Pages created:[/bold white] [green]{created_str}[/green]",
            title="[bold magenta]📦 BATCH APPLIED[/bold magenta]",
            border_style="magenta",
        )
        self._console.print(panel)

    def log_error(self, message: str, exception: Optional[Exception] = None) -> None:
        """Log errors with optional exception details."""
        exc_str = f": {exception}" if exception else ""
        self.log(f"ERROR: {message}{exc_str}", "red", "❌", "error")
