"""Terminal rendering of a :class:`UiState` with rich."""

from __future__ import annotations

from typing import Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from ..backend.file_source import FileSnapshot
from ..core.ui_state import UiState


def render_state(state: UiState, title: Optional[str] = None) -> RenderableType:
    parts = []

    if state.initial_load:
        parts.append(Spinner("dots", text="Loading..."))
    elif state.loading:
        parts.append(Text("Refreshing...", style="cyan"))

    if state.exception is not None:
        parts.append(Text(f"Error: {state.exception}", style="bold red"))

    snapshot = state.data
    if isinstance(snapshot, FileSnapshot):
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Size", f"{snapshot.size} bytes")
        table.add_row("Lines", str(snapshot.line_count))
        parts.append(table)
        if snapshot.preview:
            parts.append(Text("\n".join(snapshot.preview), style="dim"))
    elif snapshot is not None:
        parts.append(Text(repr(snapshot)))

    if not parts:
        parts.append(Text("No data", style="dim"))

    border = "red" if state.has_error else ("cyan" if state.loading else "green")
    return Panel(Group(*parts), title=title, border_style=border)
