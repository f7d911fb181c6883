"""Command line entry point: ``uiproducer watch``."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.live import Live

from ..backend.file_source import read_file_snapshot
from ..backend.services.logging.logging_service import setup_logging
from ..config import ConfigError, ProducerSettings, load_settings
from ..core import ProducerScope, UiState, blocking_fetch
from .parser import parse_arguments
from .view import render_state

logger = logging.getLogger(__name__)


async def watch_file(
    path: Path,
    settings: ProducerSettings,
    interval: Optional[float] = None,
    max_refreshes: Optional[int] = None,
    console: Optional[Console] = None,
) -> UiState:
    """Render ``path`` until ``max_refreshes`` refreshes have completed.

    Returns the last state shown.
    """
    if interval is None:
        interval = settings.interval
    console = console or Console()
    fetch = blocking_fetch(read_file_snapshot, max_workers=settings.blocking_workers)
    title = str(path)

    try:
        async with ProducerScope(settings.merge_policy) as scope:
            state, refresh, clear_error = scope.launch(path, fetch, slot="watch")

            with Live(render_state(state.value, title), console=console, transient=False) as live:
                unsubscribe = state.subscribe(lambda value: live.update(render_state(value, title)))
                try:
                    await state.wait_for(lambda value: not value.loading)
                    refreshes = 0
                    while max_refreshes is None or refreshes < max_refreshes:
                        await asyncio.sleep(interval)
                        # Errors are re-reported by the next fetch if still present
                        clear_error()
                        refresh()
                        refreshes += 1
                        await state.wait_for(lambda value: value.loading)
                        await state.wait_for(lambda value: not value.loading)
                finally:
                    unsubscribe()
            return state.value
    finally:
        fetch.shutdown()


def run(argv: Optional[list[str]] = None) -> None:
    args = parse_arguments(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        setup_logging(force_color=args.force_color)
        logger.error(f"Configuration error: {e}")
        sys.exit(2)

    setup_logging(
        verbose=args.verbose if args.verbose is not None else settings.verbose,
        log_file=args.log_file or settings.log_file,
        force_color=args.force_color if args.force_color is not None else settings.force_color,
    )

    if args.command == "watch":
        try:
            final = asyncio.run(
                watch_file(args.path, settings, args.interval, args.max_refreshes)
            )
        except KeyboardInterrupt:
            logger.info("Interrupted")
            sys.exit(130)
        sys.exit(1 if final.has_error else 0)
