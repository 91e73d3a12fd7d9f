from __future__ import annotations
"""Rich logging + export progress.

Plain log messages go through a :class:`rich.logging.RichHandler`; batch
exports drive a :class:`rich.progress.Progress` bar from the event bus.
"""
from typing import Any
from logging import Logger, getLogger, INFO, DEBUG, WARNING, ERROR, basicConfig

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, BarColumn, TextColumn, TimeElapsedColumn

from tsdoc.utils.events import (
    subscribe,
    BatchPlanned,
    SequenceRendered,
    SequenceSkipped,
    SequenceFailed,
)

console = Console()

__all__ = [
    "console",
    "log",
    "get",
    "show_sequence_tree",
    "stop",
]

_LEVEL_MAP = {
    "info": INFO,
    "debug": DEBUG,
    "warning": WARNING,
    "error": ERROR,
}

# Configure root once with Rich handler for plain log messages (non-progress)
basicConfig(
    level=INFO,
    format="%(message)s",
    datefmt="%H:%M:%S",
    handlers=[RichHandler(console=console, rich_tracebacks=True, markup=True)],
)

log: Logger = getLogger("tsdoc")


def get(level: str = "info") -> Logger:  # noqa: D401
    """Return the project logger set to *level* (str)."""
    lvl = _LEVEL_MAP.get(level.lower(), INFO)
    lg = getLogger("tsdoc")
    lg.setLevel(lvl)
    return lg


# --------------------------------------------------------------------------- #
# Progress handling
# --------------------------------------------------------------------------- #
_progress: Progress | None = None
_task: int | None = None


def _ensure_progress() -> Progress:  # noqa: D401
    global _progress
    if _progress is None:
        _progress = Progress(
            TextColumn("[bold blue]{task.description}[/]"),
            BarColumn(),
            "{task.percentage:>3.0f}%",
            TextColumn("[green]{task.completed}/{task.total}[/]"),
            "•",
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )
        _progress.start()
    return _progress


def _advance() -> None:
    if _progress is not None and _task is not None:
        _progress.update(_task, advance=1)


@subscribe(BatchPlanned)
def _on_planned(evt: BatchPlanned):  # noqa: D401 – event hook
    global _task
    prog = _ensure_progress()
    _task = prog.add_task("export", total=evt.total)


@subscribe(SequenceRendered)
def _on_rendered(evt: SequenceRendered):  # noqa: D401 – event hook
    log.info("Rendered [cyan]%s[/] (%d records)", escape(evt.name), evt.records)
    _advance()


@subscribe(SequenceSkipped)
def _on_skipped(evt: SequenceSkipped):  # noqa: D401 – event hook
    log.debug("Skipped %s: %s", escape(evt.source), escape(evt.reason))
    _advance()


@subscribe(SequenceFailed)
def _on_failed(evt: SequenceFailed):  # noqa: D401 – event hook
    log.error("Failed to export %s: %s", escape(evt.source), escape(evt.error))
    _advance()


# --------------------------------------------------------------------------- #
# Public helpers
# --------------------------------------------------------------------------- #

def show_sequence_tree(sequence: Any, **kw):  # noqa: D401
    """Print the step tree of *sequence*."""
    from tsdoc.utils.tree import build_rich_tree

    console.print(build_rich_tree(sequence, **kw))


def stop():  # noqa: D401
    global _progress, _task
    if _progress is not None:
        _progress.stop()
        _progress = None
    _task = None
