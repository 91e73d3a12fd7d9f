from __future__ import annotations

"""Export orchestration: load -> render -> convert -> write."""

from pathlib import Path
from typing import Iterable, List, Optional

from jsonschema import ValidationError

from tsdoc.config import ExportConfig
from tsdoc.core.conditions import ConditionRenderer
from tsdoc.core.nodes import TaskSequence
from tsdoc.core.steps import RenderedStepRecord, StepTreeRenderer, convert_record, variable_lookup
from tsdoc.io.state import RunState
from tsdoc.io.writer import ReportWriter
from tsdoc.parser import load_sequence_xml
from tsdoc.utils.events import (
    publish,
    BatchPlanned,
    SequenceStarted,
    SequenceRendered,
    SequenceSkipped,
    SequenceFailed,
)
from tsdoc.yaml_loader import load_sequence

__all__ = [
    "SOURCE_SUFFIXES",
    "load_any",
    "discover_sources",
    "make_renderer",
    "render_sequence",
    "export_sequence",
    "export_paths",
]

SOURCE_SUFFIXES = (".xml", ".yml", ".yaml")


def load_any(path: str | Path) -> TaskSequence:
    """Load *path* with the XML or YAML loader based on its suffix."""
    p = Path(path)
    if p.suffix.lower() in (".yml", ".yaml"):
        return load_sequence(p)
    return load_sequence_xml(p)


def discover_sources(source: str | Path) -> List[Path]:
    """Return *source* itself, or the task sequence files inside a directory."""
    p = Path(source)
    if p.is_dir():
        return sorted(f for f in p.iterdir() if f.is_file() and f.suffix.lower() in SOURCE_SUFFIXES)
    return [p]


def make_renderer(config: ExportConfig) -> StepTreeRenderer:
    return StepTreeRenderer(
        ConditionRenderer(max_depth=config.max_depth),
        script_action=config.script_action,
        script_lookup=variable_lookup(config.script_variable),
        max_depth=config.max_depth,
    )


def render_sequence(
    sequence: TaskSequence,
    config: ExportConfig | None = None,
    *,
    convert: bool = True,
) -> List[RenderedStepRecord]:
    """Render *sequence* to records, converting markup unless *convert* is False."""
    config = config or ExportConfig()
    records = make_renderer(config).render(sequence.steps)
    if convert:
        records = [convert_record(r, plain=config.plain_text) for r in records]
    return records


def export_sequence(
    sequence: TaskSequence,
    config: ExportConfig,
    writer: ReportWriter,
    *,
    source: str = "",
) -> List[Path]:
    """Render one sequence and write it with *writer*."""
    publish(SequenceStarted(name=sequence.name, source=source))
    records = render_sequence(sequence, config)
    paths = writer.write_sequence(sequence, records)
    publish(SequenceRendered(name=sequence.name, source=source, records=len(records)))
    return paths


def export_paths(
    paths: Iterable[Path],
    config: ExportConfig,
    writer: ReportWriter,
    state: Optional[RunState] = None,
) -> dict:
    """Export every file in *paths*; failures are reported and skipped.

    Returns a summary dict with ``exported``, ``skipped`` and ``failed`` lists.
    """
    paths = list(paths)
    summary: dict = {"exported": [], "skipped": [], "failed": []}
    publish(BatchPlanned(total=len(paths)))

    for path in paths:
        if state is not None and not state.is_stale(path):
            publish(SequenceSkipped(source=str(path), reason="unchanged since last export"))
            summary["skipped"].append(str(path))
            continue
        try:
            sequence = load_any(path)
            export_sequence(sequence, config, writer, source=str(path))
        except (OSError, ValueError, ValidationError, RecursionError) as e:
            publish(SequenceFailed(source=str(path), error=getattr(e, "message", None) or str(e)))
            summary["failed"].append(str(path))
            continue
        if state is not None:
            state.mark(path)
        summary["exported"].append(str(path))

    writer.finalize()
    if state is not None:
        state.save()
    return summary
