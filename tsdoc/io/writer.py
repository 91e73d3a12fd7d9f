"""
Report writer – one text/csv/jsonl file per task sequence plus metadata.json.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Sequence, Set

from tsdoc import __version__
from tsdoc.core.nodes import TaskSequence
from tsdoc.core.steps import RenderedStepRecord
from tsdoc.utils.ids import new_run_id, snake_case
from tsdoc.utils.logging import log

__all__ = ["ReportWriter", "format_text_report"]

_COLUMNS = [
    ("group_name", "Group"),
    ("step_name", "Step"),
    ("description", "Description"),
    ("action", "Action"),
    ("continue_on_error", "Continue On Error"),
    ("status", "Status"),
    ("condition", "Conditions"),
    ("script_hash", "Script Hash"),
]
_RULE = "-" * 78


def format_text_report(sequence: TaskSequence, records: Sequence[RenderedStepRecord]) -> str:
    """Plain text report for *sequence*; *records* must already be converted."""
    out: List[str] = [f"Task Sequence: {sequence.name}"]
    if sequence.package_id:
        out.append(f"Package ID: {sequence.package_id}")
    if sequence.references:
        out.append(f"Referenced Packages: {', '.join(sequence.references)}")
    out.append(f"Steps: {len(records)}")
    out.append("=" * 78)

    for rec in records:
        row = rec.model_dump()
        for key, label in _COLUMNS:
            value = row.get(key)
            if key == "script_hash" and value is None:
                continue
            if key == "condition":
                if value:
                    out.append(f"{label}:")
                    out.extend(f"    {line}" for line in value.splitlines())
                continue
            text = str(value or "")
            if "\n" in text:
                first, *rest = text.splitlines()
                out.append(f"{label}: {first}")
                out.extend(f"    {line}" for line in rest)
            else:
                out.append(f"{label}: {text}")
        out.append(_RULE)

    return "\n".join(out) + "\n"


class ReportWriter:  # noqa: D101
    def __init__(
        self,
        root: Path,
        formats: Sequence[str] = ("text",),
    ):
        self.root = Path(root)
        self.formats = list(formats)
        self.root.mkdir(parents=True, exist_ok=True)
        self.run_id = new_run_id()
        self._written: List[Dict[str, Any]] = []
        self._stems: Set[str] = set()

    # -------------------------------------------------------------- #

    def write_sequence(self, sequence: TaskSequence, records: Sequence[RenderedStepRecord]) -> List[Path]:
        """Write *records* for *sequence* in every configured format."""
        stem = self._unique_stem(sequence)
        paths: List[Path] = []
        for fmt in self.formats:
            if fmt == "text":
                path = self.root / f"{stem}.txt"
                path.write_text(format_text_report(sequence, records), encoding="utf-8")
            elif fmt == "jsonl":
                path = self.root / f"{stem}.jsonl"
                with open(path, "w", encoding="utf-8") as f:
                    for rec in records:
                        f.write(json.dumps(rec.model_dump(mode="json"), ensure_ascii=False) + "\n")
            elif fmt == "csv":
                path = self.root / f"{stem}.csv"
                with open(path, "w", encoding="utf-8", newline="") as f:
                    writer = csv.DictWriter(f, fieldnames=[k for k, _ in _COLUMNS])
                    writer.writeheader()
                    for rec in records:
                        writer.writerow(rec.model_dump(mode="json"))
            else:
                log.warning("Unsupported format '%s' for %s. Skipping write.", fmt, sequence.name)
                continue
            paths.append(path)

        self._written.append(
            {
                "name": sequence.name,
                "package_id": sequence.package_id,
                "attributes": dict(sequence.meta),
                "records": len(records),
                "files": [p.name for p in paths],
            }
        )
        return paths

    def _unique_stem(self, sequence: TaskSequence) -> str:
        """File stem for *sequence*, never reusing one from this run."""
        base = snake_case(sequence.name) or "task_sequence"
        candidates = [base]
        if sequence.package_id:
            candidates.append(f"{base}_{snake_case(sequence.package_id)}")
        stem = next((c for c in candidates if c not in self._stems), None)
        n = 2
        while stem is None:
            if f"{base}_{n}" not in self._stems:
                stem = f"{base}_{n}"
            n += 1
        if stem != base:
            log.warning("Report name '%s' already used in this run; writing %s instead", base, stem)
        self._stems.add(stem)
        return stem

    # -------------------------------------------------------------- #

    def finalize(self) -> Path:
        """Write metadata.json describing this run and return its path."""
        meta_path = self.root / "metadata.json"
        meta = {
            "run_id": self.run_id,
            "output_dir": str(self.root.resolve()),
            "formats": self.formats,
            "generated_by": f"tsdoc v{__version__}",
            "sequences": self._written,
        }
        meta_path.write_text(json.dumps(meta, indent=2))
        return meta_path
