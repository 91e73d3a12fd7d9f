"""
Incremental export bookkeeping – remembers when each source was exported.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

__all__ = ["RunState"]


class RunState:  # noqa: D101
    def __init__(self, path: Path):
        self.path = Path(path)
        self._entries: Dict[str, Dict[str, Any]] = {}
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid state file {self.path}: {e}") from e
            self._entries = data.get("sources", {})

    # -------------------------------------------------------------- #

    def is_stale(self, source: Path) -> bool:
        """True when *source* changed since it was last marked (or never was)."""
        entry = self._entries.get(str(Path(source).resolve()))
        if entry is None:
            return True
        return Path(source).stat().st_mtime > float(entry.get("mtime", 0))

    def mark(self, source: Path) -> None:
        """Record *source* as exported at its current modification time."""
        src = Path(source)
        self._entries[str(src.resolve())] = {
            "mtime": src.stat().st_mtime,
            "exported_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        }

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"sources": self._entries}, indent=2))
