from __future__ import annotations

"""Export configuration.

Settings come from keyword arguments or a YAML file; unknown keys are kept in
*extra* so older configs stay loadable when new options appear.

```yaml
formats: [text, csv]
plain_text: true
script_action: smsts_powershell.exe
output_dir: docs/task-sequences
state_file: docs/task-sequences/.tsdoc-state.json
```
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from tsdoc.core.steps import SCRIPT_ACTION, SCRIPT_VARIABLE

__all__ = ["ExportConfig", "ConfigError", "make_config", "load_config", "FORMATS"]

FORMATS = ("text", "csv", "jsonl")


class ConfigError(ValueError):
    """Invalid export configuration."""


@dataclass
class ExportConfig:  # noqa: D101 – self-documenting via fields
    formats: List[str] = field(default_factory=lambda: ["text"])
    plain_text: bool = False  # drop emphasis escape codes in written reports

    # Steps running this action get a digest of their embedded script
    script_action: str = SCRIPT_ACTION
    script_variable: str = SCRIPT_VARIABLE

    output_dir: Optional[str] = None
    state_file: Optional[str] = None  # incremental export bookkeeping
    max_depth: Optional[int] = 256

    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable representation."""
        return self.__dict__.copy()


# --------------------------------------------------------------------------- #
# Factories
# --------------------------------------------------------------------------- #

def make_config(**kwargs) -> ExportConfig:  # noqa: D401 – simple factory
    """Build an :class:`ExportConfig`, moving unknown keys into *extra*."""
    known_fields = {f for f in ExportConfig.__dataclass_fields__ if f != "extra"}
    cfg_kwargs = {k: v for k, v in kwargs.items() if k in known_fields}
    extra = {k: v for k, v in kwargs.items() if k not in known_fields}
    cfg_kwargs["extra"] = extra

    if isinstance(cfg_kwargs.get("formats"), str):
        cfg_kwargs["formats"] = [cfg_kwargs["formats"]]

    cfg = ExportConfig(**cfg_kwargs)

    unknown = [f for f in cfg.formats if f not in FORMATS]
    if unknown:
        raise ConfigError(f"Unsupported report format(s) {unknown}; choose from {list(FORMATS)}")
    if not cfg.formats:
        raise ConfigError("At least one report format is required")
    if cfg.max_depth is not None and cfg.max_depth < 1:
        raise ConfigError("max_depth must be a positive integer")
    return cfg


def load_config(path: str | Path) -> ExportConfig:
    """Load an :class:`ExportConfig` from a YAML file."""
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: top level must be a mapping")
    return make_config(**data)
