from __future__ import annotations
"""Ultra-lightweight pub/sub bus used by the export driver.

Example
-------
```python
from tsdoc.utils.events import subscribe, publish, SequenceRendered

@subscribe(SequenceRendered)
def _on_done(evt: SequenceRendered):
    print(f"{evt.name}: {evt.records} records")

publish(SequenceRendered(name="Deploy Windows 11", source="ts.xml", records=42))
```
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Type, TypeVar

__all__ = [
    "Event",
    "BatchPlanned",
    "SequenceStarted",
    "SequenceRendered",
    "SequenceSkipped",
    "SequenceFailed",
    "subscribe",
    "publish",
]

T = TypeVar("T", bound="Event")
_Handler = Callable[[Any], None]
_REGISTRY: Dict[Type["Event"], List[_Handler]] = {}


@dataclass(slots=True, kw_only=True)
class Event:  # noqa: D101 – base event
    ts: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# --------------------------------------------------------------------------- #
# Concrete events
# --------------------------------------------------------------------------- #
@dataclass(slots=True)
class BatchPlanned(Event):
    total: int  # number of source files queued


@dataclass(slots=True)
class SequenceStarted(Event):
    name: str
    source: str


@dataclass(slots=True)
class SequenceRendered(Event):
    name: str
    source: str
    records: int


@dataclass(slots=True)
class SequenceSkipped(Event):
    source: str
    reason: str


@dataclass(slots=True)
class SequenceFailed(Event):
    source: str
    error: str


# --------------------------------------------------------------------------- #
# API helpers
# --------------------------------------------------------------------------- #

def subscribe(event_type: Type[T]):  # noqa: D401
    """Decorator: register *func* to receive *event_type* events."""

    def _decorator(func: _Handler) -> _Handler:
        _REGISTRY.setdefault(event_type, []).append(func)
        return func

    return _decorator


def publish(evt: Event) -> None:  # noqa: D401
    """Publish an event to all registered subscribers."""
    for func in _REGISTRY.get(type(evt), []):
        try:
            func(evt)
        except Exception as e:  # noqa: BLE001
            # Failure to handle an event must never crash an export.
            from tsdoc.utils.logging import log

            log.warning("event handler %s failed: %s", func.__name__, e)
