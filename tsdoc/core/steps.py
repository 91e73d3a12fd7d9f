from __future__ import annotations

"""Step/group tree -> flat, ordered :class:`RenderedStepRecord` list.

Groups emit a header record and then recurse; every descendant record carries
the name of its *immediate* group.  Condition text is rendered at the node's
nesting depth so nested groups read indented in the report.
"""

from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from tsdoc.core.conditions import ConditionRenderer, RecursionLimitError
from tsdoc.core.markup import LINE_BREAK, convert
from tsdoc.core.nodes import ConditionNode, Group, Step, StepNode, SubTaskSequence
from tsdoc.utils.ids import content_digest
from tsdoc.utils.logging import log

__all__ = [
    "RenderedStepRecord",
    "StepTreeRenderer",
    "ScriptLookup",
    "variable_lookup",
    "convert_record",
    "NOT_APPLICABLE",
    "SCRIPT_ACTION",
    "SCRIPT_VARIABLE",
]

NOT_APPLICABLE = "N/A"
SCRIPT_ACTION = "smsts_powershell.exe"
SCRIPT_VARIABLE = "OSDRunPowerShellScriptSourceScript"

ScriptLookup = Callable[[Step], Optional[str]]


class RenderedStepRecord(BaseModel):
    """One report row: a step, a nested task sequence, or a group header."""

    model_config = ConfigDict(frozen=True)

    group_name: str
    step_name: str
    description: str = ""
    action: str
    continue_on_error: str
    status: str
    condition: str = ""
    script_hash: Optional[str] = None


def variable_lookup(name: str = SCRIPT_VARIABLE) -> ScriptLookup:
    """Return a lookup reading the script payload from step variable *name*."""

    def _lookup(step: Step) -> Optional[str]:
        value = step.variables.get(name)
        return value if value else None

    return _lookup


def convert_record(record: RenderedStepRecord, *, plain: bool = False) -> RenderedStepRecord:
    """Return a copy of *record* with markup converted in its text fields."""
    return record.model_copy(
        update={
            "description": convert(record.description, plain=plain),
            "condition": convert(record.condition, plain=plain),
            "action": convert(record.action, plain=plain),
        }
    )


class StepTreeRenderer:  # noqa: D101
    def __init__(
        self,
        conditions: ConditionRenderer | None = None,
        *,
        script_action: str = SCRIPT_ACTION,
        script_lookup: ScriptLookup | None = None,
        max_depth: Optional[int] = 256,
    ) -> None:
        self.conditions = conditions or ConditionRenderer(max_depth=max_depth)
        self.script_action = script_action
        self.script_lookup = script_lookup or variable_lookup()
        self.max_depth = max_depth

    # ------------------------------------------------------------------ #

    def render(
        self,
        root: Sequence[StepNode],
        group_name: Optional[str] = None,
        *,
        depth: int = 0,
    ) -> List[RenderedStepRecord]:
        """Flatten *root* depth-first, in document order."""
        if self.max_depth is not None and depth > self.max_depth:
            raise RecursionLimitError(f"group nesting exceeds {self.max_depth} levels")

        records: List[RenderedStepRecord] = []
        for node in root:
            if isinstance(node, Group):
                records.append(self._group(node, depth))
                records.extend(self.render(node.children, node.name, depth=depth + 1))
            elif isinstance(node, SubTaskSequence):
                records.append(self._sub_sequence(node, group_name, depth))
            elif isinstance(node, Step):
                records.append(self._step(node, group_name, depth))
            else:
                log.warning("Skipping unsupported step node %r", type(node).__name__)
        return records

    # ------------------------------------------------------------------ #
    # Per-variant builders
    # ------------------------------------------------------------------ #

    def _step(self, step: Step, group_name: Optional[str], depth: int) -> RenderedStepRecord:
        script_hash = None
        if step.action == self.script_action:
            script_hash = self._script_hash(step)
        return RenderedStepRecord(
            group_name=group_name or NOT_APPLICABLE,
            step_name=step.name,
            description=step.description or "",
            action=step.action,
            continue_on_error=_yes_no(step.continue_on_error),
            status=_status(step.disabled),
            condition=self._condition_text(step.condition, depth),
            script_hash=script_hash,
        )

    def _sub_sequence(self, step: SubTaskSequence, group_name: Optional[str], depth: int) -> RenderedStepRecord:
        action = f"Run Task Sequence ({step.action}):{LINE_BREAK}{step.ts_name} ({step.ts_package_id})"
        return RenderedStepRecord(
            group_name=group_name or NOT_APPLICABLE,
            step_name=step.name,
            description=step.description or "",
            action=action,
            continue_on_error=_yes_no(step.continue_on_error),
            status=_status(step.disabled),
            condition=self._condition_text(step.condition, depth),
        )

    def _group(self, group: Group, depth: int) -> RenderedStepRecord:
        return RenderedStepRecord(
            group_name=group.name,
            step_name=NOT_APPLICABLE,
            description=group.description or "",
            action=NOT_APPLICABLE,
            continue_on_error=_yes_no(group.continue_on_error),
            status=_status(group.disabled),
            condition=self._condition_text(group.condition, depth),
        )

    # ------------------------------------------------------------------ #

    def _condition_text(self, condition: Optional[ConditionNode], depth: int) -> str:
        if condition is None:
            return ""
        return LINE_BREAK.join(self.conditions.render(condition, depth))

    def _script_hash(self, step: Step) -> Optional[str]:
        try:
            payload = self.script_lookup(step)
        except Exception as e:  # noqa: BLE001
            log.warning("Script lookup failed for step '%s': %s", step.name, e)
            return None
        if payload is None:
            log.debug("No script payload found for step '%s'", step.name)
            return None
        return content_digest(payload)


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _status(disabled: bool) -> str:
    return "Disabled" if disabled else "Enabled"
