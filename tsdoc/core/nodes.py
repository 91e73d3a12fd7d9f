from __future__ import annotations

"""Read-only node types for task sequence trees.

Two families live here:

* condition nodes (:class:`ConditionNode` and the expression variants)
* step nodes (:class:`Step`, :class:`SubTaskSequence`, :class:`Group`)

Loaders build them, renderers walk them.  Nothing mutates a tree once built.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

__all__ = [
    "OsCondition",
    "Expression",
    "WmiQuery",
    "VariableComparison",
    "FileCheck",
    "FolderCheck",
    "RegistryCheck",
    "SoftwareCheck",
    "UnknownExpression",
    "OperatorCondition",
    "ConditionNode",
    "make_expression",
    "Step",
    "SubTaskSequence",
    "Group",
    "StepNode",
    "TaskSequence",
    "count_nodes",
]


# --------------------------------------------------------------------------- #
# Conditions
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class OsCondition:  # noqa: D101
    names: Tuple[str, ...]
    combination: str = "or"  # "and" / "or" / "list"


@dataclass(frozen=True)
class Expression:
    """A single typed predicate with its own bag of sub-fields."""

    fields: Mapping[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        """Return sub-field *name* or ``""`` when missing/empty."""
        value = self.fields.get(name)
        return "" if value is None else str(value)

    def has(self, name: str) -> bool:
        return bool(self.get(name).strip())


class WmiQuery(Expression):  # noqa: D101
    tag = "SMS_TaskSequence_WMIConditionExpression"


class VariableComparison(Expression):  # noqa: D101
    tag = "SMS_TaskSequence_VariableConditionExpression"


class FileCheck(Expression):  # noqa: D101
    tag = "SMS_TaskSequence_FileConditionExpression"


class FolderCheck(Expression):  # noqa: D101
    tag = "SMS_TaskSequence_FolderConditionExpression"


class RegistryCheck(Expression):  # noqa: D101
    tag = "SMS_TaskSequence_RegistryConditionExpression"


class SoftwareCheck(Expression):  # noqa: D101
    tag = "SMS_TaskSequence_SoftwareConditionExpression"


@dataclass(frozen=True)
class UnknownExpression(Expression):
    """Expression whose type tag is not one of the known variants."""

    type_name: str = ""


_EXPRESSION_TYPES = {
    cls.tag.lower(): cls
    for cls in (WmiQuery, VariableComparison, FileCheck, FolderCheck, RegistryCheck, SoftwareCheck)
}
# Short aliases accepted by the YAML loader.
_EXPRESSION_TYPES.update({
    "wmi": WmiQuery,
    "variable": VariableComparison,
    "file": FileCheck,
    "folder": FolderCheck,
    "registry": RegistryCheck,
    "software": SoftwareCheck,
})


def make_expression(type_name: str, fields: Mapping[str, str]) -> Expression:
    """Build the expression variant matching *type_name* (case-insensitive)."""
    cls = _EXPRESSION_TYPES.get((type_name or "").strip().lower())
    if cls is None:
        return UnknownExpression(fields=dict(fields), type_name=type_name or "")
    return cls(fields=dict(fields))


@dataclass(frozen=True)
class OperatorCondition:
    """``and`` / ``or`` / ``not`` wrapping exactly one nested condition."""

    type: str
    child: "ConditionNode"


@dataclass(frozen=True)
class ConditionNode:  # noqa: D101
    os: Optional[OsCondition] = None
    expressions: Tuple[Expression, ...] = ()
    operators: Tuple[OperatorCondition, ...] = ()

    def is_empty(self) -> bool:
        return self.os is None and not self.expressions and not self.operators


# --------------------------------------------------------------------------- #
# Steps
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class Step:  # noqa: D101
    name: str
    description: Optional[str] = None
    condition: Optional[ConditionNode] = None
    disabled: bool = False
    continue_on_error: bool = False
    action: str = ""
    type: str = ""
    variables: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SubTaskSequence(Step):
    """Step that runs another task sequence (``TsName``/``TsPackageID`` vars)."""

    @property
    def ts_name(self) -> str:
        return self.variables.get("TsName") or ""

    @property
    def ts_package_id(self) -> str:
        return self.variables.get("TsPackageID") or ""


@dataclass(frozen=True)
class Group:  # noqa: D101
    name: str
    description: Optional[str] = None
    condition: Optional[ConditionNode] = None
    disabled: bool = False
    continue_on_error: bool = False
    children: Tuple["StepNode", ...] = ()


StepNode = Union[Step, SubTaskSequence, Group]


@dataclass(frozen=True)
class TaskSequence:
    """Root of one task sequence document."""

    name: str
    steps: Tuple[StepNode, ...] = ()
    package_id: str = ""
    references: Tuple[str, ...] = ()
    meta: Dict[str, str] = field(default_factory=dict)


def count_nodes(nodes: List[StepNode] | Tuple[StepNode, ...]) -> int:
    """Return the number of Step/SubTaskSequence/Group nodes under *nodes*."""
    total = 0
    for node in nodes:
        total += 1
        if isinstance(node, Group):
            total += count_nodes(node.children)
    return total
