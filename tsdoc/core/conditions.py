from __future__ import annotations

"""Condition tree -> human readable lines.

The boolean structure is encoded positionally: an operator line is followed
by the lines of its child rendered one tab deeper.  Output order per level is
OS match, expressions (document order), then operators.
"""

import re
from datetime import tzinfo
from typing import Callable, Dict, List, Optional, Type

from tsdoc.core.markup import TAB
from tsdoc.core.nodes import (
    ConditionNode,
    Expression,
    FileCheck,
    FolderCheck,
    OperatorCondition,
    OsCondition,
    RegistryCheck,
    SoftwareCheck,
    UnknownExpression,
    VariableComparison,
    WmiQuery,
)
from tsdoc.utils.locales import lcid_display_name
from tsdoc.utils.logging import log
from tsdoc.utils.timefmt import utc_to_local

__all__ = ["ConditionRenderer", "RecursionLimitError", "OPERATOR_TEXT"]

OPERATOR_TEXT: Dict[str, str] = {
    "or": "If any of these conditions are true",
    "and": "If all of these conditions are true",
    "not": "If none of these conditions are true",
}

_OS_LANGUAGE = re.compile(
    r"^\s*SELECT\s+OsLanguage\s+FROM\s+Win32_OperatingSystem\s+WHERE\s+OsLanguage\s*=\s*['\"]?(\d+)['\"]?\s*$",
    re.IGNORECASE,
)


class RecursionLimitError(RecursionError):
    """Raised when a tree nests deeper than the configured ``max_depth``."""


class ConditionRenderer:
    """Render :class:`ConditionNode` trees.

    Args:
        tz: zone used for file/folder dates; ``None`` means the host zone.
        max_depth: nesting guard, ``None`` disables it.
    """

    def __init__(self, *, tz: Optional[tzinfo] = None, max_depth: Optional[int] = 256) -> None:
        self.tz = tz
        self.max_depth = max_depth
        self._handlers: Dict[Type[Expression], Callable[[Expression, str], Optional[str]]] = {
            WmiQuery: self._wmi,
            VariableComparison: self._variable,
            FileCheck: self._file,
            FolderCheck: self._folder,
            RegistryCheck: self._registry,
            SoftwareCheck: self._software,
        }

    # ------------------------------------------------------------------ #

    def render(self, condition: Optional[ConditionNode], depth: int = 0) -> List[str]:
        """Return the lines describing *condition* indented by *depth* tabs."""
        if condition is None:
            return []
        if depth < 0:
            raise ValueError("depth must be >= 0")
        if self.max_depth is not None and depth > self.max_depth:
            raise RecursionLimitError(f"condition nesting exceeds {self.max_depth} levels")

        prefix = TAB * depth
        lines: List[str] = []

        if condition.os is not None:
            lines.append(self._os(condition.os, prefix))

        for expr in condition.expressions:
            line = self._expression(expr, prefix)
            if line is not None:
                lines.append(line)

        for op in condition.operators:
            lines.extend(self._operator(op, prefix, depth))

        return lines

    # ------------------------------------------------------------------ #
    # Per-variant renderers
    # ------------------------------------------------------------------ #

    def _os(self, os_cond: OsCondition, prefix: str) -> str:
        joined = f", {os_cond.combination} ".join(os_cond.names)
        return f"{prefix}Operating System Equals: {joined}"

    def _operator(self, op: OperatorCondition, prefix: str, depth: int) -> List[str]:
        text = OPERATOR_TEXT.get(op.type.lower())
        if text is None:
            log.warning("Unknown condition operator '%s'; rendering its children only", op.type)
            return self.render(op.child, depth + 1)
        return [f"{prefix}{text}", *self.render(op.child, depth + 1)]

    def _expression(self, expr: Expression, prefix: str) -> Optional[str]:
        handler = self._handlers.get(type(expr))
        if handler is None:
            type_name = expr.type_name if isinstance(expr, UnknownExpression) else type(expr).__name__
            log.warning("Skipping unsupported condition expression type '%s'", type_name)
            return None
        return handler(expr, prefix)

    def _wmi(self, expr: Expression, prefix: str) -> str:
        query = expr.get("Query")
        m = _OS_LANGUAGE.match(query)
        if m:
            code = int(m.group(1))
            return f"{prefix}Operating System Language: {lcid_display_name(code)} ({m.group(1)})"
        return f"{prefix}WMI Query: {query}"

    def _variable(self, expr: Expression, prefix: str) -> str:
        return (
            f"{prefix}Task Sequence Variable: "
            f"{expr.get('Variable')} {expr.get('Operator')} {expr.get('Value')}"
        )

    def _file(self, expr: Expression, prefix: str) -> str:
        path = expr.get("Path")
        if not _has_details(expr, ("Version", "VersionOperator", "DateTime", "DateTimeOperator")):
            return f"{prefix}File Exists: {path}"
        date = utc_to_local(expr.get("DateTime"), self.tz)
        return (
            f"{prefix}File: {path}"
            f"     File Version: {expr.get('VersionOperator')} {expr.get('Version')}"
            f"     File Date: {expr.get('DateTimeOperator')} {date}"
        )

    def _folder(self, expr: Expression, prefix: str) -> str:
        path = expr.get("Path")
        if not _has_details(expr, ("DateTime", "DateTimeOperator")):
            return f"{prefix}Folder Exists: {path}"
        date = utc_to_local(expr.get("DateTime"), self.tz)
        return f"{prefix}Folder: {path}     Folder Date: {expr.get('DateTimeOperator')} {date}"

    def _registry(self, expr: Expression, prefix: str) -> str:
        return (
            f"{prefix}Registry Value: {expr.get('KeyPath')} {expr.get('Value')} "
            f"({expr.get('Type')}) {expr.get('Operator')} {expr.get('Data')}"
        )

    def _software(self, expr: Expression, prefix: str) -> str:
        product = expr.get("ProductName")
        if expr.get("Operator").lower() == "anyversion":
            return f'{prefix}Installed Software: Any Version of "{product}"'
        return (
            f'{prefix}Installed Software: Exact Version of "{product}", '
            f"Version: {expr.get('Version')}, Product Code: {expr.get('ProductCode')}"
        )


def _has_details(expr: Expression, names) -> bool:
    return any(expr.has(n) for n in names)
