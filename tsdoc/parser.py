from __future__ import annotations

"""Task sequence XML -> node tree.

Accepts the ``<sequence>`` document stored with a task sequence package, or a
package export that wraps it (``<SmsTaskSequencePackage>`` with
``<SequenceData>``).  Only the parts needed for documentation are read.

Usage:
    from tsdoc.parser import load_sequence_xml
    ts = load_sequence_xml("Deploy Windows 11.xml")
"""

from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from xml.etree import ElementTree as ET

from tsdoc.core.nodes import (
    ConditionNode,
    Group,
    OperatorCondition,
    OsCondition,
    Step,
    StepNode,
    SubTaskSequence,
    TaskSequence,
    make_expression,
)
from tsdoc.utils.logging import log

__all__ = ["TaskSequenceParseError", "parse_sequence_xml", "load_sequence_xml"]

_DEFAULT_NAME = "Task Sequence"


class TaskSequenceParseError(ValueError):
    """The document is not a readable task sequence."""


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #

def parse_sequence_xml(text: str | bytes, name: str | None = None) -> TaskSequence:
    """Parse task sequence XML *text* into a :class:`TaskSequence`."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise TaskSequenceParseError(f"Invalid task sequence XML: {e}") from e

    sequence = root if root.tag == "sequence" else root.find(".//sequence")
    if sequence is None:
        # Package exports sometimes carry the sequence as escaped text.
        data = root.find(".//SequenceData")
        if data is not None and (data.text or "").strip():
            inner = parse_sequence_xml(data.text.strip(), name=name or _wrapper_name(root) or None)
            return replace(inner, package_id=inner.package_id or _wrapper_text(root, "PackageID"))
        raise TaskSequenceParseError("No <sequence> element found")

    return TaskSequence(
        name=name or _wrapper_name(root) or _DEFAULT_NAME,
        steps=_children(sequence),
        package_id=_wrapper_text(root, "PackageID") or sequence.get("packageID", ""),
        references=_references(sequence),
        meta=dict(sequence.attrib),
    )


def load_sequence_xml(path: str | Path, name: str | None = None) -> TaskSequence:
    """Read and parse the XML file at *path* (name defaults to the file stem)."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Task sequence file not found: {p}")
    ts = parse_sequence_xml(p.read_bytes(), name=name)
    if name is None and ts.name == _DEFAULT_NAME:
        ts = replace(ts, name=p.stem)
    return ts


# --------------------------------------------------------------------------- #
# Steps
# --------------------------------------------------------------------------- #

def _children(elem: ET.Element) -> Tuple[StepNode, ...]:
    nodes: List[StepNode] = []
    for child in elem:
        if child.tag == "group":
            nodes.append(
                Group(
                    name=child.get("name", ""),
                    description=child.get("description"),
                    condition=_condition(child.find("condition")),
                    disabled=_flag(child.get("disable")),
                    continue_on_error=_flag(child.get("continueOnError")),
                    children=_children(child),
                )
            )
        elif child.tag in ("step", "subtasksequence"):
            cls = SubTaskSequence if child.tag == "subtasksequence" else Step
            nodes.append(
                cls(
                    name=child.get("name", ""),
                    description=child.get("description"),
                    condition=_condition(child.find("condition")),
                    disabled=_flag(child.get("disable")),
                    continue_on_error=_flag(child.get("continueOnError")),
                    action=(child.findtext("action") or "").strip(),
                    type=child.get("type", ""),
                    variables=_variables(child.find("defaultVarList")),
                )
            )
    return tuple(nodes)


def _variables(elem: Optional[ET.Element]) -> Dict[str, str]:
    if elem is None:
        return {}
    out: Dict[str, str] = {}
    for var in elem.findall("variable"):
        name = var.get("name")
        if name:
            out[name] = var.text or ""
    return out


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


# --------------------------------------------------------------------------- #
# Conditions
# --------------------------------------------------------------------------- #

def _condition(elem: Optional[ET.Element]) -> Optional[ConditionNode]:
    if elem is None:
        return None
    node = _condition_level(elem)
    return None if node.is_empty() else node


def _condition_level(elem: ET.Element) -> ConditionNode:
    os_cond = None
    os_group = elem.find("osConditionGroup")
    if os_group is not None:
        names = tuple(
            g.get("Name") or g.get("name") or ""
            for g in os_group.findall("osExpressionGroup")
        )
        os_cond = OsCondition(names=names, combination=os_group.get("type", "or"))

    expressions = []
    for expr in elem.findall("expression"):
        fields = {}
        for var in expr.findall("variable"):
            if var.get("name"):
                fields[var.get("name")] = var.text or ""
        expressions.append(make_expression(expr.get("type", ""), fields))

    operators = []
    for op in elem.findall("operator"):
        op_type = op.get("type", "")
        if not op_type:
            log.warning("Condition operator without a type attribute; treating as 'and'")
            op_type = "and"
        operators.append(OperatorCondition(type=op_type, child=_condition_level(op)))

    return ConditionNode(os=os_cond, expressions=tuple(expressions), operators=tuple(operators))


# --------------------------------------------------------------------------- #
# Package metadata
# --------------------------------------------------------------------------- #

def _references(sequence: ET.Element) -> Tuple[str, ...]:
    seen: List[str] = []
    for ref in sequence.findall("./referenceList/reference"):
        pkg = ref.get("package")
        if pkg and pkg not in seen:
            seen.append(pkg)
    return tuple(seen)


def _wrapper_text(root: ET.Element, tag: str) -> str:
    if root.tag == "sequence":
        return ""
    return (root.findtext(f".//{tag}") or "").strip()


def _wrapper_name(root: ET.Element) -> str:
    return _wrapper_text(root, "Name")
