from __future__ import annotations
"""Minimal YAML -> TaskSequence loader.

A hand-editable alternative to the XML export, handy for fixtures and for
documenting sequences before they exist in the site database.  Example:

```yaml
name: Deploy Windows 11
package_id: CM100010
steps:
  - group: Install Apps
    condition:
      operators:
        - type: and
          expressions:
            - type: variable
              fields: {Variable: OSDComputerName, Operator: equals, Value: PC01}
    steps:
      - step: Install Office
        action: smsts_powershell.exe
        variables:
          OSDRunPowerShellScriptSourceScript: "Start-Process setup.exe"
      - subsequence: Drivers
        action: smsts_rtsa.exe
        variables: {TsName: Drivers, TsPackageID: CM100020}
```

Usage:
    from tsdoc.yaml_loader import load_sequence
    ts = load_sequence("deploy.yml")
"""
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from jsonschema import validate as _js_validate

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
from tsdoc.parser import TaskSequenceParseError

__all__ = ["load_sequence", "sequence_from_dict"]

_DEFAULT_NAME = "YAML Task Sequence"


# --------------------------------------------------------------------------- #

def _text_values(data: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Stringify YAML scalars the way the XML export stores them."""
    out: Dict[str, str] = {}
    for k, v in (data or {}).items():
        if v is None:
            out[k] = ""
        elif isinstance(v, bool):
            out[k] = "true" if v else "false"
        else:
            out[k] = str(v)
    return out


def _build_condition(data: Optional[Dict[str, Any]]) -> Optional[ConditionNode]:
    if not data:
        return None
    os_cond = None
    if data.get("os"):
        os_data = data["os"]
        os_cond = OsCondition(names=tuple(os_data["names"]), combination=os_data.get("type", "or"))
    expressions = tuple(
        make_expression(e["type"], _text_values(e.get("fields")))
        for e in data.get("expressions") or []
    )
    operators = tuple(
        OperatorCondition(type=op["type"], child=_build_condition(op) or ConditionNode())
        for op in data.get("operators") or []
    )
    return ConditionNode(os=os_cond, expressions=expressions, operators=operators)


def _build_steps(items: List[Dict[str, Any]]) -> Tuple[StepNode, ...]:  # noqa: D401
    nodes: List[StepNode] = []
    for item in items:
        common = dict(
            description=item.get("description"),
            condition=_build_condition(item.get("condition")),
            disabled=bool(item.get("disabled", False)),
            continue_on_error=bool(item.get("continue_on_error", False)),
        )
        if "group" in item:
            nodes.append(Group(name=item["group"], children=_build_steps(item.get("steps") or []), **common))
            continue
        cls = SubTaskSequence if "subsequence" in item else Step
        nodes.append(
            cls(
                name=item.get("subsequence") or item.get("step"),
                action=item.get("action", ""),
                type=item.get("type", ""),
                variables=_text_values(item.get("variables")),
                **common,
            )
        )
    return tuple(nodes)


def sequence_from_dict(data: Dict[str, Any]) -> TaskSequence:
    """Validate *data* against the schema and build a :class:`TaskSequence`."""
    _js_validate(instance=data, schema=_SCHEMA)
    return TaskSequence(
        name=data.get("name") or _DEFAULT_NAME,
        steps=_build_steps(data["steps"]),
        package_id=data.get("package_id", ""),
        references=tuple(data.get("references") or ()),
    )


def load_sequence(path: str | Path) -> TaskSequence:  # noqa: D401
    """Load YAML file at *path* into a TaskSequence."""
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise TaskSequenceParseError(f"Invalid task sequence YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise TaskSequenceParseError(f"{path}: top level must be a mapping")
    ts = sequence_from_dict(data)
    if not data.get("name"):
        ts = replace(ts, name=Path(path).stem)
    return ts


# --------------------------------------------------------------------------- #
# JSON Schema for YAML files
# --------------------------------------------------------------------------- #

_FLAGS: Dict[str, Any] = {
    "description": {"type": "string"},
    "disabled": {"type": "boolean"},
    "continue_on_error": {"type": "boolean"},
    "condition": {"$ref": "#/definitions/condition"},
}

_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["steps"],
    "properties": {
        "name": {"type": "string"},
        "package_id": {"type": "string"},
        "references": {"type": "array", "items": {"type": "string"}},
        "steps": {"$ref": "#/definitions/steps"},
    },
    "definitions": {
        "steps": {
            "type": "array",
            "items": {
                "oneOf": [
                    {
                        "type": "object",
                        "required": ["group"],
                        "properties": {
                            "group": {"type": "string"},
                            "steps": {"$ref": "#/definitions/steps"},
                            **_FLAGS,
                        },
                    },
                    {
                        "type": "object",
                        "required": ["step"],
                        "not": {"anyOf": [{"required": ["group"]}, {"required": ["subsequence"]}]},
                        "properties": {
                            "step": {"type": "string"},
                            "action": {"type": "string"},
                            "type": {"type": "string"},
                            "variables": {"type": "object"},
                            **_FLAGS,
                        },
                    },
                    {
                        "type": "object",
                        "required": ["subsequence"],
                        "not": {"required": ["group"]},
                        "properties": {
                            "subsequence": {"type": "string"},
                            "action": {"type": "string"},
                            "type": {"type": "string"},
                            "variables": {"type": "object"},
                            **_FLAGS,
                        },
                    },
                ]
            },
        },
        "condition": {
            "type": "object",
            "properties": {
                "os": {
                    "type": "object",
                    "required": ["names"],
                    "properties": {
                        "names": {"type": "array", "items": {"type": "string"}},
                        "type": {"type": "string"},
                    },
                },
                "expressions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["type"],
                        "properties": {
                            "type": {"type": "string"},
                            "fields": {"type": "object"},
                        },
                    },
                },
                "operators": {
                    "type": "array",
                    "items": {
                        "allOf": [
                            {"$ref": "#/definitions/condition"},
                            {
                                "type": "object",
                                "required": ["type"],
                                "properties": {"type": {"enum": ["and", "or", "not"]}},
                            },
                        ]
                    },
                },
            },
        },
    },
}
