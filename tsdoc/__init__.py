"""tsdoc: readable documentation for deployment task sequences.

Main components:
* `ConditionRenderer`: condition tree -> indented text lines
* `StepTreeRenderer`: step/group tree -> flat `RenderedStepRecord` list
* `convert`: placeholder markup -> display text
* `load_sequence_xml` / `load_sequence`: XML and YAML loaders
"""

# Version info
__version__ = "0.1.0"

# Core components
from tsdoc.core.nodes import (
    ConditionNode,
    OsCondition,
    OperatorCondition,
    make_expression,
    Step,
    SubTaskSequence,
    Group,
    TaskSequence,
)
from tsdoc.core.conditions import ConditionRenderer
from tsdoc.core.steps import RenderedStepRecord, StepTreeRenderer, convert_record
from tsdoc.core.markup import convert

# Loaders and configuration
from tsdoc.parser import parse_sequence_xml, load_sequence_xml, TaskSequenceParseError
from tsdoc.yaml_loader import load_sequence
from tsdoc.config import ExportConfig, make_config, load_config

# Export all important symbols
__all__ = [
    # Tree types
    "ConditionNode",
    "OsCondition",
    "OperatorCondition",
    "make_expression",
    "Step",
    "SubTaskSequence",
    "Group",
    "TaskSequence",

    # Renderers
    "ConditionRenderer",
    "StepTreeRenderer",
    "RenderedStepRecord",
    "convert_record",
    "convert",

    # Loaders
    "parse_sequence_xml",
    "load_sequence_xml",
    "load_sequence",
    "TaskSequenceParseError",

    # Config
    "ExportConfig",
    "make_config",
    "load_config",
]
