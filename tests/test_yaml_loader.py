import textwrap
from pathlib import Path

import pytest
from jsonschema import ValidationError

from tsdoc.core.conditions import ConditionRenderer
from tsdoc.core.nodes import FolderCheck, Group, SoftwareCheck, Step, SubTaskSequence
from tsdoc.parser import TaskSequenceParseError
from tsdoc.yaml_loader import load_sequence, sequence_from_dict

FIXTURE = Path(__file__).parent / "fixtures" / "refresh.yml"


def test_yaml_loader():
    ts = load_sequence(FIXTURE)
    assert ts.name == "Refresh Workstation"
    assert ts.package_id == "CM100030"
    assert ts.references == ("CM100031",)

    prepare, baseline, finish = ts.steps
    assert isinstance(prepare, Group)
    (op,) = prepare.condition.operators
    folder, software = op.child.expressions
    assert isinstance(folder, FolderCheck) and folder.get("Path") == "C:\\Temp"
    assert isinstance(software, SoftwareCheck) and software.get("ProductCode") == "{1111}"

    (backup,) = prepare.children
    assert backup.action == "smsts_powershell.exe"
    assert "Copy-Item" in backup.variables["OSDRunPowerShellScriptSourceScript"]

    assert isinstance(baseline, SubTaskSequence)
    assert baseline.ts_package_id == "CM100031"
    assert type(finish) is Step and finish.disabled


def test_yaml_invalid(tmp_path):
    bad = textwrap.dedent(
        """
        steps:
          - group: G
            condition:
              operators:
                - type: xor
        """
    )
    f = tmp_path / "bad.yml"
    f.write_text(bad)

    with pytest.raises(ValidationError):
        load_sequence(f)


def test_yaml_step_needs_a_kind():
    with pytest.raises(ValidationError):
        sequence_from_dict({"steps": [{"action": "a.exe"}]})


def test_yaml_not_a_mapping(tmp_path):
    f = tmp_path / "list.yml"
    f.write_text("- a\n- b\n")
    with pytest.raises(TaskSequenceParseError):
        load_sequence(f)


def test_yaml_null_and_bool_fields_become_text():
    ts = sequence_from_dict(
        {
            "steps": [
                {
                    "step": "Check",
                    "variables": {"Flag": True, "Empty": None},
                    "condition": {
                        "expressions": [
                            {"type": "variable", "fields": {"Variable": "X", "Operator": "exists", "Value": None}}
                        ]
                    },
                }
            ]
        }
    )
    (step,) = ts.steps
    assert step.variables == {"Flag": "true", "Empty": ""}
    assert ConditionRenderer().render(step.condition) == ["Task Sequence Variable: X exists "]


def test_yaml_name_defaults_to_file_stem(tmp_path):
    f = tmp_path / "site_refresh.yml"
    f.write_text("steps:\n  - step: Alpha\n")
    assert load_sequence(f).name == "site_refresh"
    assert sequence_from_dict({"steps": []}).name == "YAML Task Sequence"
