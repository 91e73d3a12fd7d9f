import textwrap
from pathlib import Path

import pytest

from tsdoc.core.nodes import FileCheck, Group, Step, SubTaskSequence, UnknownExpression, WmiQuery
from tsdoc.parser import TaskSequenceParseError, load_sequence_xml, parse_sequence_xml

FIXTURE = Path(__file__).parent / "fixtures" / "deploy_windows.xml"


def test_load_fixture_structure():
    ts = load_sequence_xml(FIXTURE)
    assert ts.name == "deploy_windows"
    assert ts.package_id == "CM100010"
    assert ts.references == ("CM100012", "CM100020")

    first, apps, restart = ts.steps
    assert isinstance(first, Step) and first.action == "smsts_setvariable.exe"
    assert first.variables["VariableValue"] == "PC01"

    assert isinstance(apps, Group)
    assert apps.continue_on_error and not apps.disabled
    office, drivers = apps.children
    assert office.variables["OSDRunPowerShellScriptSourceScript"].startswith("Start-Process")
    assert isinstance(drivers, Group) and drivers.disabled
    (sub,) = drivers.children
    assert isinstance(sub, SubTaskSequence)
    assert (sub.ts_name, sub.ts_package_id) == ("Dell Drivers", "CM100020")

    assert restart.disabled and restart.continue_on_error
    assert restart.action == "shutdown.exe /r /t 0"


def test_conditions_are_parsed():
    ts = load_sequence_xml(FIXTURE)
    apps = ts.steps[1]
    (op,) = apps.condition.operators
    assert op.type == "and"
    (expr,) = op.child.expressions
    assert expr.get("Variable") == "OSDComputerName"

    drivers = apps.children[1]
    assert drivers.condition.os.names == ("Windows 10", "Windows 11")
    assert drivers.condition.os.combination == "or"

    wmi, file_check = ts.steps[2].condition.expressions
    assert isinstance(wmi, WmiQuery) and isinstance(file_check, FileCheck)


def test_unknown_expression_type_is_kept():
    xml = textwrap.dedent(
        """
        <sequence>
          <step name="s"><condition>
            <expression type="SMS_TaskSequence_NewConditionExpression"><variable name="A">1</variable></expression>
          </condition></step>
        </sequence>
        """
    )
    (expr,) = parse_sequence_xml(xml).steps[0].condition.expressions
    assert isinstance(expr, UnknownExpression)
    assert expr.type_name == "SMS_TaskSequence_NewConditionExpression"


def test_package_wrapper_with_escaped_sequence():
    xml = textwrap.dedent(
        """
        <SmsTaskSequencePackage>
          <Name>Wrapped TS</Name>
          <PackageID>CM100099</PackageID>
          <SequenceData>&lt;sequence&gt;&lt;step name="only"&gt;&lt;action&gt;a.exe&lt;/action&gt;&lt;/step&gt;&lt;/sequence&gt;</SequenceData>
        </SmsTaskSequencePackage>
        """
    )
    ts = parse_sequence_xml(xml)
    assert ts.name == "Wrapped TS"
    assert [s.name for s in ts.steps] == ["only"]


def test_empty_condition_element_is_none():
    ts = parse_sequence_xml('<sequence><step name="s"><condition /></step></sequence>')
    assert ts.steps[0].condition is None


def test_invalid_xml_raises():
    with pytest.raises(TaskSequenceParseError):
        parse_sequence_xml("<sequence><step></sequence>")
    with pytest.raises(TaskSequenceParseError):
        parse_sequence_xml("<other />")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_sequence_xml(tmp_path / "nope.xml")
