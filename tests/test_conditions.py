from datetime import timedelta, timezone
import logging

import pytest

from tsdoc.core.conditions import ConditionRenderer, RecursionLimitError
from tsdoc.core.markup import convert
from tsdoc.core.nodes import (
    ConditionNode,
    OperatorCondition,
    OsCondition,
    make_expression,
)

UTC_PLUS_2 = timezone(timedelta(hours=2))
renderer = ConditionRenderer(tz=UTC_PLUS_2)


def _expr(type_name, **fields):
    return ConditionNode(expressions=(make_expression(type_name, fields),))


def _lines(node, depth=0):
    return [convert(line) for line in renderer.render(node, depth)]


def test_none_condition_renders_nothing():
    assert renderer.render(None) == []


def test_os_match():
    node = ConditionNode(os=OsCondition(names=("Windows 10", "Windows 11"), combination="or"))
    assert _lines(node) == ["Operating System Equals: Windows 10, or Windows 11"]


def test_operator_wraps_child_one_level_deeper():
    child = _expr("variable", Variable="OSDComputerName", Operator="equals", Value="PC01")
    node = ConditionNode(operators=(OperatorCondition(type="and", child=child),))
    assert _lines(node) == [
        "If all of these conditions are true",
        "\tTask Sequence Variable: OSDComputerName equals PC01",
    ]


def test_nested_operators_and_depth_prefix():
    inner = ConditionNode(
        expressions=(make_expression("variable", {"Variable": "A", "Operator": "equals", "Value": "1"}),),
        operators=(OperatorCondition(type="not", child=_expr("folder", Path=r"C:\Temp")),),
    )
    node = ConditionNode(operators=(OperatorCondition(type="or", child=inner),))
    assert _lines(node, depth=1) == [
        "\tIf any of these conditions are true",
        "\t\tTask Sequence Variable: A equals 1",
        "\t\tIf none of these conditions are true",
        "\t\t\tFolder Exists: C:\\Temp",
    ]


def test_wmi_os_language():
    query = "SELECT OsLanguage FROM Win32_OperatingSystem WHERE OsLanguage=1033"
    assert _lines(_expr("SMS_TaskSequence_WMIConditionExpression", Query=query)) == [
        "Operating System Language: English (United States) (1033)"
    ]


def test_wmi_generic_query():
    query = "SELECT * FROM Win32_ComputerSystem WHERE Model LIKE '%Latitude%'"
    assert _lines(_expr("wmi", Query=query)) == [f"WMI Query: {query}"]


def test_file_exists_and_details():
    assert _lines(_expr("file", Path=r"C:\a.txt")) == ["File Exists: C:\\a.txt"]

    detailed = _expr(
        "file",
        Path=r"C:\a.exe",
        Version="1.2.3",
        VersionOperator="greater",
        DateTime="20230115103000.000000+000",
        DateTimeOperator="less",
    )
    assert _lines(detailed) == [
        "File: C:\\a.exe     File Version: greater 1.2.3     File Date: less 2023-01-15 12:30:00"
    ]


def test_folder_details():
    node = _expr("folder", Path=r"C:\Logs", DateTime="20240301000000", DateTimeOperator="equals")
    assert _lines(node) == ["Folder: C:\\Logs     Folder Date: equals 2024-03-01 02:00:00"]


def test_registry_value():
    node = _expr(
        "registry",
        KeyPath=r"HKEY_LOCAL_MACHINE\SOFTWARE\Contoso",
        Value="Version",
        Type="REG_SZ",
        Operator="equals",
        Data="5",
    )
    assert _lines(node) == [
        "Registry Value: HKEY_LOCAL_MACHINE\\SOFTWARE\\Contoso Version (REG_SZ) equals 5"
    ]


def test_software_any_and_exact_version():
    any_version = _expr("software", Operator="AnyVersion", ProductName="Contoso Agent", ProductCode="{1}")
    exact = _expr("software", Operator="ExactVersion", ProductName="Contoso Agent", ProductCode="{1}", Version="2.0")
    assert _lines(any_version) == ['Installed Software: Any Version of "Contoso Agent"']
    assert _lines(exact) == [
        'Installed Software: Exact Version of "Contoso Agent", Version: 2.0, Product Code: {1}'
    ]


def test_missing_fields_render_empty():
    assert _lines(_expr("variable")) == ["Task Sequence Variable:   "]
    assert _lines(_expr("file", Version="1.0")) == ["File:      File Version:  1.0     File Date:  "]


def test_fields_do_not_leak_between_siblings():
    node = ConditionNode(
        expressions=(
            make_expression("file", {"Path": "a", "Version": "1.0", "VersionOperator": "equals"}),
            make_expression("file", {"Path": "b"}),
        )
    )
    assert _lines(node) == [
        "File: a     File Version: equals 1.0     File Date:  ",
        "File Exists: b",
    ]


def test_unknown_expression_is_skipped_and_logged(caplog):
    node = ConditionNode(
        expressions=(
            make_expression("SMS_TaskSequence_FutureConditionExpression", {"X": "1"}),
            make_expression("variable", {"Variable": "A", "Operator": "exists", "Value": ""}),
        )
    )
    with caplog.at_level(logging.WARNING, logger="tsdoc"):
        lines = _lines(node)
    assert lines == ["Task Sequence Variable: A exists "]
    assert "SMS_TaskSequence_FutureConditionExpression" in caplog.text


def test_line_count_matches_structure():
    child = ConditionNode(
        os=OsCondition(names=("Windows 11",)),
        expressions=(make_expression("wmi", {"Query": "SELECT 1"}), make_expression("bogus", {})),
    )
    node = ConditionNode(
        expressions=(make_expression("folder", {"Path": "x"}),),
        operators=(OperatorCondition(type="and", child=child),),
    )
    # 1 folder + (1 operator line + 1 os + 1 wmi); bogus produces nothing
    assert len(renderer.render(node)) == 4


def test_depth_guard():
    node = _expr("folder", Path="x")
    for _ in range(5):
        node = ConditionNode(operators=(OperatorCondition(type="and", child=node),))
    with pytest.raises(RecursionLimitError):
        ConditionRenderer(max_depth=3).render(node)
    assert len(ConditionRenderer(max_depth=None).render(node)) == 6
