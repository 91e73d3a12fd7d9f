import csv
import json
from pathlib import Path

from tsdoc.config import ExportConfig
from tsdoc.core.nodes import TaskSequence
from tsdoc.exporter import render_sequence
from tsdoc.io.writer import ReportWriter, format_text_report
from tsdoc.parser import load_sequence_xml

FIXTURE = Path(__file__).parent / "fixtures" / "deploy_windows.xml"


def _records():
    ts = load_sequence_xml(FIXTURE)
    return ts, render_sequence(ts, ExportConfig(plain_text=True))


def test_text_report_layout():
    ts, records = _records()
    text = format_text_report(ts, records)

    assert text.startswith("Task Sequence: deploy_windows\nPackage ID: CM100010\n")
    assert "Referenced Packages: CM100012, CM100020" in text
    assert "Description: Core business apps" in text  # emphasis dropped in plain mode
    assert "Conditions:\n    If all of these conditions are true\n    \tTask Sequence Variable" in text
    assert "Action: Run Task Sequence (smsts_rtsa.exe):\n    Dell Drivers (CM100020)" in text
    assert "Script Hash: " in text
    assert text.count("-" * 78) == len(records)


def test_writer_formats_and_metadata(tmp_path):
    ts, records = _records()
    writer = ReportWriter(tmp_path, formats=["text", "csv", "jsonl"])
    paths = writer.write_sequence(ts, records)
    assert sorted(p.name for p in paths) == ["deploy_windows.csv", "deploy_windows.jsonl", "deploy_windows.txt"]

    rows = [json.loads(line) for line in (tmp_path / "deploy_windows.jsonl").read_text().splitlines()]
    assert len(rows) == len(records)
    assert rows[0]["step_name"] == "Set Computer Name"

    with open(tmp_path / "deploy_windows.csv", newline="", encoding="utf-8") as f:
        csv_rows = list(csv.DictReader(f))
    assert [r["group_name"] for r in csv_rows][:3] == ["N/A", "Install Apps", "Install Apps"]

    meta = json.loads(writer.finalize().read_text())
    assert meta["formats"] == ["text", "csv", "jsonl"]
    assert meta["sequences"][0]["records"] == len(records)


def test_empty_name_falls_back(tmp_path):
    writer = ReportWriter(tmp_path)
    (path,) = writer.write_sequence(TaskSequence(name="!!!"), [])
    assert path.name == "task_sequence.txt"
    assert "Steps: 0" in path.read_text()


def test_clashing_names_get_distinct_files(tmp_path):
    writer = ReportWriter(tmp_path)
    (first,) = writer.write_sequence(TaskSequence(name="Deploy Windows"), [])
    (second,) = writer.write_sequence(TaskSequence(name="deploy-windows", package_id="CM100050"), [])
    (third,) = writer.write_sequence(TaskSequence(name="Deploy  Windows"), [])

    assert [p.name for p in (first, second, third)] == [
        "deploy_windows.txt",
        "deploy_windows_cm100050.txt",
        "deploy_windows_2.txt",
    ]
    assert "Task Sequence: Deploy Windows\n" in first.read_text()
    assert "Task Sequence: deploy-windows\n" in second.read_text()


def test_metadata_lists_sequence_attributes(tmp_path):
    ts, records = _records()
    writer = ReportWriter(tmp_path)
    writer.write_sequence(ts, records)
    meta = json.loads(writer.finalize().read_text())
    assert meta["sequences"][0]["attributes"]["version"] == "3.10"
