import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

import flowtrace.cli as cli
from flowtrace.cli import app
from flowtrace.sources import InMemoryHistorySource

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def source(monkeypatch) -> InMemoryHistorySource:
    source = InMemoryHistorySource()
    activities = json.loads((FIXTURES / "review_activities.json").read_text())["data"]
    history = json.loads((FIXTURES / "review_history.json").read_text())
    source.add_instance("pi-1", activities, history)
    source.add_definition("orderReview:1:7", (FIXTURES / "review_process.bpmn").read_text())
    monkeypatch.setattr(cli, "get_history_source", lambda config=None: source)
    return source


def test_plan_command_prints_plan(source):
    runner = CliRunner()
    result = runner.invoke(app, ["plan", "pi-1", "--cursor", "3"])
    assert result.exit_code == 0, result.stdout
    plan = json.loads(result.stdout)
    assert plan["node_states"] == {"start": "DONE", "task1": "ACTIVE"}
    assert plan["edge_states"] == {"flow1": "NORMAL_DONE"}
    assert plan["badges"] == {"start": 1, "task1": 2}
    assert plan["labels"]["task1"] == "Re-review Order"


def test_plan_command_reports_failure(source):
    source.add_instance("pi-broken", {"not": "a list"})
    runner = CliRunner()
    result = runner.invoke(app, ["plan", "pi-broken"])
    assert result.exit_code == 1
    assert "Failed to build plan" in result.stdout


def test_replay_command_from_files():
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "replay",
            str(FIXTURES / "review_activities.json"),
            str(FIXTURES / "review_history.json"),
            "--diagram",
            str(FIXTURES / "review_process.bpmn"),
        ],
    )
    assert result.exit_code == 0, result.stdout
    plan = json.loads(result.stdout)
    assert plan["edge_states"]["flow3"] == "LOOP_BACK"
    assert plan["node_states"]["end"] == "ACTIVE"
    assert plan["trace_length"] == 11


def test_replay_command_missing_file(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        app, ["replay", str(tmp_path / "nope.json"), str(FIXTURES / "review_history.json")]
    )
    assert result.exit_code == 1
    assert "Failed to replay history" in result.stdout


def test_timeline_command(source):
    runner = CliRunner()
    result = runner.invoke(app, ["timeline", "pi-1"])
    assert result.exit_code == 0, result.stdout
    lines = result.stdout.strip().splitlines()
    assert lines[0].startswith("TASK\tRe-review Order\tCOMPLETED\t24m\tby bob")
    assert lines[-1].startswith("START\tOrder Submitted by Customer")


def test_heatmap_command(source):
    runner = CliRunner()
    result = runner.invoke(app, ["heatmap", "orderReview:1:7"])
    assert result.exit_code == 0, result.stdout
    rows = dict(
        (line.split("\t")[0], line.split("\t")[1:])
        for line in result.stdout.strip().splitlines()
    )
    assert rows["task1"] == ["2", "heatmap-high"]
    assert rows["start"] == ["1", "heatmap-med"]


def test_heatmap_command_without_activity(source):
    runner = CliRunner()
    result = runner.invoke(app, ["heatmap", "unknown:1:1"])
    assert result.exit_code == 0
    assert "No activity recorded" in result.stdout
