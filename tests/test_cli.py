"""
CLI tests.
"""

import json

import pytest

from tasketa.cli import build_parser, main
from tasketa.engine import COMPLETION_NOTICE


@pytest.fixture
def status_file(tmp_path, single_task_text):
    path = tmp_path / "status.json"
    path.write_text("GET /_tasks/node-a:42\n" + single_task_text, encoding="utf-8")
    return path


def test_normalize_prints_strict_json(status_file, capsys):
    assert main(["normalize", str(status_file)]) == 0

    parsed = json.loads(capsys.readouterr().out)
    assert parsed["task"]["id"] == 42


def test_estimate_prints_report(status_file, capsys):
    assert main(["estimate", str(status_file)]) == 0

    out = capsys.readouterr().out
    assert out.startswith("100% reindex from [src] to [dst]")
    assert "Actual progress: 100 / 1000 (10.00%)" in out
    assert COMPLETION_NOTICE in out


def test_estimate_failure_exits_nonzero(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text("{oops", encoding="utf-8")

    assert main(["estimate", str(path)]) == 1
    assert "Invalid JSON input" in capsys.readouterr().err


def test_watch_runs_until_complete(status_file, capsys):
    assert main(["watch", str(status_file), "--interval", "0.01"]) == 0
    assert COMPLETION_NOTICE in capsys.readouterr().out


def test_watch_failure_exits_nonzero(tmp_path, capsys, completed_task_text):
    path = tmp_path / "done.json"
    path.write_text(completed_task_text, encoding="utf-8")

    assert main(["watch", str(path)]) == 1
    assert "Task is already completed." in capsys.readouterr().out


def test_interval_must_be_positive():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["watch", "--interval", "0"])
