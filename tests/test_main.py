"""Tests for the llemy command-line entry point."""

import json
import logging

import pytest

from conftest import FakeTracker
from llemy import main as cli
from llemy.common.errors import ExternalCommandError
from llemy.common.models import IssueRecord
from llemy.config import Settings


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return Settings(repo="acme/widgets")


def listed(repo, number, body=None):
    return IssueRecord(
        repo=repo,
        number=number,
        title=f"Issue {number}",
        url=f"https://github.com/{repo}/issues/{number}",
        body=body,
    )


class TestMain:
    """Tests for main()."""

    @pytest.mark.asyncio
    async def test_no_command_prints_help(self, capsys):
        assert await cli.main([]) == 0
        assert "usage: llemy" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_scan_plan_writes_payload_and_log(self, tmp_path, settings, capsys):
        tracker = FakeTracker()
        tracker.listings["acme/widgets"] = [listed("acme/widgets", 5)]

        code = await cli.main(["scan-plan"], settings=settings, tracker=tracker)

        assert code == 0
        data = json.loads((tmp_path / ".llemy" / "llemy-plan-issues.json").read_text())
        assert data["label"] == "llemy-plan"
        assert [i["number"] for i in data["issues"]] == [5]
        assert "acme/widgets (1)" in capsys.readouterr().out
        log = (tmp_path / ".llemy" / "logs" / "plan.log").read_text()
        assert "=== LLEMY SCAN-PLAN RUN:" in log
        assert "acme/widgets (1)" in log
        assert "=== COMPLETED SUCCESSFULLY ===" in log

    @pytest.mark.asyncio
    async def test_scan_todo_uses_repositories_file(self, tmp_path, settings):
        (tmp_path / "repositories.txt").write_text("acme/widgets\nacme/gone\n")
        tracker = FakeTracker()
        tracker.listings["acme/widgets"] = [listed("acme/widgets", 3, body="Cache results.")]
        tracker.listings["acme/gone"] = ExternalCommandError("gh", [], "HTTP 404")

        code = await cli.main(["scan-todo"], settings=settings, tracker=tracker)

        assert code == 0
        data = json.loads((tmp_path / ".llemy" / "llemy-todo-issues.json").read_text())
        assert data["repos"] == ["acme/widgets", "acme/gone"]
        assert data["issues"][1] == {"repo": "acme/gone", "error": "HTTP 404"}
        task = tmp_path / ".llemy" / "todo-tasks" / "acme_widgets_3.md"
        assert task.read_text() == "Cache results.\n"

    @pytest.mark.asyncio
    async def test_process_without_scan_fails(self, tmp_path, settings):
        code = await cli.main(["process-plan"], settings=settings, tracker=FakeTracker())

        assert code == 1
        log = (tmp_path / ".llemy" / "logs" / "plan.log").read_text()
        assert "Missing input file" in log
        assert "=== FAILED ===" in log

    @pytest.mark.asyncio
    async def test_plan_flow_partial_failure_exit_code(self, tmp_path, settings):
        settings.poll_max_attempts = 1
        tracker = FakeTracker()
        tracker.listings["acme/widgets"] = [listed("acme/widgets", 1), listed("acme/widgets", 2)]
        tracker.add_issue(1, labels=["llemy-plan"])
        tracker.add_issue(2, labels=["llemy-plan"])
        tracker.broken_issues.add(2)
        todo = tmp_path / ".llemy" / "todo" / "acme_widgets_1_todo.md"
        todo.parent.mkdir(parents=True)
        todo.write_text("TITLE: Ticket\nBODY: ```md\nDo it.\n```\n")

        code = await cli.main(["plan"], settings=settings, tracker=tracker)

        assert code == 1
        assert tracker.ready_checks == 1
        assert len(tracker.created) == 1
        assert tracker.labels[("acme/widgets", 1)] == ["llemy-planned"]
        log = (tmp_path / ".llemy" / "logs" / "plan.log").read_text()
        assert "Failed acme/widgets#2: issue 2 not found" in log
        assert "Done. Completed=1 Failed=1" in log

    @pytest.mark.asyncio
    async def test_process_plan_alone_checks_tracker(self, tmp_path, settings):
        tracker = FakeTracker()
        tracker.ready = False
        (tmp_path / ".llemy").mkdir()
        (tmp_path / ".llemy" / "llemy-plan-issues.json").write_text(
            json.dumps({"issues": [{"repo": "acme/widgets", "number": 1}]})
        )

        code = await cli.main(["process-plan"], settings=settings, tracker=tracker)

        assert code == 1
        assert tracker.ready_checks == 1
        assert "not authenticated" in (tmp_path / ".llemy" / "logs" / "plan.log").read_text()

    @pytest.mark.asyncio
    async def test_filesystem_error_is_single_line_failure(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "blocker").write_text("not a directory")
        settings = Settings(repo="acme/widgets", plan_scan_file="blocker/plan.json")
        tracker = FakeTracker()
        tracker.listings["acme/widgets"] = [listed("acme/widgets", 5)]

        code = await cli.main(["scan-plan"], settings=settings, tracker=tracker)

        assert code == 1
        log = (tmp_path / ".llemy" / "logs" / "plan.log").read_text()
        error_lines = [line for line in log.splitlines() if "| ERROR |" in line]
        assert len(error_lines) == 1
        assert "blocker" in error_lines[0]
        assert "Traceback" not in log
        assert "=== FAILED ===" in log

    @pytest.mark.asyncio
    async def test_unknown_log_level_is_a_configuration_error(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LLEMY_LOG_LEVEL", "verbose")

        code = await cli.main(["scan-plan"], tracker=FakeTracker())

        assert code == 1
        assert "Invalid configuration" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_empty_repositories_file_fails(self, tmp_path, settings):
        (tmp_path / "repositories.txt").write_text("# nothing yet\n\n")
        tracker = FakeTracker()

        code = await cli.main(["scan-todo"], settings=settings, tracker=tracker)

        assert code == 1
        log = (tmp_path / ".llemy" / "logs" / "do.log").read_text()
        assert "repositories.txt contains no valid repositories" in log
        assert "=== FAILED ===" in log
        assert not (tmp_path / ".llemy" / "llemy-todo-issues.json").exists()

    @pytest.mark.asyncio
    async def test_init_has_no_run_log(self, tmp_path, settings):
        tracker = FakeTracker()

        assert await cli.main(["init"], settings=settings, tracker=tracker) == 0
        assert (tmp_path / ".llemy" / ".env").exists()
        assert not (tmp_path / ".llemy" / "logs" / "init.log").exists()

    def test_parser_knows_every_command(self):
        parser = cli.build_parser()
        for command in cli.COMMANDS:
            assert parser.parse_args([command]).command == command
