"""Tests for the CLI entry point: JSON on stdout, exit codes."""
import json

import pytest

from mdboard.cli import main


def run(capsys, tmp_path, *args):
    code = main(list(args) + ["--board", "board.md", "--vault", str(tmp_path)])
    return code, json.loads(capsys.readouterr().out)


class TestCli:

    def test_board_status(self, capsys, tmp_path, board_file):
        code, out = run(capsys, tmp_path, "board-status")
        assert code == 0
        assert [l["title"] for l in out["lanes"]] == ["Backlog", "Ready", "In Progress", "Done", "Failed"]

    def test_claim_then_list_by_agent(self, capsys, tmp_path, board_file):
        code, out = run(capsys, tmp_path, "claim", "--id", "abc123", "--agent", "claude-1")
        assert code == 0
        assert out["lane"] == "In Progress"

        code, out = run(capsys, tmp_path, "list", "--agent", "claude-1")
        assert code == 0
        assert [i["id"] for i in out] == ["abc123"]
        assert out[0]["fields"]["status"] == "in-progress"

    def test_add_task_with_fields(self, capsys, tmp_path, board_file):
        code, out = run(
            capsys, tmp_path, "add-task",
            "--title", "Refactor auth", "--lane", "backlog",
            "--priority", "high", "--fields", "repo=api",
        )
        assert code == 0
        assert out["success"] is True
        assert f"[repo::api] [priority::high] #agent-task ^{out['id']}" in board_file.read_text()

    def test_update_complete_fail_archive(self, capsys, tmp_path, board_file):
        assert run(capsys, tmp_path, "update", "--id", "rel001", "--status", "blocked")[0] == 0
        assert run(capsys, tmp_path, "complete", "--id", "rel001")[0] == 0
        assert run(capsys, tmp_path, "fail", "--id", "abc123", "--reason", "flaky")[0] == 0
        code, out = run(capsys, tmp_path, "archive")
        assert code == 0
        assert out["ids"] == ["rel001"]

    def test_item_not_found(self, capsys, tmp_path, board_file):
        before = board_file.read_text()
        code, out = run(capsys, tmp_path, "update", "--id", "missing", "--status", "blocked")
        assert code == 1
        assert out == {
            "success": False,
            "error": "ItemNotFound",
            "message": 'Item with id "missing" not found',
            "id": "missing",
        }
        assert board_file.read_text() == before

    def test_add_task_defaults_to_ready(self, capsys, tmp_path, board_file):
        code, out = run(capsys, tmp_path, "add-task", "--title", "Triage alerts")
        assert code == 0
        assert out["lane"] == "Ready"

    def test_invalid_note_exits_1(self, capsys, tmp_path, board_file):
        before = board_file.read_text()
        code, out = run(capsys, tmp_path, "update", "--id", "abc123", "--status", "blocked", "--note", "see [link]")
        assert code == 1
        assert out["error"] == "InvalidField"
        assert out["field"] == "note"
        assert board_file.read_text() == before

    def test_lane_not_found(self, capsys, tmp_path, board_file):
        code, out = run(capsys, tmp_path, "list", "--lane", "Review")
        assert code == 1
        assert out["error"] == "LaneNotFound"
        assert out["lane"] == "Review"

    def test_already_claimed(self, capsys, tmp_path, board_file):
        run(capsys, tmp_path, "claim", "--id", "abc123", "--agent", "claude-1")
        code, out = run(capsys, tmp_path, "claim", "--id", "abc123", "--agent", "claude-2")
        assert code == 1
        assert out["error"] == "AlreadyClaimed"
        assert out["agent"] == "claude-1"

    def test_missing_board_file(self, capsys, tmp_path):
        code, out = run(capsys, tmp_path, "board-status")
        assert code == 1
        assert out["error"] == "DocumentUnreadable"

    def test_missing_required_option(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["claim", "--board", "board.md", "--id", "abc123"])
        assert exc.value.code == 2

    def test_vault_from_environment(self, capsys, tmp_path, board_file, monkeypatch):
        monkeypatch.setenv("MDBOARD_VAULT_PATH", str(tmp_path))
        assert main(["board-status", "--board", "board.md"]) == 0
        assert json.loads(capsys.readouterr().out)["board"] == "board.md"
