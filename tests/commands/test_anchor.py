"""Tests for the anchor command group."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from mindlattice.cli import cli
from mindlattice.domain.ids import generate_anchor_id


class TestPin:
    def test_pin_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "anchor", "pin", "Root Idea", "--tier", "3"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["op"] == "pin_anchor"
        assert data["data"]["id"] == generate_anchor_id("Root Idea")
        assert data["data"]["tier"] == 3

    def test_pin_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["anchor", "pin", "Alpha", "--id", "a"])
        assert result.exit_code == 0
        assert "pin_anchor" in result.stdout
        assert "label: Alpha" in result.stdout

    def test_pin_quiet_prints_id(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "anchor", "pin", "Alpha", "--id", "a"])
        assert result.stdout.strip() == "a"

    def test_clamp_warning_goes_to_stderr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["anchor", "pin", "A", "--tier", "12"])
        assert result.exit_code == 0
        assert "WARNING: Tier 12 clamped into 0-7" in result.stderr
        assert "WARNING" not in result.stdout

    def test_save_persists(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        args = ["-s", str(snapshot_file), "--json", "anchor", "pin"]
        first = cli_runner.invoke(cli, [*args, "Alpha", "--id", "a", "--save"])
        assert first.exit_code == 0
        assert json.loads(first.stdout)["data"]["saved_to"] == str(snapshot_file)

        second = cli_runner.invoke(cli, [*args, "Beta", "--id", "b", "--save"])
        assert second.exit_code == 0
        doc = json.loads(snapshot_file.read_text())
        assert [n["id"] for n in doc["nodes"]] == ["a", "b"]

    def test_duplicate_fails(self, cli_runner: CliRunner, chain_snapshot: Path) -> None:
        result = cli_runner.invoke(
            cli, ["-s", str(chain_snapshot), "--json", "anchor", "pin", "X", "--id", "a"]
        )
        assert result.exit_code == 1
        assert result.stdout == ""
        assert json.loads(result.stderr)["error"]["code"] == "DUPLICATE_ID"

    def test_save_without_snapshot_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["anchor", "pin", "A", "--save"])
        assert result.exit_code == 2
        assert "--snapshot" in result.stderr

    def test_save_to(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "out" / "l.json"
        args = ["anchor", "pin", "A", "--id", "a", "--save-to", str(target)]
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert json.loads(target.read_text())["nodes"][0]["id"] == "a"


class TestRecallAndShow:
    def test_recall_once(self, cli_runner: CliRunner, chain_snapshot: Path) -> None:
        base = ["-s", str(chain_snapshot), "--json", "anchor", "recall", "a"]
        first = cli_runner.invoke(cli, [*base, "--hash", "rh", "--save"])
        assert first.exit_code == 0
        assert json.loads(first.stdout)["data"]["recall_stored"] is True

        second = cli_runner.invoke(cli, base)
        assert second.exit_code == 1
        assert json.loads(second.stderr)["error"]["code"] == "ALREADY_STORED"

    def test_show(self, cli_runner: CliRunner, chain_snapshot: Path) -> None:
        args = ["-s", str(chain_snapshot), "--json", "anchor", "show", "b"]
        result = cli_runner.invoke(cli, args)
        data = json.loads(result.stdout)["data"]
        assert data["label"] == "Beta"
        assert data["in_links"] == ["a-b"]
        assert data["out_links"] == ["b-c"]

    def test_show_missing(self, cli_runner: CliRunner, chain_snapshot: Path) -> None:
        result = cli_runner.invoke(cli, ["-s", str(chain_snapshot), "anchor", "show", "ghost"])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.stderr
