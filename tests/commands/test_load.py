"""Tests for the load and advance-epoch commands."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from mindlattice.cli import cli
from tests.conftest import write_payload


class TestLoad:
    def test_load_into_empty(
        self, cli_runner: CliRunner, chain_snapshot: Path, tmp_path: Path
    ) -> None:
        target = tmp_path / "copy.json"
        args = ["--json", "load", str(chain_snapshot), "--save-to", str(target)]
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert (data["anchors"], data["links"]) == (3, 2)
        doc = json.loads(target.read_text())
        assert [n["id"] for n in doc["nodes"]] == ["a", "b", "c"]
        assert [link["id"] for link in doc["links"]] == ["a-b", "b-c"]

    def test_load_conflict_strict(
        self, cli_runner: CliRunner, chain_snapshot: Path, tmp_path: Path
    ) -> None:
        extra = write_payload(tmp_path / "extra.json", {"nodes": [{"id": "a"}], "links": []})
        result = cli_runner.invoke(cli, ["-s", str(chain_snapshot), "--json", "load", str(extra)])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "DUPLICATE_ID"

    def test_load_partial(
        self, cli_runner: CliRunner, chain_snapshot: Path, tmp_path: Path
    ) -> None:
        extra = write_payload(
            tmp_path / "extra.json",
            {"nodes": [{"id": "a"}, {"id": "d"}], "links": [{"id": "c-d", "from": "c", "to": "d"}]},
        )
        args = ["-s", str(chain_snapshot), "load", str(extra), "--partial"]
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 1
        assert "LOAD_PARTIAL" in result.stderr
        assert "node[0]" in result.stderr

    def test_load_bad_json(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{oops")
        result = cli_runner.invoke(cli, ["--json", "load", str(bad)])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_ARGUMENT"

    def test_corrupt_snapshot_flag(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("[1, 2")
        result = cli_runner.invoke(cli, ["-s", str(bad), "--json", "query", "stats"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["op"] == "load_snapshot"


class TestAdvanceEpoch:
    def test_epoch_moves_and_stamps(self, cli_runner: CliRunner, chain_snapshot: Path) -> None:
        base = ["-s", str(chain_snapshot), "--json"]
        result = cli_runner.invoke(cli, [*base, "advance-epoch", "--save"])
        assert json.loads(result.stdout)["data"]["epoch"] == 1
        assert json.loads(chain_snapshot.read_text())["epoch"] == 1

        cli_runner.invoke(cli, [*base, "anchor", "pin", "Later", "--id", "d", "--save"])
        saved = json.loads(chain_snapshot.read_text())["nodes"]
        assert [n["epoch"] for n in saved] == [0, 0, 0, 1]
        result = cli_runner.invoke(cli, [*base, "query", "epoch", "--since", "1"])
        assert [i["id"] for i in json.loads(result.stdout)["data"]["items"]] == ["d"]
