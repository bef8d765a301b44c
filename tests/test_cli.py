"""Tests for the minisheet command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from minisheet import __version__
from minisheet.cli import main
from minisheet.logging.events import set_log_dir


@pytest.fixture(autouse=True)
def _reset_sink():
    yield
    set_log_dir(None)


@pytest.fixture
def run(tmp_path: Path):
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(main, ["--config-dir", str(tmp_path), *args])

    return _run


class TestParseCommand:
    def test_binary(self, run) -> None:
        result = run("parse", "A1-C2")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "SUB A1 C2"

    def test_leading_equals_accepted(self, run) -> None:
        result = run("parse", "=sum(A1:B2)")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "SUM A1 B1 A2 B2"

    def test_parse_error(self, run) -> None:
        result = run("parse", "A1 +")
        assert result.exit_code != 0
        assert "Formula parse error" in result.output

    def test_unknown_function(self, run) -> None:
        result = run("parse", "max(A1:B2)")
        assert result.exit_code != 0
        assert "Unknown function" in result.output


class TestEvalCommand:
    def test_requested_cells(self, run) -> None:
        result = run("eval", "--set", "A1=2", "--set", "B1=3", "--set", "C1==A1+B1", "C1")
        assert result.exit_code == 0, result.output
        assert result.output == "C1\t5\n"

    def test_all_cells_json(self, run) -> None:
        result = run("eval", "--set", "A1=2", "--set", "B1==A1 +", "--set", "C1==C1*A1", "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"A1": "2", "B1": "#Error", "C1": "#CYCLE"}

    def test_unset_cell_is_na(self, run) -> None:
        result = run("eval", "Q7")
        assert result.exit_code == 0, result.output
        assert result.output == "Q7\t#NA\n"

    def test_bad_set_format(self, run) -> None:
        result = run("eval", "--set", "A1")
        assert result.exit_code != 0
        assert "Invalid --set format" in result.output

    def test_bad_address(self, run) -> None:
        result = run("eval", "--set", "a1=2")
        assert result.exit_code != 0
        assert "Invalid cell address" in result.output


class TestAddressCommands:
    def test_address(self, run) -> None:
        result = run("address", "AA12")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "11 26"

    def test_invalid_address(self, run) -> None:
        result = run("address", "A0")
        assert result.exit_code != 0

    def test_range(self, run) -> None:
        result = run("range", "Z1:AB2")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Z1 AA1 AB1 Z2 AA2 AB2"

    def test_invalid_range(self, run) -> None:
        result = run("range", "A1-B2")
        assert result.exit_code != 0

    def test_range_outside_grid(self, run) -> None:
        result = run("range", "A1:ZZ99999999")
        assert result.exit_code != 0
        assert "Invalid cell address" in result.output


class TestEventsCommand:
    def test_disabled(self, run) -> None:
        result = run("events")
        assert result.exit_code != 0
        assert "logging is disabled" in result.output

    def test_lists_events_from_previous_invocation(self, tmp_path: Path, run) -> None:
        (tmp_path / "minisheet.yaml").write_text("logging:\n  enabled: true\n")
        assert run("eval", "--set", "A1==A1 +").exit_code == 0
        result = run("events", "--level", "warning")
        assert result.exit_code == 0, result.output
        assert "cell_parse_error" in result.output
        assert (tmp_path / "logs" / "events.ndjson").exists()

    def test_bad_config(self, tmp_path: Path, run) -> None:
        (tmp_path / "minisheet.yaml").write_text("- nope\n")
        result = run("events")
        assert result.exit_code != 0
        assert "must contain a mapping" in result.output


def test_version(run) -> None:
    result = run("--version")
    assert result.exit_code == 0
    assert __version__ in result.output
