"""Tests for cli.py -- Click CLI interface."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner
from loguru import logger

from autolist.cli import main
from autolist.errors import RemoteCallError


@pytest.fixture(autouse=True)
def _fast_config(tmp_path, monkeypatch):
    """Keep logs in tmp_path and runs fast; never read a project .env."""
    monkeypatch.setenv("AUTOLIST_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("AUTOLIST_THROTTLE_MS", "0")
    monkeypatch.setenv("AUTOLIST_POLL_INTERVAL_MS", "5")
    monkeypatch.chdir(tmp_path)
    yield
    # Sinks added by the command point at CliRunner streams
    logger.remove()


@pytest.fixture
def widar(fake_client):
    """Patch WidarClient so `run` talks to the in-memory fake."""
    with patch("autolist.cli.WidarClient") as mock_cls:
        mock_cls.from_config.return_value.__enter__.return_value = fake_client
        yield mock_cls


class TestHelpOutput:
    def test_group_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "run" in result.output
        assert "export" in result.output

    def test_run_help(self):
        result = CliRunner().invoke(main, ["run", "--help"])
        assert result.exit_code == 0
        assert "--statement" in result.output
        assert "--concurrency" in result.output
        assert "--dry-run" in result.output


class TestRun:
    def test_runs_statements_on_items(self, widar, fake_client):
        result = CliRunner().invoke(
            main, ["run", "Q1", "Q2", "-s", "P31:Q5", "-s", "-P21"]
        )
        assert result.exit_code == 0, result.output + str(result.exception or "")
        assert fake_client.calls_to("set_statement") == [
            ("Q1", "P31", "Q5"),
            ("Q2", "P31", "Q5"),
        ]
        assert "Batch completed: 4/4 done, 0 failed" in result.output

    def test_rows_from_file(self, widar, fake_client, tmp_path):
        rows = tmp_path / "rows.txt"
        rows.write_text("P31:Q5\nnot a row\n")
        result = CliRunner().invoke(main, ["run", "Q1", "-f", str(rows)])
        assert result.exit_code == 0, result.output + str(result.exception or "")
        assert "Skipped unrecognized row: not a row" in result.output
        assert fake_client.calls_to("set_statement") == [("Q1", "P31", "Q5")]

    def test_created_items_listed(self, widar, fake_client):
        result = CliRunner().invoke(
            main, ["run", "--create", "Douglas_Adams", "-s", "P31:Q5"]
        )
        assert result.exit_code == 0, result.output + str(result.exception or "")
        assert "Created items:" in result.output
        assert "Q101" in result.output
        assert fake_client.calls_to("set_statement") == [("Q101", "P31", "Q5")]

    def test_failures_exit_nonzero(self, widar, fake_client):
        fake_client.errors["set_statement"] = RemoteCallError("HTTP 500")
        result = CliRunner().invoke(main, ["run", "Q1", "-s", "P31:Q5"])
        assert result.exit_code == 1
        assert "1 failed" in result.output

    def test_dry_run_makes_no_calls(self, widar, fake_client):
        result = CliRunner().invoke(
            main, ["run", "Q1", "-s", "P31:Q5", "--dry-run"]
        )
        assert result.exit_code == 0
        assert "[DRY-RUN] 1 commands" in result.output
        assert "#0 add Q1 P31:Q5" in result.output
        widar.from_config.assert_not_called()

    def test_flags_reach_config(self, widar):
        CliRunner().invoke(
            main,
            ["run", "Q1", "-s", "P31:Q5", "--bot", "--concurrency", "3", "--wiki", "dewiki"],
        )
        config = widar.from_config.call_args[0][0]
        assert config.bot_mode is True
        assert config.effective_concurrency == 3
        assert config.wiki == "dewiki"

    def test_requires_items(self, widar):
        result = CliRunner().invoke(main, ["run", "-s", "P31:Q5"])
        assert result.exit_code == 2
        assert "at least one item" in result.output

    def test_requires_valid_rows(self, widar):
        result = CliRunner().invoke(main, ["run", "Q1", "-s", "garbage"])
        assert result.exit_code == 2
        assert "no valid statement rows" in result.output

    def test_rejects_bad_item(self, widar):
        result = CliRunner().invoke(main, ["run", "Douglas", "-s", "P31:Q5"])
        assert result.exit_code == 2


class TestExport:
    def test_prints_quickstatements(self):
        result = CliRunner().invoke(
            main, ["export", "Q1", "--create", "Foo", "-s", "P31:Q5"]
        )
        assert result.exit_code == 0, result.output + str(result.exception or "")
        assert (
            'Q1|P31|Q5||CREATE||LAST|Senwiki|"Foo"||LAST|Len|"Foo"||LAST|P31|Q5'
            in result.output
        )
