"""Tests for negotiate, compromise, stalled and tips commands."""

import json

import pytest
from click.testing import CliRunner

from mandictl.cli import cli


@pytest.mark.usefixtures("_isolated_data")
class TestNegotiateCommand:
    def test_counter_high_offer(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["negotiate", "tomato", "25"])
        assert result.exit_code == 0
        assert "COUNTER" in result.stdout
        assert "₹21" in result.stdout

    def test_quiet_prints_price(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "negotiate", "anything", "10", "--market-price", "16"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "15"

    def test_previous_offers_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "negotiate", "tomato", "20", "--previous", "20", "--previous", "20.1"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["suggestion"]["type"] == "accept"
        assert data["stalled"] is True

    def test_unknown_commodity_warns(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["negotiate", "unobtainium", "10"])
        assert result.exit_code == 0
        assert "WARNING: No market price found for 'unobtainium'" in result.stderr

    def test_invalid_market_price(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["negotiate", "tomato", "10", "--market-price", "-3"])
        assert result.exit_code == 1
        assert "Invalid input" in result.stderr

    def test_infinite_market_price(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "negotiate", "tomato", "20", "--market-price", "inf"]
        )
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "VALIDATION_ERROR"

    def test_non_numeric_offer(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["negotiate", "tomato", "cheap"])
        assert result.exit_code == 2


@pytest.mark.usefixtures("_isolated_data")
class TestHelperCommands:
    def test_compromise(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "compromise", "20", "25"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "23"

    @pytest.mark.parametrize(
        ("offers", "expected"),
        [(["100", "101", "100"], "yes"), (["90", "100", "110"], "no"), (["100"], "no")],
    )
    def test_stalled(self, cli_runner: CliRunner, offers: list[str], expected: str) -> None:
        result = cli_runner.invoke(cli, ["-q", "stalled", *offers])
        assert result.exit_code == 0
        assert result.stdout.strip() == expected

    def test_tips(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tips"])
        assert result.exit_code == 0
        assert "•" in result.stdout

    def test_default_language_from_config(self, cli_runner: CliRunner) -> None:
        with open("mandictl.toml", "w", encoding="utf-8") as fh:
            fh.write('[negotiation]\ndefault_language = "hi"\n')
        result = cli_runner.invoke(cli, ["--json", "tips"])
        assert json.loads(result.stdout)["data"]["language"] == "hi"
