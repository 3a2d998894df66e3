# tests/test_cli.py
"""
Unit tests for the localsight Command-Line Interface (CLI).
"""

from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from localsight import __version__
from localsight.cli import app

runner = CliRunner()


def test_version_option():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"localsight version: {__version__}" in result.stdout


def test_version_command():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_start_exits_on_invalid_configuration():
    with patch("localsight.cli.start.configure_logging"), patch("localsight.cli.start.asyncio.run") as mock_run:
        result = runner.invoke(app, ["start"], env={"LSE_PORT": "not-a-port"})

    assert result.exit_code == 1
    mock_run.assert_not_called()


def test_start_exits_on_invalid_interval():
    with patch("localsight.cli.start.configure_logging"), patch("localsight.cli.start.asyncio.run") as mock_run:
        result = runner.invoke(app, ["start"], env={"LSE_INTERVAL": "sometimes"})

    assert result.exit_code == 1
    mock_run.assert_not_called()


def test_start_exits_when_metrics_server_fails():
    with (
        patch("localsight.cli.start.configure_logging"),
        patch("localsight.cli.start.start_metrics_server", side_effect=OSError("address in use")),
        patch("localsight.cli.start.asyncio.run") as mock_run,
    ):
        result = runner.invoke(app, ["start"])

    assert result.exit_code == 1
    mock_run.assert_not_called()


def test_start_runs_the_collector_loop():
    with (
        patch("localsight.cli.start.configure_logging") as mock_logging,
        patch("localsight.cli.start.start_metrics_server") as mock_server,
        patch("localsight.cli.start._async_start", new_callable=MagicMock) as mock_async_start,
        patch("localsight.cli.start.asyncio.run") as mock_run,
    ):
        result = runner.invoke(
            app,
            ["start"],
            env={"LSE_PORT": "9200", "LSE_DEBUG": "true", "LSE_NODE_NAME": "n1", "LSE_METRICS_NAMESPACE": "ls_ex"},
        )

    assert result.exit_code == 0
    mock_logging.assert_called_once_with(debug=True, json_log=False)
    gauges, port = mock_server.call_args.args
    assert port == 9200
    assert gauges.namespace == "ls_ex"
    mock_run.assert_called_once()
    config, passed_gauges = mock_async_start.call_args.args
    assert config.NODE_NAME == "n1"
    assert passed_gauges is gauges
