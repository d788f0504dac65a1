"""Tests for the command-line interface."""

import pytest
from rich.console import Console
from typer.testing import CliRunner

from cmdsim import __version__, main
from cmdsim.main import app


@pytest.fixture
def runner(monkeypatch, tmp_path):
    """CLI runner isolated from any local config files."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("CMDSIM_LOGGING__LEVEL", "ERROR")
    monkeypatch.setattr(main, "console", Console(width=200))
    return CliRunner()


def test_version(runner):
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_devices(runner):
    result = runner.invoke(app, ["devices", "--latency", "0"])

    assert result.exit_code == 0
    assert "d_001" in result.output
    assert "d_003" in result.output


def test_devices_force_error(runner):
    result = runner.invoke(app, ["devices", "--latency", "0", "--force-error"])

    assert result.exit_code == 1
    assert "Mock API error" in result.output


def test_devices_from_config(runner, tmp_path):
    config = tmp_path / "custom.yaml"
    config.write_text("devices: [edge_a]\nnetwork:\n  latency_ms: 0\n")

    result = runner.invoke(app, ["devices", "--config", str(config)])

    assert result.exit_code == 0
    assert "edge_a" in result.output
    assert "d_001" not in result.output


def test_watch_with_schedule(runner):
    result = runner.invoke(
        app,
        [
            "watch",
            "d_002",
            "--duration",
            "0.2",
            "--latency",
            "0",
            "--interval",
            "0.05",
            "--schedule",
            "PING",
            "--params",
            '{"a": 1}',
        ],
    )

    assert result.exit_code == 0
    assert "Scheduled c_130 (PING)" in result.output
    assert "c_124" in result.output
    assert "10 commands" in result.output


def test_watch_rejects_bad_params(runner):
    result = runner.invoke(
        app,
        ["watch", "d_001", "--duration", "0.05", "--latency", "0", "--schedule", "PING", "--params", "{"],
    )

    assert result.exit_code == 1
    assert "Invalid --params" in result.output
    assert "Params must be valid JSON" in result.output
    assert "commands:" not in result.output


def test_watch_force_error(runner):
    result = runner.invoke(
        app,
        ["watch", "d_001", "--duration", "0.05", "--latency", "0", "--force-error"],
    )

    assert result.exit_code == 0
    assert "Mock API error (simulated)" in result.output
