"""
Tests for the statusbot CLI.
"""

import os

import pytest
from typer.testing import CliRunner

from statusbot import __version__
from statusbot.cli.commands import app

runner = CliRunner()


class TestCli:

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_parse_status(self):
        result = runner.invoke(app, ["parse", "status :crab: busy <time:2025-01-01T10:00:00-04:00>"])
        assert result.exit_code == 0
        assert "SetStatus" in result.output
        assert "busy" in result.output
        assert "2025-01-01T10:00:00-04:00" in result.output

    def test_parse_other(self):
        result = runner.invoke(app, ["parse", "hello"])
        assert result.exit_code == 0
        assert "Help" in result.output

    def test_normalize(self):
        result = runner.invoke(app, ["normalize", "Jacob Young (he/him) (S2'16)"])
        assert result.exit_code == 0
        assert "'Jacob Young'" in result.output

    def test_serve_without_config(self, monkeypatch, tmp_path):
        """Test missing configuration is reported and exits with status 1."""
        for key in list(os.environ):
            if key.startswith("STATUSBOT_"):
                monkeypatch.delenv(key)
        monkeypatch.delenv("FLY_APP_NAME", raising=False)
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["serve"])

        assert result.exit_code == 1
        assert "Missing required configuration" in result.output
