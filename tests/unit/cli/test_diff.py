"""Unit tests for diff command.

Tests for the CLI diff command implementation.
"""

import json
from pathlib import Path
from unittest.mock import patch

from macctl.cli.main import app
from macctl.cli.types import Plan
from macctl.models.config import DesiredConfig
from macctl.models.state import ObservedState
from typer.testing import CliRunner

runner = CliRunner()


class TestDiffCommandHelp:
    """Tests for diff command help."""

    def test_diff_help(self) -> None:
        """Diff help shows all available options."""
        result = runner.invoke(app, ["diff", "--help"])

        assert result.exit_code == 0
        for option in ("--brief", "--json", "--strict", "--config"):
            assert option in result.output


class TestDiffNoConfig:
    """Tests for diff command when no config exists."""

    def test_missing_config(self, tmp_path: Path) -> None:
        """A missing config exits with code 1 and suggests init."""
        result = runner.invoke(app, ["diff", "-c", str(tmp_path / "nope.toml")])

        assert result.exit_code == 1
        assert "macctl init" in result.output


class TestDiffOutput:
    """Tests for diff output modes."""

    def test_in_sync(self, in_sync_plan: Plan) -> None:
        """An in-sync machine is reported as such."""
        with patch("macctl.cli.commands.diff.build_plan", return_value=in_sync_plan):
            result = runner.invoke(app, ["diff"])

        assert result.exit_code == 0
        assert "in sync" in result.output

    def test_table(self, pending_plan: Plan) -> None:
        """Pending changes are listed with a summary."""
        with patch("macctl.cli.commands.diff.build_plan", return_value=pending_plan):
            result = runner.invoke(app, ["diff"])

        assert result.exit_code == 0
        assert "wget" in result.output
        assert "1 to add" in result.output

    def test_brief(self, sample_config: DesiredConfig, plan_for) -> None:
        """--brief prints counts only."""
        plan = plan_for(sample_config)
        with patch("macctl.cli.commands.diff.build_plan", return_value=plan):
            result = runner.invoke(app, ["diff", "--brief"])

        assert result.exit_code == 0
        assert "Add: 13" in result.output
        assert "Total changes: 13" in result.output

    def test_json(self, sample_config: DesiredConfig, plan_for) -> None:
        """--json emits a parsable document including Dock changes."""
        plan = plan_for(sample_config, ObservedState(dock_apps=("Safari", "Music")))
        with patch("macctl.cli.commands.diff.build_plan", return_value=plan):
            result = runner.invoke(app, ["diff", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["in_sync"] is False
        assert [entry["name"] for entry in data["packages"]] == ["git", "wget"]
        assert data["dock"] == [
            {"action": "remove", "name": "Music", "position": None},
            {"action": "add", "name": "Mail", "position": 2},
        ]

    def test_json_in_sync(self, in_sync_plan: Plan) -> None:
        """An in-sync JSON document says so."""
        with patch("macctl.cli.commands.diff.build_plan", return_value=in_sync_plan):
            result = runner.invoke(app, ["diff", "--json"])

        assert json.loads(result.stdout)["in_sync"] is True

    def test_strict_passed_through(self, in_sync_plan: Plan) -> None:
        """--strict reaches the planner."""
        with patch(
            "macctl.cli.commands.diff.build_plan", return_value=in_sync_plan
        ) as mock_build:
            runner.invoke(app, ["diff", "--strict"])

        assert mock_build.call_args.kwargs["strict"] is True
