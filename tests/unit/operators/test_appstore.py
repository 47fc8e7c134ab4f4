"""Unit tests for the Mac App Store operator."""

from unittest.mock import patch

import pytest
from macctl.models.diff import AppStoreDiff, DiffAction
from macctl.operators.appstore import AppStoreOperator
from macctl.utils.shell import CommandResult


@pytest.fixture(autouse=True)
def mas_installed():
    """Pretend mas is installed."""
    with patch("macctl.operators.appstore.command_exists", return_value=True) as mock_exists:
        yield mock_exists


class TestAppStoreOperator:
    """Tests for AppStoreOperator class."""

    def test_install(self) -> None:
        """Apps are installed by id."""
        with patch("macctl.operators.appstore.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)

            result = AppStoreOperator().execute(
                AppStoreDiff(action=DiffAction.ADD, id=497799835, name="Xcode")
            )

        assert result.success
        assert result.message == "Installed Xcode (497799835)"
        assert mock_run.call_args[0][0] == ["mas", "install", "497799835"]

    def test_remove_is_unsupported(self) -> None:
        """Removal fails without calling mas."""
        with patch("macctl.operators.appstore.run_command") as mock_run:
            result = AppStoreOperator().execute(
                AppStoreDiff(action=DiffAction.REMOVE, id=409183694, name="Keynote")
            )

        assert result.failed
        assert "remove it manually" in (result.error or "")
        mock_run.assert_not_called()

    def test_mas_missing(self, mas_installed) -> None:
        """Without mas the install hint is reported."""
        mas_installed.return_value = False

        result = AppStoreOperator().execute(
            AppStoreDiff(action=DiffAction.ADD, id=497799835, name="Xcode")
        )

        assert result.failed
        assert result.error == "mas is not installed (install with: brew install mas)"
