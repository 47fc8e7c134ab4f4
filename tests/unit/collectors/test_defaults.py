"""Unit tests for the preference collector."""

import subprocess
from unittest.mock import patch

from macctl.collectors.defaults import DefaultsCollector
from macctl.core.record import PersistedRecord
from macctl.models.config import DesiredConfig
from macctl.utils.shell import CommandResult


def _fake_defaults(values: dict[tuple[str, str], str]):
    def run(args: list[str], **kwargs: object) -> CommandResult:
        domain, key = args[2], args[3]
        if (domain, key) in values:
            return CommandResult(stdout=values[(domain, key)], stderr="", returncode=0)
        stderr = f"The domain/default pair of ({domain}, {key}) does not exist"
        return CommandResult(stdout="", stderr=stderr, returncode=1)

    return run


class TestDefaultsCollector:
    """Tests for DefaultsCollector class."""

    def test_reads_declared_keys(self, sample_config: DesiredConfig) -> None:
        """Declared keys are read and parsed."""
        fake = _fake_defaults(
            {
                ("com.apple.dock", "autohide"): "1\n",
                ("com.apple.dock", "tilesize"): "36\n",
            }
        )
        with patch("macctl.collectors.defaults.run_command", side_effect=fake):
            observed = DefaultsCollector().collect(sample_config, PersistedRecord())

        assert observed == {"com.apple.dock:autohide": True, "com.apple.dock:tilesize": 36}

    def test_reads_recorded_keys(self, dock_record: PersistedRecord) -> None:
        """Keys from the record are read even when no longer declared."""
        fake = _fake_defaults({("com.apple.dock", "orientation"): "left\n"})
        with patch("macctl.collectors.defaults.run_command", side_effect=fake):
            observed = DefaultsCollector().collect(DesiredConfig(), dock_record)

        assert observed == {"com.apple.dock:orientation": "left"}

    def test_each_key_read_once(
        self, sample_config: DesiredConfig, dock_record: PersistedRecord
    ) -> None:
        """A key both declared and recorded is read once."""
        fake = _fake_defaults({})
        with patch("macctl.collectors.defaults.run_command", side_effect=fake) as mock_run:
            DefaultsCollector().collect(sample_config, dock_record)

        read_pairs = [tuple(call.args[0][2:4]) for call in mock_run.call_args_list]
        assert read_pairs.count(("com.apple.dock", "autohide")) == 1
        assert len(read_pairs) == 4

    def test_read_command(self) -> None:
        """read() runs defaults read domain key."""
        with patch("macctl.collectors.defaults.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="bottom\n", stderr="", returncode=0)

            assert DefaultsCollector().read("com.apple.dock", "orientation") == "bottom"

        assert mock_run.call_args[0][0] == ["defaults", "read", "com.apple.dock", "orientation"]

    def test_read_empty_output_is_absent(self) -> None:
        """Empty output counts as an absent key."""
        with patch("macctl.collectors.defaults.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="\n", stderr="", returncode=0)

            assert DefaultsCollector().read("d", "k") is None

    def test_read_timeout_is_absent(self) -> None:
        """A hanging defaults read counts as an absent key."""
        with patch(
            "macctl.collectors.defaults.run_command",
            side_effect=subprocess.TimeoutExpired(["defaults"], 60),
        ):
            assert DefaultsCollector().read("d", "k") is None
