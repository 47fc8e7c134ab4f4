"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from macctl.core.record import PersistedRecord
from macctl.models.config import DesiredConfig, SettingIdentity


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temporary directory for every test."""
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def sample_config() -> DesiredConfig:
    """A config touching every section."""
    return DesiredConfig.model_validate(
        {
            "brew": {"packages": ["git", "wget"], "casks": ["firefox"]},
            "appstore": {"apps": [{"id": 497799835, "name": "Xcode"}]},
            "macos": {
                "settings": [
                    {"domain": "com.apple.dock", "key": "autohide", "value": True},
                    {"domain": "com.apple.dock", "key": "tilesize", "value": 48},
                    {"domain": "NSGlobalDomain", "key": "AppleShowAllExtensions", "value": True},
                ],
                "dock_apps": ["Safari", {"name": "/System/Applications/Mail.app", "position": 2}],
                "wallpaper": "/Library/Desktop Pictures/Sonoma.heic",
            },
            "git": {
                "settings": [
                    {"key": "user.name", "value": "Jane Doe"},
                    {"key": "pull.rebase", "value": True},
                ]
            },
            "files": [{"source": "zshrc", "target": "~/.zshrc"}],
        }
    )


@pytest.fixture
def empty_record() -> PersistedRecord:
    """A record with no managed settings."""
    return PersistedRecord()


@pytest.fixture
def dock_record() -> PersistedRecord:
    """A record listing two Dock settings."""
    return PersistedRecord.from_identities(
        [
            SettingIdentity("com.apple.dock", "autohide"),
            SettingIdentity("com.apple.dock", "orientation"),
        ]
    )


@pytest.fixture
def sample_brew_output() -> str:
    """Sample ``brew list --formula --versions`` output."""
    return """git 2.44.0
htop 3.3.0
python@3.12 3.12.2 3.12.3
wget 1.24.5"""


@pytest.fixture
def sample_mas_output() -> str:
    """Sample ``mas list`` output."""
    return """497799835  Xcode                (15.3)
409183694  Keynote              (14.0)
1295203466 Microsoft Remote Desktop (10.9.6)"""


@pytest.fixture
def sample_dockutil_output() -> str:
    """Sample ``dockutil --list`` output."""
    plist = "/Users/jane/Library/Preferences/com.apple.dock.plist"
    return (
        f"Safari\tfile:///Applications/Safari.app/\tpersistentApps\t{plist}\tcom.apple.Safari\n"
        f"Music\tfile:///System/Applications/Music.app/\tpersistentApps\t{plist}\tcom.apple.Music\n"
        f"Preview\tfile:///System/Applications/Preview.app/\trecentApps\t{plist}\t"
        "com.apple.Preview\n"
        f"Downloads\tfile:///Users/jane/Downloads/\tpersistentOthers\t{plist}\t\n"
    )
