"""Unit tests for the persisted record store."""

import json
from pathlib import Path

import pytest
from macctl.core.record import PersistedRecord, RecordError, RecordStore
from macctl.models.config import SettingIdentity


@pytest.fixture
def record_path(tmp_path: Path) -> Path:
    """Path for a temporary record file."""
    return tmp_path / "state.json"


class TestPersistedRecord:
    """Tests for PersistedRecord dataclass."""

    def test_from_identities_dedupes_in_order(self) -> None:
        """Duplicates are dropped and first-seen order is kept."""
        record = PersistedRecord.from_identities(
            [
                SettingIdentity("b", "2"),
                SettingIdentity("a", "1"),
                SettingIdentity("b", "2"),
            ]
        )

        assert record.settings == (SettingIdentity("b", "2"), SettingIdentity("a", "1"))
        assert len(record) == 2

    def test_contains(self) -> None:
        """Membership is checked by identity."""
        record = PersistedRecord.from_identities([SettingIdentity("a", "1")])

        assert SettingIdentity("a", "1") in record
        assert SettingIdentity("a", "2") not in record

    def test_to_dict(self) -> None:
        """to_dict produces the on-disk shape."""
        record = PersistedRecord.from_identities([SettingIdentity("com.apple.dock", "autohide")])

        assert record.to_dict() == {"settings": [{"domain": "com.apple.dock", "key": "autohide"}]}


class TestRecordStoreLoad:
    """Tests for RecordStore.load method."""

    def test_missing_file_is_empty(self, record_path: Path) -> None:
        """A missing file yields an empty record."""
        assert RecordStore(record_path).load() == PersistedRecord()

    def test_malformed_json_is_empty(self, record_path: Path) -> None:
        """Unparsable content yields an empty record."""
        record_path.write_text("{not json")

        assert RecordStore(record_path).load() == PersistedRecord()

    def test_wrong_shape_is_empty(self, record_path: Path) -> None:
        """A document without a settings list yields an empty record."""
        record_path.write_text(json.dumps({"settings": "nope"}))

        assert RecordStore(record_path).load() == PersistedRecord()

    def test_skips_bad_entries(self, record_path: Path) -> None:
        """Malformed entries are skipped, valid ones kept."""
        record_path.write_text(
            json.dumps(
                {
                    "settings": [
                        {"domain": "com.apple.dock", "key": "autohide"},
                        {"domain": "missing-key"},
                        "garbage",
                    ]
                }
            )
        )

        record = RecordStore(record_path).load()

        assert record.settings == (SettingIdentity("com.apple.dock", "autohide"),)

    def test_default_path(self, isolated_config_home: Path) -> None:
        """Without an override the record lives in the config directory."""
        assert RecordStore().path == isolated_config_home / "macctl" / "state.json"


class TestRecordStoreSave:
    """Tests for RecordStore.save method."""

    def test_round_trip(self, record_path: Path) -> None:
        """Saved identities are loaded back unchanged."""
        store = RecordStore(record_path)
        identities = [SettingIdentity("com.apple.dock", "autohide"), SettingIdentity("d", "k")]

        store.save(identities)

        assert store.load().settings == tuple(identities)

    def test_overwrites_wholesale(self, record_path: Path) -> None:
        """Saving replaces the previous record entirely."""
        store = RecordStore(record_path)
        store.save([SettingIdentity("old", "key")])

        store.save([SettingIdentity("new", "key")])

        assert store.load().settings == (SettingIdentity("new", "key"),)

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """The parent directory is created on demand."""
        store = RecordStore(tmp_path / "nested" / "state.json")

        store.save([])

        assert store.path.exists()
        assert json.loads(store.path.read_text()) == {"settings": []}

    def test_no_temp_files_left(self, record_path: Path) -> None:
        """The atomic write leaves no temporary files behind."""
        RecordStore(record_path).save([SettingIdentity("a", "b")])

        assert [p.name for p in record_path.parent.iterdir()] == ["state.json"]

    def test_unwritable_raises(self, tmp_path: Path) -> None:
        """An unwritable location raises RecordError."""
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = RecordStore(blocker / "state.json")

        with pytest.raises(RecordError):
            store.save([])
