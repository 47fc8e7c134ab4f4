"""Persisted record of managed preference keys.

The record lists the ``(domain, key)`` pairs that were desired as of the
last successful apply. It is the only state macctl carries across runs,
and it exists so that a key dropped from the config can be told apart
from a key macctl never touched.
"""

import json
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile

from macctl.core.paths import get_record_path
from macctl.models.config import SettingIdentity

logger = logging.getLogger(__name__)


class RecordError(Exception):
    """Raised when the record file cannot be written."""


@dataclass(frozen=True, slots=True)
class PersistedRecord:
    """Settings identities desired as of the last successful apply.

    Attributes:
        settings: De-duplicated identities in the order they were recorded.
    """

    settings: tuple[SettingIdentity, ...] = ()

    @classmethod
    def from_identities(cls, identities: Iterable[SettingIdentity]) -> "PersistedRecord":
        """Build a record, dropping duplicates while keeping first-seen order."""
        return cls(settings=tuple(dict.fromkeys(identities)))

    def __contains__(self, identity: object) -> bool:
        return identity in self.settings

    def __len__(self) -> int:
        return len(self.settings)

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """Serialize to the on-disk document shape."""
        return {
            "settings": [
                {"domain": identity.domain, "key": identity.key} for identity in self.settings
            ]
        }


class RecordStore:
    """Reads and overwrites the persisted record file.

    Storage location: ~/.config/macctl/state.json

    A missing or unreadable file is an empty record, never an error.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize RecordStore.

        Args:
            path: Optional override for the record file location.
        """
        self._path = path if path is not None else get_record_path()

    @property
    def path(self) -> Path:
        """Path to the record file."""
        return self._path

    def load(self) -> PersistedRecord:
        """Load the record.

        Returns:
            The stored record, or an empty one if the file is missing or malformed.
        """
        if not self._path.exists():
            return PersistedRecord()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable record file %s: %s", self._path, e)
            return PersistedRecord()

        if not isinstance(data, dict) or not isinstance(data.get("settings"), list):
            logger.warning("Ignoring malformed record file %s", self._path)
            return PersistedRecord()

        identities: list[SettingIdentity] = []
        for item in data["settings"]:
            if (
                isinstance(item, dict)
                and isinstance(item.get("domain"), str)
                and isinstance(item.get("key"), str)
            ):
                identities.append(SettingIdentity(item["domain"], item["key"]))
            else:
                logger.warning("Skipping malformed record entry: %r", item)

        return PersistedRecord.from_identities(identities)

    def save(self, identities: Iterable[SettingIdentity]) -> PersistedRecord:
        """Replace the record with the given identities.

        The file is written atomically via a temporary file and os.replace().

        Args:
            identities: Settings identities currently desired.

        Returns:
            The record that was written.

        Raises:
            RecordError: If the file cannot be written.
        """
        record = PersistedRecord.from_identities(identities)
        content = json.dumps(record.to_dict(), indent=2) + "\n"

        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(content)
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise RecordError(f"Failed to write record {self._path}: {e}") from e

        logger.debug("Recorded %d managed setting(s) in %s", len(record), self._path)
        return record
