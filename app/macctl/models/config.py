"""Desired-state models for declarative workstation configuration.

This module defines the Pydantic models representing the config.toml
structure that describes the desired state of the machine.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Closed set of value shapes a preference key can hold
SettingValue = bool | int | float | str | list[str] | dict[str, Any]

# Git configuration scope
GitScope = Literal["global", "system", "local"]


class ValueType(str, Enum):
    """Wire type tag passed to ``defaults write``."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    ARRAY = "array"
    DICT = "dict"


class SettingIdentity(NamedTuple):
    """Identity of a preference key: its domain plus its key."""

    domain: str
    key: str

    @property
    def composite(self) -> str:
        """``domain:key`` form used to index observed settings."""
        return f"{self.domain}:{self.key}"


class BrewConfig(BaseModel):
    """Homebrew section of the config.

    Attributes:
        packages: Formula names to keep installed, in declared order.
        casks: Cask names to keep installed, in declared order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    packages: Annotated[list[str], Field(default_factory=list, description="Formulae")]
    casks: Annotated[list[str], Field(default_factory=list, description="Casks")]


class AppStoreApp(BaseModel):
    """Mac App Store application, identified by its numeric store id.

    Attributes:
        id: App Store id (as shown by ``mas search``).
        name: Display name, used for output only.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: Annotated[int, Field(gt=0, description="App Store id")]
    name: Annotated[str, Field(min_length=1, description="Display name")]


class AppStoreConfig(BaseModel):
    """Mac App Store section of the config."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    apps: Annotated[list[AppStoreApp], Field(default_factory=list)]


class MacOSSetting(BaseModel):
    """A single preference key managed through ``defaults``.

    Attributes:
        domain: Preference domain (e.g. "com.apple.dock", "NSGlobalDomain").
        key: Preference key.
        value: Desired value.
        type: Explicit wire type; inferred from ``value`` when omitted.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    domain: Annotated[str, Field(min_length=1)]
    key: Annotated[str, Field(min_length=1)]
    value: SettingValue
    type: ValueType | None = None

    @model_validator(mode="before")
    @classmethod
    def coerce_to_declared_type(cls, data: Any) -> Any:
        """Apply simple scalar coercion when an explicit type is declared."""
        if not isinstance(data, dict) or data.get("type") is None:
            return data
        value = data.get("value")
        declared = data["type"]
        if isinstance(value, bool) or isinstance(value, (list, dict)):
            return data
        coerced = dict(data)
        if declared == ValueType.STRING and isinstance(value, (int, float)):
            coerced["value"] = str(value)
        elif declared == ValueType.INT and isinstance(value, float) and value.is_integer():
            coerced["value"] = int(value)
        elif declared == ValueType.FLOAT and isinstance(value, int):
            coerced["value"] = float(value)
        return coerced

    @property
    def identity(self) -> SettingIdentity:
        """Identity of this setting."""
        return SettingIdentity(self.domain, self.key)


class DockApp(BaseModel):
    """An application pinned to the Dock.

    Attributes:
        name: App name ("Safari") or bundle path ("/Applications/Safari.app").
        position: Optional 1-based position in the Dock.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Annotated[str, Field(min_length=1)]
    position: Annotated[int | None, Field(ge=1)] = None

    @property
    def label(self) -> str:
        """Dock label as reported by dockutil (bundle name without .app)."""
        if self.name.endswith(".app"):
            return self.name.rsplit("/", 1)[-1].removesuffix(".app")
        return self.name

    @property
    def bundle_path(self) -> str:
        """Path dockutil needs to add the app."""
        if self.name.endswith(".app"):
            return self.name
        return f"/Applications/{self.name}.app"


class MacOSConfig(BaseModel):
    """macOS section of the config.

    Attributes:
        settings: Preference keys to manage.
        dock_apps: Exact set of persistent Dock apps; None or empty leaves the Dock alone.
        wallpaper: Desktop picture path; None leaves the wallpaper alone.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    settings: Annotated[list[MacOSSetting], Field(default_factory=list)]
    dock_apps: list[DockApp] | None = None
    wallpaper: str | None = None

    @field_validator("dock_apps", mode="before")
    @classmethod
    def expand_dock_shorthand(cls, value: Any) -> Any:
        """Allow plain app names as shorthand for ``{name = ...}``."""
        if isinstance(value, list):
            return [{"name": item} if isinstance(item, str) else item for item in value]
        return value


class GitSetting(BaseModel):
    """A git config key.

    Attributes:
        scope: Config scope (global, system or local).
        key: Dotted git config key (e.g. "user.name").
        value: Desired value.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    scope: GitScope = "global"
    key: Annotated[str, Field(min_length=1)]
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, value: Any) -> Any:
        """git stores every value as text; accept TOML booleans and numbers."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @property
    def identity(self) -> str:
        """``scope.key`` identity used to index observed git settings."""
        return f"{self.scope}.{self.key}"


class GitConfig(BaseModel):
    """Git section of the config."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    settings: Annotated[list[GitSetting], Field(default_factory=list)]


class ManagedFile(BaseModel):
    """A dotfile generated from a source and symlinked into place.

    Attributes:
        source: Source file, relative to the config file's directory.
        target: Symlink location (``~`` is expanded).
        backup: Move an existing regular file to ``<target>.backup`` first.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: Annotated[str, Field(min_length=1)]
    target: Annotated[str, Field(min_length=1)]
    backup: bool = False


class DesiredConfig(BaseModel):
    """Complete desired state of the workstation.

    Every section is optional; an absent section means "nothing declared".
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    brew: BrewConfig = Field(default_factory=BrewConfig)
    appstore: AppStoreConfig = Field(default_factory=AppStoreConfig)
    macos: MacOSConfig = Field(default_factory=MacOSConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    files: Annotated[list[ManagedFile], Field(default_factory=list)]

    def setting_identities(self) -> tuple[SettingIdentity, ...]:
        """Identities of all declared preference keys, in declared order."""
        return tuple(setting.identity for setting in self.macos.settings)

    @property
    def item_count(self) -> int:
        """Total number of declared items across all sections."""
        return (
            len(self.brew.packages)
            + len(self.brew.casks)
            + len(self.appstore.apps)
            + len(self.macos.settings)
            + len(self.macos.dock_apps or [])
            + (1 if self.macos.wallpaper else 0)
            + len(self.git.settings)
            + len(self.files)
        )
