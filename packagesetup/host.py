"""Contracts between the setup hook and the host runtime.

The host owns configuration, file storage, the package repository and the
settings store. The hook only talks to it through these protocols.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class InstalledPackage(BaseModel):
    """A package registered in the host package repository."""

    name: str
    version: str


class Setting(BaseModel):
    """A host configuration setting with its effective value."""

    name: str
    effective_value: Any = None
    is_valid: bool = False


class SettingUpdate(BaseModel):
    """One setting change inside a settings deployment."""

    name: str
    effective_value: Any = None
    is_valid: bool = False


class Deployment(BaseModel):
    """Record of one settings deployment."""

    user_id: int
    comments: str = ""
    settings: list[str] = Field(default_factory=list)
    deployed_at: str = ""


@runtime_checkable
class ConfigStore(Protocol):
    """Host configuration access."""

    def get(self, key: str) -> Any: ...

    def reload(self) -> None: ...


@runtime_checkable
class FileReader(Protocol):
    """Host file access."""

    def is_file(self, location: Path) -> bool: ...

    def read_file(self, location: Path) -> bytes | None: ...


@runtime_checkable
class PackageManager(Protocol):
    """Host package repository and installer."""

    def repository_list(self) -> list[InstalledPackage]: ...

    def repository_get(self, name: str, version: str) -> bytes | None: ...

    def package_install(self, content: bytes) -> bool: ...

    def package_uninstall(self, content: bytes) -> bool: ...


@runtime_checkable
class SettingsService(Protocol):
    """Host settings store."""

    def setting_get(self, name: str) -> Setting | None: ...

    def settings_set(
        self,
        user_id: int,
        comments: str,
        settings: list[SettingUpdate],
    ) -> bool: ...


@dataclass
class HostServices:
    """The host services a setup hook needs."""

    config: ConfigStore
    files: FileReader
    packages: PackageManager
    settings: SettingsService

    @property
    def home(self) -> Path:
        """Root directory of the host installation."""
        return Path(self.config.get("Home"))
