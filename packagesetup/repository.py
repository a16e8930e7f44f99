"""Registration of the bundle package repository in the host settings.

The repository list is a host setting holding entries with at least ``Name``
and ``URL``. Registering the bundle repository is idempotent: once an entry
with the bundle URL exists, the setting is left alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from packagesetup.config import RepositoryConfig
from packagesetup.host import SettingsService, SettingUpdate

logger = logging.getLogger(__name__)


class RepositoryEntry(BaseModel):
    """One package repository record as stored in the host setting.

    Unknown keys are kept so entries written by other tools survive a
    round trip.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(default="", alias="Name")
    url: str = Field(default="", alias="URL")
    auth_header_key: str = Field(default="", alias="AuthHeaderKey")
    auth_header_value: str = Field(default="", alias="AuthHeaderValue")

    @field_validator("name", "url", "auth_header_key", "auth_header_value", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        # Empty YAML values load as None
        return "" if value is None else value

    def to_setting(self) -> dict[str, Any]:
        """Serialize with the host's key names."""
        return self.model_dump(by_alias=True)


@dataclass
class RepositoryListUpdate:
    """New value for the repository list setting."""

    entries: list[RepositoryEntry] = field(default_factory=list)
    is_valid: bool = False


def reconcile_repository_list(
    entries: list[RepositoryEntry],
    target: RepositoryEntry,
    *,
    placeholder_name: str,
    is_valid: bool,
) -> RepositoryListUpdate | None:
    """Work out the repository list with ``target`` registered.

    Args:
        entries: Current repository entries. Not modified.
        target: Repository to register.
        placeholder_name: Name of the example entry the host ships with.
        is_valid: Current validity flag of the setting.

    Returns:
        None if an entry with the target URL is already present, otherwise the
        new entries and validity flag. The placeholder entry is dropped; the
        setting becomes valid when it already was, or when the placeholder was
        its only entry.
    """
    if any(entry.url == target.url for entry in entries):
        return None

    placeholder_present = any(entry.name == placeholder_name for entry in entries)
    only_placeholder = len(entries) == 1 and placeholder_present

    new_entries = [entry for entry in entries if entry.name != placeholder_name]
    new_entries.append(target)

    return RepositoryListUpdate(
        entries=new_entries,
        is_valid=bool(is_valid or only_placeholder),
    )


def repository_entries(value: Any) -> list[RepositoryEntry]:
    """Parse a repository list setting value."""
    return [RepositoryEntry.model_validate(item) for item in value or []]


def target_entry(config: RepositoryConfig) -> RepositoryEntry:
    """Repository entry described by the configuration."""
    return RepositoryEntry(name=config.name, url=config.url)


def add_package_repository(
    settings: SettingsService,
    config: RepositoryConfig | None = None,
) -> bool:
    """Register the bundle repository in the repository list setting.

    Args:
        settings: Host settings service.
        config: Repository to register and the setting that holds the list.

    Returns:
        True if the repository is registered (now or already), False if the
        setting does not exist, holds invalid entries or could not be written.
    """
    config = config or RepositoryConfig()

    setting = settings.setting_get(config.setting_name)
    if setting is None:
        logger.debug("Setting %s not found, repository not added", config.setting_name)
        return False

    try:
        entries = repository_entries(setting.effective_value)
    except ValidationError as e:
        logger.error("Invalid entries in setting %s: %s", config.setting_name, e)
        return False

    update = reconcile_repository_list(
        entries,
        target_entry(config),
        placeholder_name=config.placeholder_name,
        is_valid=setting.is_valid,
    )
    if update is None:
        logger.debug("Repository %s already registered", config.url)
        return True

    success = settings.settings_set(
        user_id=config.user_id,
        comments=config.comments,
        settings=[
            SettingUpdate(
                name=config.setting_name,
                effective_value=[entry.to_setting() for entry in update.entries],
                is_valid=update.is_valid,
            )
        ],
    )
    if not success:
        logger.error("Could not update setting %s!", config.setting_name)
        return False

    logger.info("Added package repository %s (%s)", config.name, config.url)
    return True
