"""Configuration management for the ITSM package setup.

Loads configuration from:
1. packagesetup.toml (defaults)
2. Environment variables (overrides)
"""

import os
import sys
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

CONFIG_FILE_NAME = "packagesetup.toml"


class ConfigError(Exception):
    """Raised when the configuration file is invalid."""

    pass


@dataclass
class BundleConfig:
    """The packages shipped with the bundle."""

    package_path: str = "var/packagesetup/ITSM/"  # relative to host Home
    package_names: list[str] = field(
        default_factory=lambda: [
            "GeneralCatalog",
            "ITSMCore",
            "ITSMIncidentProblemManagement",
            "ITSMConfigurationManagement",
            "ITSMChangeManagement",
            "ITSMServiceLevelManagement",
            "ImportExport",
        ]
    )
    bundle_name: str = "ITSM"
    package_version: str = "6.0.30"
    minimum_version: str = "1.3.1"  # required for already installed ITSM packages


@dataclass
class RepositoryConfig:
    """Package repository registered in the host settings."""

    setting_name: str = "Package::RepositoryList"
    name: str = "Znuny::ITSM Bundle"
    url: str = "https://download.znuny.org/releases/itsm/bundle6x/"
    placeholder_name: str = "Example repository 1"
    user_id: int = 1
    comments: str = "Znuny::ITSM package setup"


@dataclass
class SetupConfig:
    """Main configuration container."""

    home: str = "."
    log_level: str = "INFO"
    bundle: BundleConfig = field(default_factory=BundleConfig)
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    source: str | None = None  # file the config was loaded from

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SetupConfig":
        """Create SetupConfig from dictionary."""
        data = dict(data)
        bundle_data = data.pop("bundle", {})
        repository_data = data.pop("repository", {})

        _check_keys("top level", data, cls, exclude={"bundle", "repository"})
        _check_keys("[bundle]", bundle_data, BundleConfig)
        _check_keys("[repository]", repository_data, RepositoryConfig)

        return cls(
            bundle=BundleConfig(**bundle_data),
            repository=RepositoryConfig(**repository_data),
            **data,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)


def _check_keys(
    section: str,
    data: dict[str, Any],
    schema: type,
    exclude: set[str] | None = None,
) -> None:
    """Reject keys the section's dataclass does not define."""
    known = {f.name for f in fields(schema)} - (exclude or set())
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown {section} config keys: {', '.join(unknown)}")


def find_config_file() -> Path | None:
    """Find packagesetup.toml in current or parent directories.

    Returns:
        Path to packagesetup.toml or None if not found.
    """
    current = Path.cwd()

    for directory in [current, *current.parents]:
        config_path = directory / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path

    return None


def load_config(config_path: Path | str | None = None) -> SetupConfig:
    """Load configuration from file and environment.

    Args:
        config_path: Optional explicit path to packagesetup.toml

    Returns:
        SetupConfig object with merged settings.

    Raises:
        ConfigError: If the file cannot be parsed or has unknown keys.
    """
    config_data: dict[str, Any] = {}
    source: str | None = None

    if config_path is None:
        config_path = find_config_file()

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, "rb") as f:
                    config_data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML in {path}: {e}")
            source = str(path)

    # Apply environment variable overrides
    env_overrides = {
        None: {
            "home": os.getenv("ITSM_HOME"),
            "log_level": os.getenv("LOG_LEVEL"),
        },
        "repository": {
            "url": os.getenv("ITSM_REPOSITORY_URL"),
        },
    }

    for section, values in env_overrides.items():
        target = config_data if section is None else config_data.setdefault(section, {})
        for key, value in values.items():
            if value is not None:
                target[key] = value

    config = SetupConfig.from_dict(config_data)
    config.source = source
    return config


# Global config instance (lazy loaded)
_config: SetupConfig | None = None


def get_config() -> SetupConfig:
    """Get the global configuration instance.

    Returns:
        SetupConfig object (loaded once, cached).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config

