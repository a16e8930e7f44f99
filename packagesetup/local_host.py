"""File-backed host services.

Lets the setup hook run outside a full host installation. State lives below
the host home directory:

    <home>/
    ├── Kernel/Config/settings.yaml     # settings and deployment history
    ├── var/packages/
    │   ├── registry.yaml               # installed packages index
    │   └── <Name>-<Version>.opm        # installed package content
    └── var/packagesetup/ITSM/*.opm     # bundled package descriptors
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from packagesetup.config import RepositoryConfig
from packagesetup.descriptor import DescriptorError, PackageDescriptor
from packagesetup.host import (
    Deployment,
    HostServices,
    InstalledPackage,
    Setting,
    SettingUpdate,
)

logger = logging.getLogger(__name__)

SETTINGS_FILE = Path("Kernel") / "Config" / "settings.yaml"
PACKAGES_DIR = Path("var") / "packages"
REGISTRY_FILE = "registry.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _dump_yaml(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def default_settings() -> dict[str, dict[str, Any]]:
    """Settings a fresh host ships with."""
    repository = RepositoryConfig()
    return {
        repository.setting_name: {
            "effective_value": [
                {
                    "Name": repository.placeholder_name,
                    "URL": "https://download.example.com/packages/",
                    "AuthHeaderKey": "",
                    "AuthHeaderValue": "",
                }
            ],
            "is_valid": False,
        }
    }


class LocalSettingsService:
    """Settings store kept in a YAML file."""

    def __init__(self, home: Path):
        self.path = Path(home) / SETTINGS_FILE

    def _load(self) -> dict[str, Any]:
        data = _load_yaml(self.path)
        if "settings" not in data:
            data["settings"] = default_settings()
        data.setdefault("deployments", [])
        return data

    def all_settings(self) -> dict[str, dict[str, Any]]:
        return self._load()["settings"]

    def setting_get(self, name: str) -> Setting | None:
        entry = self.all_settings().get(name)
        if entry is None:
            return None
        return Setting(
            name=name,
            effective_value=entry.get("effective_value"),
            is_valid=bool(entry.get("is_valid", False)),
        )

    def settings_set(
        self,
        user_id: int,
        comments: str,
        settings: list[SettingUpdate],
    ) -> bool:
        """Write all settings and record one deployment."""
        data = self._load()
        for update in settings:
            data["settings"][update.name] = {
                "effective_value": update.effective_value,
                "is_valid": update.is_valid,
            }

        deployment = Deployment(
            user_id=user_id,
            comments=comments,
            settings=[update.name for update in settings],
            deployed_at=datetime.now(timezone.utc).isoformat(),
        )
        data["deployments"].append(deployment.model_dump())

        try:
            _dump_yaml(self.path, data)
        except OSError as e:
            logger.error("Could not write %s: %s", self.path, e)
            return False
        return True

    def deployments(self) -> list[Deployment]:
        return [Deployment.model_validate(d) for d in self._load()["deployments"]]


class LocalConfigStore:
    """Host configuration: ``Home`` plus the effective setting values.

    Setting values are read once and cached until ``reload`` is called.
    """

    def __init__(self, home: Path, settings: LocalSettingsService):
        self.home = Path(home)
        self.settings = settings
        self._cache: dict[str, Any] | None = None

    def get(self, key: str) -> Any:
        if key == "Home":
            return str(self.home)
        if self._cache is None:
            self._cache = {
                name: entry.get("effective_value")
                for name, entry in self.settings.all_settings().items()
            }
        return self._cache.get(key)

    def reload(self) -> None:
        self._cache = None


class LocalFileReader:
    """Binary file access for absolute locations."""

    def is_file(self, location: Path) -> bool:
        return Path(location).is_file()

    def read_file(self, location: Path) -> bytes | None:
        path = Path(location)
        if not path.is_file():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return None


class LocalPackageManager:
    """Package repository kept as descriptor files plus a YAML index.

    Example:
        >>> packages = LocalPackageManager(home)
        >>> packages.package_install(Path("GeneralCatalog.opm").read_bytes())
        True
        >>> packages.repository_list()
        [InstalledPackage(name='GeneralCatalog', version='6.0.30')]
    """

    def __init__(self, home: Path):
        self.packages_dir = Path(home) / PACKAGES_DIR
        self.registry_path = self.packages_dir / REGISTRY_FILE

    def _load_registry(self) -> list[dict[str, str]]:
        return list(_load_yaml(self.registry_path).get("packages", []))

    def _save_registry(self, packages: list[dict[str, str]]) -> None:
        _dump_yaml(self.registry_path, {"packages": packages})

    def repository_list(self) -> list[InstalledPackage]:
        return [InstalledPackage.model_validate(p) for p in self._load_registry()]

    def repository_get(self, name: str, version: str) -> bytes | None:
        for package in self._load_registry():
            if package["name"] == name and package["version"] == version:
                path = self.packages_dir / package["file"]
                return path.read_bytes() if path.is_file() else None
        return None

    def package_install(self, content: bytes) -> bool:
        """Install a package, replacing any installed version of it."""
        try:
            descriptor = PackageDescriptor.from_bytes(content)
        except DescriptorError as e:
            logger.error("Could not install package: %s", e)
            return False

        packages = self._remove(descriptor.name)

        self.packages_dir.mkdir(parents=True, exist_ok=True)
        (self.packages_dir / descriptor.file_name).write_bytes(content)
        packages.append(
            {
                "name": descriptor.name,
                "version": descriptor.version,
                "file": descriptor.file_name,
            }
        )
        self._save_registry(packages)
        return True

    def package_uninstall(self, content: bytes) -> bool:
        try:
            descriptor = PackageDescriptor.from_bytes(content)
        except DescriptorError as e:
            logger.error("Could not uninstall package: %s", e)
            return False

        before = self._load_registry()
        packages = self._remove(descriptor.name, descriptor.version)
        if len(packages) == len(before):
            return False
        self._save_registry(packages)
        return True

    def _remove(self, name: str, version: str | None = None) -> list[dict[str, str]]:
        """Delete matching package files; return the remaining index."""
        remaining = []
        for package in self._load_registry():
            matches = package["name"] == name and (
                version is None or package["version"] == version
            )
            if matches:
                (self.packages_dir / package["file"]).unlink(missing_ok=True)
            else:
                remaining.append(package)
        return remaining


class LocalHost:
    """Factory for file-backed host services."""

    @staticmethod
    def create(home: Path | str) -> HostServices:
        home = Path(home).resolve()
        settings = LocalSettingsService(home)
        return HostServices(
            config=LocalConfigStore(home, settings),
            files=LocalFileReader(),
            packages=LocalPackageManager(home),
            settings=settings,
        )
